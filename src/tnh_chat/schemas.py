"""Chat request and response types shared by the pipeline, the HTTP API and the CLI."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, StrictStr, field_validator


class ConversationTurn(BaseModel):
    """One prior turn of the conversation, passed through to the model as-is."""

    role: str
    content: str


class AISettings(BaseModel):
    """Per-request model override sent by the CMS."""

    provider: Optional[str] = None
    model: Optional[str] = None


class ChatRequest(BaseModel):
    """One chat turn as sent by the CMS."""

    message: StrictStr = Field(..., min_length=1)
    conversation_history: List[ConversationTurn] = []
    database_context: str = ""
    ai_settings: Optional[AISettings] = None

    @field_validator("conversation_history", mode="before")
    @classmethod
    def _null_history(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("database_context", mode="before")
    @classmethod
    def _null_context(cls, value: Any) -> Any:
        return "" if value is None else value


class Source(BaseModel):
    """A citable article derived from a retrieved document."""

    id: Optional[Any] = None
    url: str
    label: str


class ChatContext(BaseModel):
    relevant_articles: List[Source] = []


class ChatMeta(BaseModel):
    provider: str
    model: str


class ChatResponse(BaseModel):
    """Full reply with cited articles and the model that produced it."""

    message: str
    context: ChatContext
    meta: ChatMeta
