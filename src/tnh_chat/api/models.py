"""Pydantic models for the HTTP-only responses.

Chat request and response bodies live in ``tnh_chat.schemas`` and are
re-exported here for the routes.
"""

from typing import Dict, Optional

from pydantic import BaseModel

from ..schemas import (  # noqa: F401
    AISettings,
    ChatContext,
    ChatMeta,
    ChatRequest,
    ChatResponse,
    ConversationTurn,
    Source,
)


class HealthResponse(BaseModel):
    ok: bool
    provider: str
    port: int
    default_model: str
    default_embed_model: str
    environment: str
    timestamp: str


class ReindexStats(BaseModel):
    numAdded: int = 0
    numUpdated: int = 0
    numDeleted: int = 0
    numSkipped: int = 0


class ReindexResponse(BaseModel):
    ok: bool = True
    stats: ReindexStats = ReindexStats()
    message: str
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None


class DiagnosticsResponse(BaseModel):
    message: str
    timestamp: str
    environment: str
    provider: str
    openai_key_set: bool
    supabase_url_set: bool
    supabase_key_set: bool
    service_key_set: bool


class SimpleChatResponse(BaseModel):
    message: str
    context: ChatContext = ChatContext()
    meta: Dict[str, str]
