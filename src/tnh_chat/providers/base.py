"""Base interface for chat/embedding model providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Sequence, Union

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage

from ..settings import Settings


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved provider and model names for one request."""

    provider: str
    chat_model: str
    embed_model: str


def extract_text_content(content: Union[str, List[Union[str, Dict[str, Any]]]]) -> str:
    """
    Extract text content from a message content field.

    Handles both string format and list format (e.g., [{'type': 'text', 'text': '...'}]).

    Args:
        content: Message content, either a string or a list of content blocks

    Returns:
        Extracted text as a string
    """
    if isinstance(content, str):
        return content
    elif isinstance(content, list):
        text_parts = []
        for block in content:
            if isinstance(block, str):
                text_parts.append(block)
            elif isinstance(block, dict) and "text" in block:
                text_parts.append(block["text"])
        return "".join(text_parts)
    else:
        return str(content)


class ModelProvider(ABC):
    """A chat client paired with an embedding client.

    Clients are stateless request issuers and safe to share across requests.
    """

    name: str = ""

    def __init__(self, config: ProviderConfig, chat: BaseChatModel, embeddings: Embeddings):
        self.config = config
        self.chat = chat
        self.embeddings = embeddings

    @classmethod
    @abstractmethod
    def from_settings(cls, config: ProviderConfig, settings: Settings) -> "ModelProvider":
        """Build the provider with live LangChain clients."""
        ...

    async def send(self, messages: Sequence[BaseMessage]) -> str:
        """
        Run the messages through the chat model and return the full reply.

        Args:
            messages: Assembled prompt messages

        Returns:
            Reply text
        """
        reply = await self.chat.ainvoke(list(messages))
        return extract_text_content(reply.content)

    async def stream(self, messages: Sequence[BaseMessage]) -> AsyncIterator[str]:
        """
        Stream the reply as text fragments; empty fragments are dropped.

        Closing the returned generator closes the underlying model stream.
        """
        chunks = self.chat.astream(list(messages))
        try:
            async for chunk in chunks:
                text = extract_text_content(chunk.content)
                if text:
                    yield text
        finally:
            await chunks.aclose()

    async def embed(self, text: str) -> List[float]:
        return await self.embeddings.aembed_query(text)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.config.chat_model!r}, embed_model={self.config.embed_model!r})"
