"""OpenAI-backed chat and embedding clients."""

from langchain_openai import ChatOpenAI, OpenAIEmbeddings

from ..settings import OPENAI, Settings
from .base import ModelProvider, ProviderConfig


class OpenAIProvider(ModelProvider):
    name = OPENAI

    @classmethod
    def from_settings(cls, config: ProviderConfig, settings: Settings) -> "OpenAIProvider":
        """
        Create ChatOpenAI / OpenAIEmbeddings clients for the resolved models.

        Raises:
            RuntimeError: If no OpenAI API key is configured
        """
        if not settings.openai_api_key:
            raise RuntimeError("Missing OpenAI API key in env var OPENAI_API_KEY")

        chat = ChatOpenAI(
            model=config.chat_model,
            temperature=settings.temperature,
            api_key=settings.openai_api_key,
            timeout=settings.model_timeout,
        )
        embeddings = OpenAIEmbeddings(
            model=config.embed_model,
            api_key=settings.openai_api_key,
        )
        return cls(config, chat, embeddings)
