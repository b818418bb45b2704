"""Local (Ollama) chat and embedding clients."""

from langchain_ollama import ChatOllama, OllamaEmbeddings

from ..settings import OLLAMA, Settings
from .base import ModelProvider, ProviderConfig


class LocalModelProvider(ModelProvider):
    name = OLLAMA

    @classmethod
    def from_settings(cls, config: ProviderConfig, settings: Settings) -> "LocalModelProvider":
        client_kwargs = {}
        if settings.model_timeout is not None:
            client_kwargs["timeout"] = settings.model_timeout

        chat = ChatOllama(
            base_url=settings.ollama_host,
            model=config.chat_model,
            temperature=settings.temperature,
            client_kwargs=client_kwargs,
        )
        embeddings = OllamaEmbeddings(
            base_url=settings.ollama_host,
            model=config.embed_model,
        )
        return cls(config, chat, embeddings)
