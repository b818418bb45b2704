"""Provider selection and construction."""

from typing import Optional

from ..schemas import AISettings
from ..settings import OLLAMA, OPENAI, Settings
from .base import ModelProvider, ProviderConfig
from .local_provider import LocalModelProvider
from .openai_provider import OpenAIProvider

# Chat model used when the CMS names a local provider without a model
FALLBACK_LOCAL_MODEL = "llama3"

PROVIDERS = {
    OPENAI: OpenAIProvider,
    OLLAMA: LocalModelProvider,
}


def _normalise(provider: Optional[str]) -> str:
    # Only the exact name "openai" selects OpenAI; anything else is local
    return OPENAI if provider == OPENAI else OLLAMA


def default_provider_config(settings: Settings) -> ProviderConfig:
    """Provider and models derived purely from the environment defaults."""
    provider = _normalise(settings.provider)
    if provider == OPENAI:
        return ProviderConfig(OPENAI, settings.openai_model, settings.openai_embed_model)
    return ProviderConfig(OLLAMA, settings.ollama_model, settings.ollama_embed_model)


def select_provider_config(ai_settings: Optional[AISettings], settings: Settings) -> ProviderConfig:
    """
    Resolve which provider and models serve this request.

    An explicit ``ai_settings.provider`` wins over the environment. The CMS
    settings carry no embedding model, so the embedding model always comes
    from the environment default of the chosen provider.

    Args:
        ai_settings: Optional per-request override from the CMS
        settings: Service settings

    Returns:
        ProviderConfig with provider ``"openai"`` or ``"ollama"``
    """
    if ai_settings is None or not ai_settings.provider:
        return default_provider_config(settings)

    provider = _normalise(ai_settings.provider)
    if provider == OPENAI:
        return ProviderConfig(
            OPENAI,
            ai_settings.model or settings.openai_model,
            settings.openai_embed_model,
        )
    return ProviderConfig(
        OLLAMA,
        ai_settings.model or FALLBACK_LOCAL_MODEL,
        settings.ollama_embed_model,
    )


def create_provider(config: ProviderConfig, settings: Settings) -> ModelProvider:
    """
    Create the provider variant for a resolved config.

    Args:
        config: Output of ``select_provider_config``
        settings: Service settings (hosts, keys, temperature, timeout)

    Returns:
        OpenAIProvider or LocalModelProvider instance
    """
    provider_cls = PROVIDERS.get(config.provider, LocalModelProvider)
    return provider_cls.from_settings(config, settings)
