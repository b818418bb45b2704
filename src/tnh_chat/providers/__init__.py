"""Chat/embedding model providers."""

from .base import ModelProvider, ProviderConfig, extract_text_content
from .factory import create_provider, default_provider_config, select_provider_config
from .local_provider import LocalModelProvider
from .openai_provider import OpenAIProvider

__all__ = [
    'ModelProvider',
    'ProviderConfig',
    'extract_text_content',
    'create_provider',
    'default_provider_config',
    'select_provider_config',
    'LocalModelProvider',
    'OpenAIProvider',
]
