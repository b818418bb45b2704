"""Tests for provider selection and the provider variants."""

import asyncio

import pytest
from langchain_core.messages import HumanMessage
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI

from tnh_chat.providers import (
    LocalModelProvider,
    OpenAIProvider,
    ProviderConfig,
    create_provider,
    default_provider_config,
    extract_text_content,
    select_provider_config,
)
from tnh_chat.schemas import AISettings
from tnh_chat.settings import Settings

from conftest import make_provider


class TestSelectProviderConfig:
    """Test select_provider_config resolution rules."""

    def test_environment_defaults(self):
        """Test absent ai_settings uses the environment provider and models."""
        settings = Settings(provider="ollama", ollama_model="mistral", ollama_embed_model="mxbai")

        config = select_provider_config(None, settings)

        assert config == ProviderConfig("ollama", "mistral", "mxbai")

    def test_empty_ai_settings_uses_environment(self):
        """Test ai_settings without a provider is treated as absent."""
        settings = Settings(provider="openai")

        config = select_provider_config(AISettings(model="ignored"), settings)

        assert config == ProviderConfig("openai", "gpt-4o-mini", "text-embedding-3-small")

    def test_explicit_provider_wins(self):
        """Test ai_settings.provider overrides the environment provider."""
        settings = Settings(provider="ollama")

        config = select_provider_config(AISettings(provider="openai", model="gpt-4o"), settings)

        assert config.provider == "openai"
        assert config.chat_model == "gpt-4o"

    def test_explicit_local_provider_defaults_model(self):
        """Test a local provider without a model falls back to llama3."""
        settings = Settings(ollama_model="mistral")

        config = select_provider_config(AISettings(provider="ollama"), settings)

        assert config.chat_model == "llama3"

    def test_explicit_openai_without_model(self):
        """Test OpenAI without a model uses the OpenAI default."""
        settings = Settings(openai_model="gpt-4.1-mini")

        config = select_provider_config(AISettings(provider="openai"), settings)

        assert config.chat_model == "gpt-4.1-mini"

    def test_embedding_model_ignores_ai_settings(self):
        """Test the embedding model always comes from the environment default."""
        settings = Settings(ollama_embed_model="custom-embed", openai_embed_model="text-embedding-3-large")

        local = select_provider_config(AISettings(provider="ollama", model="phi3"), settings)
        remote = select_provider_config(AISettings(provider="openai", model="gpt-4o"), settings)

        assert local.embed_model == "custom-embed"
        assert remote.embed_model == "text-embedding-3-large"

    @pytest.mark.parametrize("name", ["anthropic", "OLLAMA", "", "gemini", "open-ai", "OpenAI", " openai", "OPENAI"])
    def test_other_names_resolve_to_local(self, name):
        """Test any provider other than openai resolves to the local model."""
        config = select_provider_config(AISettings(provider=name or None), Settings())

        assert config.provider == "ollama"

    def test_unknown_environment_provider(self):
        """Test an unknown PROVIDER value falls through to the local model."""
        config = default_provider_config(Settings(provider="bedrock"))

        assert config == ProviderConfig("ollama", "llama3", "nomic-embed-text")

    @pytest.mark.parametrize("name", ["OpenAI", "openai "])
    def test_environment_provider_matched_exactly(self, name):
        """Test PROVIDER must be exactly "openai" to select OpenAI."""
        assert default_provider_config(Settings(provider=name)).provider == "ollama"
        assert default_provider_config(Settings(provider="openai")).provider == "openai"


class TestCreateProvider:
    """Test create_provider builds the right variant."""

    def test_openai_variant(self):
        """Test openai config builds ChatOpenAI with fixed temperature."""
        settings = Settings(openai_api_key="sk-test")
        config = ProviderConfig("openai", "gpt-4o-mini", "text-embedding-3-small")

        provider = create_provider(config, settings)

        assert isinstance(provider, OpenAIProvider)
        assert isinstance(provider.chat, ChatOpenAI)
        assert provider.chat.temperature == 0.2
        assert provider.chat.model_name == "gpt-4o-mini"

    def test_openai_requires_key(self):
        """Test a missing OpenAI key is reported."""
        config = ProviderConfig("openai", "gpt-4o-mini", "text-embedding-3-small")

        with pytest.raises(RuntimeError):
            create_provider(config, Settings())

    def test_local_variant(self):
        """Test local config builds ChatOllama against the configured host."""
        settings = Settings(ollama_host="http://ollama:11434")
        config = ProviderConfig("ollama", "llama3", "nomic-embed-text")

        provider = create_provider(config, settings)

        assert isinstance(provider, LocalModelProvider)
        assert isinstance(provider.chat, ChatOllama)
        assert provider.chat.model == "llama3"
        assert provider.chat.base_url == "http://ollama:11434"
        assert provider.chat.temperature == 0.2


class TestProviderCapabilities:
    """Test send / stream / embed on a provider with fake clients."""

    def test_send_returns_text(self):
        """Test send returns the full reply text."""
        provider = make_provider("Paris is the capital of France.")

        text = asyncio.run(provider.send([HumanMessage(content="Capital of France?")]))

        assert text == "Paris is the capital of France."

    def test_stream_concatenates_to_send(self):
        """Test streamed fragments join to the same text as send."""
        reply = "Aid cuts hit Sudan hardest, says report."

        async def collect():
            return [f async for f in make_provider(reply).stream([HumanMessage(content="q")])]

        fragments = asyncio.run(collect())
        full = asyncio.run(make_provider(reply).send([HumanMessage(content="q")]))

        assert len(fragments) > 1
        assert "".join(fragments) == full

    def test_embed_returns_vector(self):
        """Test embed returns a vector of the embedding size."""
        vector = asyncio.run(make_provider().embed("humanitarian"))

        assert len(vector) == 8


class TestExtractTextContent:
    """Test extract_text_content."""

    def test_string(self):
        assert extract_text_content("hello") == "hello"

    def test_content_blocks(self):
        """Test list content blocks are joined."""
        blocks = [{"type": "text", "text": "Hel"}, "lo", {"type": "image_url", "image_url": "x"}]
        assert extract_text_content(blocks) == "Hello"
