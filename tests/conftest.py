"""Shared fixtures and fakes for the chat service tests."""

import asyncio
from typing import Any, AsyncIterator, List, Optional

import pytest
from fastapi.testclient import TestClient
from langchain_core.documents import Document
from langchain_core.embeddings import FakeEmbeddings
from langchain_core.language_models import FakeListChatModel
from langchain_core.messages import BaseMessage
from langchain_core.retrievers import BaseRetriever

from tnh_chat.api.main import create_app
from tnh_chat.providers import LocalModelProvider, ProviderConfig
from tnh_chat.settings import Settings


class RecordingChatModel(FakeListChatModel):
    """Fake chat model that remembers every prompt it was given."""

    received: List[List[BaseMessage]] = []

    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        self.received.append(list(messages))
        return super()._call(messages, stop=stop, run_manager=run_manager, **kwargs)

    async def _astream(self, messages, stop=None, run_manager=None, **kwargs):
        self.received.append(list(messages))
        async for chunk in super()._astream(messages, stop=stop, run_manager=run_manager, **kwargs):
            yield chunk


class StaticRetriever(BaseRetriever):
    """Retriever returning a fixed document list."""

    docs: List[Document] = []
    queries: List[str] = []

    def _get_relevant_documents(self, query: str, *, run_manager: Any) -> List[Document]:
        self.queries.append(query)
        return list(self.docs)


class ClosableProvider(LocalModelProvider):
    """Provider whose stream records how far it got and whether it was closed."""

    def __init__(self, fragments: List[str], fail_at: Optional[int] = None, delay: float = 0.0):
        super().__init__(
            ProviderConfig("ollama", "llama3", "nomic-embed-text"),
            RecordingChatModel(responses=["".join(fragments)]),
            FakeEmbeddings(size=8),
        )
        self.fragments = fragments
        self.fail_at = fail_at
        self.delay = delay
        self.produced = 0
        self.closed = False

    async def stream(self, messages) -> AsyncIterator[str]:
        try:
            for i, fragment in enumerate(self.fragments):
                if i and self.delay:
                    await asyncio.sleep(self.delay)
                if self.fail_at is not None and i == self.fail_at:
                    raise ConnectionError("model connection dropped")
                self.produced += 1
                yield fragment
        finally:
            self.closed = True


def make_provider(*responses: str, model: str = "llama3") -> LocalModelProvider:
    """Local provider backed by fake chat and embedding models."""
    return LocalModelProvider(
        ProviderConfig("ollama", model, "nomic-embed-text"),
        RecordingChatModel(responses=list(responses) or ["ok"]),
        FakeEmbeddings(size=8),
    )


def article(url: Optional[str], title: Optional[str] = None, doc_id: Any = None, body: str = "body") -> Document:
    metadata = {}
    if url is not None:
        metadata["url"] = url
    if title is not None:
        metadata["title"] = title
    if doc_id is not None:
        metadata["id"] = doc_id
    return Document(page_content=body, metadata=metadata)


@pytest.fixture
def settings():
    """Settings with no vector index and no service key."""
    return Settings()


@pytest.fixture
def secured_settings():
    """Settings requiring a bearer token."""
    return Settings(service_api_key="s3cret", environment="production")


@pytest.fixture
def vector_settings():
    """Settings with a Supabase index configured."""
    return Settings(supabase_url="https://example.supabase.co", supabase_service_role_key="service-role")


@pytest.fixture
def client(settings):
    """Test client for an open (no service key) app."""
    return TestClient(create_app(settings))


@pytest.fixture
def secured_client(secured_settings):
    """Test client for an app requiring ``Bearer s3cret``."""
    return TestClient(create_app(secured_settings))
