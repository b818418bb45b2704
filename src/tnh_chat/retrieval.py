"""
Grounding context for the chat pipeline.

Chooses between the CMS-supplied context, Supabase vector retrieval and
ungrounded chat, and turns retrieved documents into prompt text and citations.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from langchain_community.vectorstores import SupabaseVectorStore
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from langchain_core.retrievers import BaseRetriever
from supabase import create_client

from .schemas import Source
from .settings import Settings
from .utils.logger import get_logger

log = get_logger(__name__)

MAX_SOURCES = 8


@dataclass(frozen=True)
class SuppliedContext:
    """Context text sent by the CMS; retrieval is skipped."""

    text: str


@dataclass(frozen=True)
class RetrievalContext:
    """Context fetched from the vector index for each query."""

    retriever: BaseRetriever


@dataclass(frozen=True)
class NoContext:
    """Ungrounded chat."""


ContextMode = Union[SuppliedContext, RetrievalContext, NoContext]


@dataclass(frozen=True)
class ResolvedContext:
    context_text: str = ""
    documents_used: List[Document] = field(default_factory=list)


def make_retriever(embeddings: Embeddings, settings: Settings) -> Optional[BaseRetriever]:
    """
    Create a Supabase similarity retriever bound to the embedding client.

    Args:
        embeddings: Embedding client of the selected provider
        settings: Service settings (Supabase URL/key, table, query, top k)

    Returns:
        Retriever returning the top ``settings.top_k`` documents, or None when
        no vector index is configured
    """
    if not settings.vector_store_configured:
        log.info("No Supabase configuration found, skipping vector store")
        return None

    client = create_client(settings.supabase_url, settings.supabase_service_role_key)
    vector_store = SupabaseVectorStore(
        client=client,
        embedding=embeddings,
        table_name=settings.supabase_table,
        query_name=settings.supabase_query_name,
    )
    return vector_store.as_retriever(search_kwargs={"k": settings.top_k})


def select_context_mode(database_context: str, embeddings: Embeddings, settings: Settings) -> ContextMode:
    """
    Decide how the answer is grounded.

    Explicit context always wins over retrieval; retrieval is the fallback;
    with neither the chat is ungrounded.
    """
    if database_context and database_context.strip():
        log.info("Using database_context, skipping retriever")
        return SuppliedContext(database_context)

    log.info("No database_context provided, attempting to get retriever")
    retriever = make_retriever(embeddings, settings)
    if retriever is not None:
        return RetrievalContext(retriever)
    return NoContext()


async def resolve_context(mode: ContextMode, query: str) -> ResolvedContext:
    """
    Produce the context text for the prompt and the documents consulted.

    Only the retrieval mode consults documents.
    """
    if isinstance(mode, SuppliedContext):
        return ResolvedContext(context_text=mode.text)
    if isinstance(mode, RetrievalContext):
        docs = list(await mode.retriever.ainvoke(query) or [])
        log.info(f"Retrieved {len(docs)} documents from vector store")
        return ResolvedContext(context_text=format_docs(docs), documents_used=docs)
    return ResolvedContext()


def format_docs(docs: Sequence[Document]) -> str:
    """Join document bodies with a blank line; no documents gives ''."""
    if not docs:
        return ""
    return "\n\n".join(d.page_content for d in docs)


def extract_sources(docs: Sequence[Document]) -> List[Source]:
    """
    Build the relevant_articles payload returned to the CMS.

    Documents without a url are skipped and the first document per url wins,
    keeping retrieval order. At most ``MAX_SOURCES`` entries are returned.

    Args:
        docs: Documents in retrieval order

    Returns:
        List of Source entries with id, url and label
    """
    seen = set()
    sources: List[Source] = []
    for d in docs or []:
        m = d.metadata or {}
        url = m.get("url")
        if not url or url in seen:
            continue
        seen.add(url)
        sources.append(
            Source(
                id=m.get("id"),
                url=url,
                label=m.get("title") or url or "Source",
            )
        )
    return sources[:MAX_SOURCES]
