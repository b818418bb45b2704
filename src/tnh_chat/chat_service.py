"""Chat service that orchestrates one pipeline run per request."""

from dataclasses import dataclass
from typing import AsyncIterator, List

from langchain_core.messages import BaseMessage

from .schemas import ChatContext, ChatMeta, ChatRequest, ChatResponse, Source
from .errors import UpstreamError
from .invoker import invoke_chat, open_stream
from .prompts import assemble_messages
from .providers import ModelProvider, ProviderConfig, create_provider, select_provider_config
from .retrieval import ContextMode, ResolvedContext, extract_sources, resolve_context, select_context_mode
from .settings import Settings
from .utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class PreparedTurn:
    """Everything needed to call the model for one request."""

    config: ProviderConfig
    provider: ModelProvider
    mode: ContextMode
    resolved: ResolvedContext
    messages: List[BaseMessage]


async def prepare_turn(req: ChatRequest, settings: Settings) -> PreparedTurn:
    """
    Select the provider, obtain grounding context and assemble the prompt.

    Args:
        req: Validated chat request
        settings: Service settings

    Returns:
        PreparedTurn ready for invocation

    Raises:
        UpstreamError: If building the clients or retrieval fails
    """
    log.info(f"Processing chat request with database_context length: {len(req.database_context)}")
    if req.ai_settings is not None and req.ai_settings.provider:
        log.info(f"Using CMS AI settings: {req.ai_settings.model_dump(exclude_none=True)}")
    else:
        log.info("Using environment variable defaults")

    config = select_provider_config(req.ai_settings, settings)
    try:
        provider = create_provider(config, settings)
    except Exception as e:
        raise UpstreamError("provider setup") from e
    log.info(f"Models selected, provider: {config.provider}, model: {config.chat_model}")

    try:
        mode = select_context_mode(req.database_context, provider.embeddings, settings)
        resolved = await resolve_context(mode, req.message)
    except Exception as e:
        raise UpstreamError("retrieval") from e
    log.info(f"Context mode: {type(mode).__name__}")

    messages = assemble_messages(mode, resolved, req.conversation_history, req.message)
    return PreparedTurn(config=config, provider=provider, mode=mode, resolved=resolved, messages=messages)


def compose_response(text: str, sources: List[Source], config: ProviderConfig) -> ChatResponse:
    return ChatResponse(
        message=text,
        context=ChatContext(relevant_articles=sources),
        meta=ChatMeta(provider=config.provider, model=config.chat_model),
    )


async def handle_chat(req: ChatRequest, settings: Settings) -> ChatResponse:
    """
    Answer a chat request with the full reply, cited sources and metadata.

    Args:
        req: Validated chat request
        settings: Service settings

    Returns:
        ChatResponse; ``relevant_articles`` is empty unless retrieval ran
    """
    turn = await prepare_turn(req, settings)
    text = await invoke_chat(turn.provider, turn.messages)
    sources = extract_sources(turn.resolved.documents_used)
    log.info(f"Response completed with {len(sources)} sources (length: {len(text)} characters)")
    return compose_response(text, sources, turn.config)


async def stream_chat(req: ChatRequest, settings: Settings) -> AsyncIterator[str]:
    """
    Answer a chat request as a stream of text fragments.

    Provider, context and first-fragment failures raise here, before any
    fragment is handed out. Sources and metadata are not attached to streams.

    Returns:
        Async iterator of reply fragments
    """
    turn = await prepare_turn(req, settings)
    if turn.resolved.documents_used:
        log.info(f"Streaming reply grounded on {len(turn.resolved.documents_used)} documents")
    return await open_stream(turn.provider, turn.messages)
