"""Runs assembled prompts through the selected chat model."""

from typing import AsyncIterator, Optional, Sequence

from langchain_core.messages import BaseMessage

from .errors import UpstreamError
from .providers import ModelProvider
from .utils.logger import get_logger

log = get_logger(__name__)


async def invoke_chat(provider: ModelProvider, messages: Sequence[BaseMessage]) -> str:
    """Full reply text from the chat model."""
    try:
        return await provider.send(messages)
    except Exception as e:
        raise UpstreamError("chat model") from e


async def invoke_stream(provider: ModelProvider, messages: Sequence[BaseMessage]) -> AsyncIterator[str]:
    """
    Reply as a single-pass sequence of text fragments.

    Closing this generator (e.g. the client went away) closes the model
    stream instead of draining it.
    """
    fragments = provider.stream(messages)
    try:
        async for fragment in fragments:
            yield fragment
    except GeneratorExit:
        raise
    except Exception as e:
        raise UpstreamError("chat model stream") from e
    finally:
        await fragments.aclose()


async def open_stream(provider: ModelProvider, messages: Sequence[BaseMessage]) -> AsyncIterator[str]:
    """
    Start streaming and wait for the first fragment.

    Failures before the first fragment surface here, while the caller can
    still answer with an error status. The returned generator replays the
    first fragment and relays the rest.
    """
    fragments = invoke_stream(provider, messages)
    try:
        first: Optional[str] = await fragments.__anext__()
    except StopAsyncIteration:
        first = None
    except BaseException:
        await fragments.aclose()
        raise
    return _relay(first, fragments)


async def _relay(first: Optional[str], fragments: AsyncIterator[str]) -> AsyncIterator[str]:
    sent = 0
    try:
        if first is not None:
            sent += 1
            yield first
        async for fragment in fragments:
            sent += 1
            yield fragment
    except UpstreamError:
        log.error(f"Chat stream failed after {sent} fragments; response truncated", exc_info=True)
        raise
    finally:
        await fragments.aclose()
        log.info(f"Chat stream closed after {sent} fragments")
