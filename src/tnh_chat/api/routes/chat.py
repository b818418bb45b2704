"""
Chat endpoints.
"""
import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError as PydanticValidationError

from ... import chat_service
from ...errors import ValidationError
from ..auth import get_settings, require_service_key
from ..models import ChatContext, ChatRequest, ChatResponse, SimpleChatResponse

router = APIRouter(dependencies=[Depends(require_service_key)])


async def parse_chat_request(request: Request) -> ChatRequest:
    """
    Validate the JSON body into a ChatRequest.

    Runs after authentication, so unauthorised callers never see a 400.

    Raises:
        ValidationError: If the body is not JSON or the message is missing,
                         empty or not text
    """
    try:
        body: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None
    if not isinstance(body, dict):
        raise ValidationError()

    try:
        return ChatRequest.model_validate(body)
    except PydanticValidationError as e:
        if any(err["loc"] and err["loc"][0] == "message" for err in e.errors()):
            raise ValidationError() from e
        raise ValidationError("Invalid request") from e


@router.post("/chat", response_model=ChatResponse)
async def chat(request: Request) -> ChatResponse:
    """Answer a question with the full reply, cited articles and model metadata."""
    req = await parse_chat_request(request)
    return await chat_service.handle_chat(req, get_settings(request))


@router.post("/chat-stream")
async def chat_stream(request: Request) -> StreamingResponse:
    """
    Answer a question as a plain-text stream.

    Errors before the first fragment produce the usual JSON error responses;
    later failures truncate the body.
    """
    req = await parse_chat_request(request)
    fragments = await chat_service.stream_chat(req, get_settings(request))
    return StreamingResponse(
        fragments,
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/chat-simple", response_model=SimpleChatResponse)
async def chat_simple(request: Request) -> SimpleChatResponse:
    """Echo endpoint for checking CMS integration without calling a model."""
    req = await parse_chat_request(request)
    return SimpleChatResponse(
        message=f'Hello! You said: "{req.message}". This is a simple test response.',
        context=ChatContext(),
        meta={
            "provider": "test",
            "model": "simple-test",
            "environment": get_settings(request).environment,
        },
    )
