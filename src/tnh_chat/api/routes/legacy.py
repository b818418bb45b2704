"""
Unprefixed routes kept for CMS installs that predate the ``/api`` paths.

``/chat`` keeps the service key check; ``/reindex`` and ``/health`` are open.
"""
from fastapi import APIRouter, Depends

from ..auth import require_service_key
from ..models import ChatResponse, HealthResponse, ReindexResponse
from . import chat, health, reindex

router = APIRouter()

router.add_api_route(
    "/chat",
    chat.chat,
    methods=["POST"],
    response_model=ChatResponse,
    dependencies=[Depends(require_service_key)],
)
router.add_api_route("/reindex", reindex.reindex, methods=["POST"], response_model=ReindexResponse)
router.add_api_route("/health", health.health, methods=["GET"], response_model=HealthResponse)
