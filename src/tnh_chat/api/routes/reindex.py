"""
Reindex endpoint.
"""
from fastapi import APIRouter, Depends

from ..auth import require_service_key
from ..models import ReindexResponse, ReindexStats
from .health import utc_timestamp

router = APIRouter(dependencies=[Depends(require_service_key)])


@router.post("/reindex", response_model=ReindexResponse)
async def reindex() -> ReindexResponse:
    """Accept a reindex request from the CMS.

    Indexing articles into the vector store is done outside this service;
    the counters are always zero.
    """
    return ReindexResponse(
        ok=True,
        stats=ReindexStats(),
        message="Reindex endpoint ready for implementation",
        timestamp=utc_timestamp(),
    )
