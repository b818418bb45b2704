"""
Health and diagnostics endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from ...providers import default_provider_config
from ..auth import get_settings
from ..models import DiagnosticsResponse, HealthResponse

router = APIRouter()


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Report the environment-default provider and models. No model is called."""
    settings = get_settings(request)
    defaults = default_provider_config(settings)
    return HealthResponse(
        ok=True,
        provider=defaults.provider,
        port=settings.port,
        default_model=defaults.chat_model,
        default_embed_model=defaults.embed_model,
        environment=settings.environment,
        timestamp=utc_timestamp(),
    )


@router.get("/test", response_model=DiagnosticsResponse)
async def diagnostics(request: Request) -> DiagnosticsResponse:
    """Which integrations are configured; only booleans, never the secrets."""
    settings = get_settings(request)
    return DiagnosticsResponse(
        message="Test endpoint working",
        timestamp=utc_timestamp(),
        environment=settings.environment,
        provider=settings.provider,
        openai_key_set=bool(settings.openai_api_key),
        supabase_url_set=bool(settings.supabase_url),
        supabase_key_set=bool(settings.supabase_service_role_key),
        service_key_set=bool(settings.service_api_key),
    )
