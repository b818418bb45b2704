"""Shared-secret bearer authentication."""

import secrets

from fastapi import Request

from ..errors import AuthError
from ..settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def check_bearer(authorization: str, settings: Settings) -> None:
    """
    Compare the Authorization header with ``Bearer <SERVICE_API_KEY>``.

    With no service key configured the check is skipped and every caller
    is accepted.

    Raises:
        AuthError: If a key is configured and the header does not match
    """
    if not settings.service_api_key:
        return
    expected = f"Bearer {settings.service_api_key}"
    if not secrets.compare_digest(authorization.encode(), expected.encode()):
        raise AuthError()


def require_service_key(request: Request) -> None:
    """FastAPI dependency wrapping ``check_bearer``."""
    check_bearer(request.headers.get("authorization", ""), get_settings(request))
