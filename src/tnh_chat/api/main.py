"""
FastAPI application entry point.
"""
import time
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..errors import ServiceError, UpstreamError
from ..settings import Settings
from ..utils.logger import get_logger
from .models import ErrorResponse
from .routes import chat, health, legacy, reindex

log = get_logger(__name__)


def _error_response(status_code: int, error: str, detail: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, detail=detail).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def _failure_detail(exc: BaseException, settings: Settings) -> Optional[str]:
    if settings.is_production:
        return None
    cause = exc.__cause__ or exc
    return f"{type(cause).__name__}: {cause}"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the service application.

    Args:
        settings: Service settings; loaded from the environment when omitted

    Returns:
        Configured FastAPI app
    """
    settings = settings or Settings.load()
    get_logger(log_file_path=settings.log_file)

    app = FastAPI(
        title="TNH Chat Service",
        description="Chat answers for The New Humanitarian, grounded on CMS context or vector retrieval",
        version="0.1.0",
    )
    app.state.settings = settings

    # The CMS calls from its own origin and from browsers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        log.info(f"{request.method} {request.url.path} {response.status_code} - {elapsed_ms:.1f} ms")
        return response

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
        log.error(f"Upstream failure during {exc.stage} on {request.url.path}", exc_info=exc)
        return _error_response(exc.status_code, exc.public_message, _failure_detail(exc, settings))

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        log.info(f"Rejected {request.method} {request.url.path}: {exc.status_code} {exc.public_message}")
        return _error_response(exc.status_code, exc.public_message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        log.error(f"Unhandled error on {request.url.path}", exc_info=exc)
        return _error_response(500, "Server error", _failure_detail(exc, settings))

    @app.options("/api/{path:path}", include_in_schema=False)
    async def preflight(path: str) -> Response:
        return Response(status_code=200)

    app.include_router(chat.router, prefix="/api", tags=["chat"])
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(reindex.router, prefix="/api", tags=["reindex"])
    app.include_router(legacy.router, tags=["legacy"])

    @app.get("/")
    async def root() -> dict:
        """Root endpoint."""
        return {"message": "TNH Chat Service", "version": "0.1.0"}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tnh_chat.api.main:create_app", factory=True, host="0.0.0.0", port=Settings.load().port)
