"""Structured error responses."""
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
import structlog
from ..errors import StoreUnavailable
from .correlation import get_correlation_id

log = structlog.get_logger()


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTP errors raised by routes and dependencies in the structured format."""
    log.warning(
        "http.exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.__class__.__name__,
            "message": exc.detail,
            "status_code": exc.status_code,
            "correlation_id": get_correlation_id(),
            "path": str(request.url.path)
        },
        headers=getattr(exc, "headers", None),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Provides structured error responses for exceptions escaping the app."""

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except StoreUnavailable as exc:
            correlation_id = get_correlation_id()
            log.error(
                "store.unavailable",
                operation=exc.operation,
                error=str(exc),
                path=request.url.path,
            )
            return JSONResponse(
                status_code=503,
                content={
                    "error": "StoreUnavailable",
                    "message": "The event store is temporarily unavailable",
                    "operation": exc.operation,
                    "correlation_id": correlation_id,
                    "path": str(request.url.path)
                }
            )
        except Exception as exc:
            correlation_id = get_correlation_id()
            log.error(
                "unhandled.exception",
                error=str(exc),
                error_type=exc.__class__.__name__,
                path=request.url.path,
                exc_info=True
            )
            return JSONResponse(
                status_code=500,
                content={
                    "error": "InternalServerError",
                    "message": "An unexpected error occurred",
                    "correlation_id": correlation_id,
                    "path": str(request.url.path)
                }
            )
