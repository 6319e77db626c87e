# app/core/errors.py
"""
API error taxonomy.

Every domain violation is raised as one of these exceptions and turned into the
standard response envelope by the handlers registered in `register_error_handlers`.
"""
import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.responses import envelope

logger = logging.getLogger("uvicorn.error")


class ApiError(Exception):
    """Base class: carries an HTTP status, a message and optional payload."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: str | None = None, data: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class AuthenticationError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class AuthorizationError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class EmptyResultError(ApiError):
    """Valid query with zero results. Rendered as 204 without a body."""
    status_code = status.HTTP_204_NO_CONTENT
    default_message = "No results"


class DependencyError(ApiError):
    """An external collaborator (media store) failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "External service failure"


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    msg = first.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


async def api_error_handler(request: Request, exc: ApiError):
    if isinstance(exc, EmptyResultError):
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    if exc.status_code >= 500:
        logger.error("[api] %s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return envelope(exc.data, code=exc.status_code, message=exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return envelope(None, code=status.HTTP_400_BAD_REQUEST, message=_validation_message(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else None
    return envelope(None, code=exc.status_code, message=message)


def internal_error_response(request: Request, exc: Exception):
    """Convert an unexpected exception into an `InternalError` envelope."""
    logger.exception("[api] unhandled error on %s %s", request.method, request.url.path)
    data = None if settings.is_production else {"details": str(exc)}
    return envelope(data, code=InternalError.status_code, message=InternalError.default_message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    @app.middleware("http")
    async def guarded_scope(request: Request, call_next):
        # Anything not converted by the handlers above ends up here
        try:
            return await call_next(request)
        except Exception as exc:
            return internal_error_response(request, exc)
