import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...domain.errors import DomainError
from .responses import domain_error_response, error_response, status_for

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure with the ``{success, message, errors}`` envelope."""

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError):
        if status_for(exc) >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        return domain_error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = []
        for item in exc.errors():
            location = ".".join(str(part) for part in item.get("loc", ())[1:])
            errors.append(f"{location}: {item.get('msg')}" if location else str(item.get("msg")))
        return error_response(status.HTTP_400_BAD_REQUEST, "Validation error", errors)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        extra = {}
        if exc.status_code == status.HTTP_429_TOO_MANY_REQUESTS and exc.headers and "Retry-After" in exc.headers:
            extra["retryAfter"] = int(exc.headers["Retry-After"])
        response = error_response(exc.status_code, str(exc.detail), **extra)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
