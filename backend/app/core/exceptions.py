"""
Error taxonomy and the boundary handlers that turn it into JSON responses.

Every error leaves the API as ``{"error": "<message>"}`` with the status
code of its class. Services raise these exceptions directly; routers let
them propagate to the handlers registered by ``register_exception_handlers``.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ERPError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ERPError):
    """Malformed or out-of-range input (400)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: str = None):
        if field:
            message = f"{field}: {message}"
        super().__init__(message)
        self.field = field


class AuthenticationError(ERPError):
    """Missing, invalid or expired credentials (401, or 403 for a bad token)."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(ERPError):
    """Caller is authenticated but its role may not do this (403)."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class NotFoundError(ERPError):
    """Entity absent, or owned by another company (404)."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(ERPError):
    """Duplicate unique key or a status change that is not allowed (409)."""

    status_code = status.HTTP_409_CONFLICT


def error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # Drop the leading "body"/"query"/"path" segment
    loc = [str(part) for part in first.get("loc", ())[1:]]
    field = ".".join(loc)
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def erp_error_handler(request: Request, exc: ERPError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(exc.status_code, exc.message, headers)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    # Usually a unique key taken by a concurrent insert
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return error_response(status.HTTP_409_CONFLICT, "Resource conflicts with an existing record")


async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = _format_validation_error(exc)
    logger.info(f"Validation failed on {request.method} {request.url.path}: {message}")
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(ERPError, erp_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
