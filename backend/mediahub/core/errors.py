"""Application error taxonomy and the handlers that turn it into JSON responses."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class MediaHubError(Exception):
    """Base class for errors that map onto a client-facing HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, errors: list[Any] | None = None) -> None:
        self.message = message or self.message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(MediaHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class ConflictError(MediaHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Record already exists"


class DuplicateUsername(ConflictError):
    message = "Username already exists"


class DuplicateEmail(ConflictError):
    message = "Email already exists"


class InvalidCredentials(MediaHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid username or password"


class AccessDenied(MediaHubError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied"


class Unauthenticated(MediaHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated"


class Forbidden(MediaHubError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied"


class NotFound(MediaHubError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


def _error_response(status_code: int, message: str, errors: list[Any] | None = None) -> JSONResponse:
    body: dict[str, Any] = {"message": message}
    if errors:
        body["errors"] = jsonable_encoder(errors)
    return JSONResponse(status_code=status_code, content=body)


async def _mediahub_error_handler(_: Request, exc: MediaHubError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message, exc.errors)


async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in error["loc"] if part != "body"), "message": error["msg"]}
        for error in exc.errors()
    ]
    return _error_response(ValidationError.status_code, ValidationError.message, errors)


async def _storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MediaHubError, _mediahub_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _storage_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
