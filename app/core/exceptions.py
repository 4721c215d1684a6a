"""
Application error types and their HTTP translation.

Every failure leaves the API as a JSON body of the form
{"error": {"message": ..., "status": ...}} with the matching status code.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(AppError):
    """Malformed input, duplicates, invalid filters (400)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message="Bad Request"):
        super().__init__(message)


class UnauthorizedError(AppError):
    """Missing or insufficient role (401)."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message="Unauthorized"):
        super().__init__(message)


class NotFoundError(AppError):
    """No row for the given key (404)."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message="Not Found"):
        super().__init__(message)


def _error_body(message, status_code: int) -> dict:
    return {"error": {"message": message, "status": status_code}}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.status_code))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Shape and type violations are plain bad requests."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(messages, status.HTTP_400_BAD_REQUEST),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
