"""
Domain errors and their single mapping to HTTP responses.

Services and auth dependencies raise AppError subclasses; the handlers
registered by `register_exception_handlers` turn them into the JSON
envelope `{message, code?, errors?}`. Route handlers never format errors.
"""
import enum
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from jobboard.config import settings

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    VALIDATION = "VALIDATION"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


HTTP_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    # Used for both "does not exist" and "exists but not yours"
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 400,
    ErrorKind.INTERNAL: 500,
}


class AppError(Exception):
    """Base class for errors that map to a client-facing response."""
    kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        errors: Optional[list[dict]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.errors = errors

    @property
    def status_code(self) -> int:
        return HTTP_STATUS[self.kind]

    def to_body(self) -> dict:
        body = {"message": self.message}
        if self.code:
            body["code"] = self.code
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationFailedError(AppError):
    kind = ErrorKind.VALIDATION

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailedError":
        return cls("Validation failed", errors=[{"field": field, "message": message}])


class UnauthorizedError(AppError):
    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(AppError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT


class InternalError(AppError):
    kind = ErrorKind.INTERNAL


def _field_name(loc: tuple) -> str:
    """('body', 'salaryMin') -> 'salaryMin'; ('query', 'page') -> 'page'."""
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.kind == ErrorKind.INTERNAL:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind == ErrorKind.UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(tuple(error.get("loc", ()))), "message": error.get("msg", "Invalid value")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    body = {"message": "Internal server error"}
    if settings.expose_error_details:
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
