"""Module: errors.

Domain error taxonomy shared by services and the HTTP layer. Services raise
these; the handlers registered by ``register_exception_handlers`` render them
as ``{"code", "message", "details"}`` bodies.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PetCareError(Exception):
    """Base class for every error reported to API callers."""

    status_code = 400
    default_code = "error"

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class NotFoundError(PetCareError):
    status_code = 404
    default_code = "not_found"


class UnauthorizedError(PetCareError):
    status_code = 401
    default_code = "unauthorized"


class ForbiddenError(PetCareError):
    status_code = 403
    default_code = "forbidden"


class InvalidStateError(PetCareError):
    status_code = 400
    default_code = "invalid_state"


class ConflictError(PetCareError):
    status_code = 409
    default_code = "conflict"


class ValidationFailedError(PetCareError):
    status_code = 422
    default_code = "validation_failed"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailedError":
        return cls(message, details={"fields": [{"field": field, "message": message}]})


def _field_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


async def _handle_petcare_error(request: Request, exc: PetCareError) -> JSONResponse:
    if exc.status_code >= 409 or isinstance(exc, InvalidStateError):
        logger.warning("%s %s rejected: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [{"field": _field_path(err["loc"]), "message": err["msg"]} for err in exc.errors()]
    body = ValidationFailedError("Request validation failed", details={"fields": fields}).to_dict()
    return JSONResponse(status_code=ValidationFailedError.status_code, content=body)


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"code": "internal_error", "message": "An unexpected error occurred", "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PetCareError, _handle_petcare_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
