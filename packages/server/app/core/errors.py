"""
Error taxonomy and HTTP mapping.

Services raise ``DomainError`` subclasses; the handlers registered here turn
them into the stable ``{"error": {code, message, status}}`` envelope. Entities
that are missing and entities owned by another tenant both surface as
``NotFoundError`` so callers cannot discover other tenants' ids.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from taskforge_shared.schemas.common import ErrorDetail, ErrorResponse

log = structlog.get_logger()


class DomainError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    status_code = 404
    code = "NOT_FOUND"


class InvalidArgumentError(DomainError):
    status_code = 400
    code = "INVALID_ARGUMENT"


class ConflictError(DomainError):
    status_code = 409
    code = "CONFLICT"


class UnauthenticatedError(DomainError):
    status_code = 401
    code = "UNAUTHENTICATED"


class ForbiddenError(DomainError):
    status_code = 403
    code = "FORBIDDEN"


def error_response(status: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, status=status))
    return JSONResponse(status_code=status, content=body.model_dump())


async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return error_response(exc.status_code, exc.code, exc.message)


async def _integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # A unique constraint rejected the loser of a concurrent write.
    log.warning("db.integrity_error", path=request.url.path, error=str(exc.orig))
    return error_response(409, ConflictError.code, "Resource already exists")


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("request.unhandled_error", path=request.url.path, exc_info=exc)
    return error_response(500, DomainError.code, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(IntegrityError, _integrity_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
