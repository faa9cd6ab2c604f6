"""Structured error types and exception handlers."""

from __future__ import annotations

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from fiscal.schemas import ErrorDetail


class FiscalHTTPException(HTTPException):
    def __init__(self, status_code: int, code: str, message: str, details: list[ErrorDetail] | None = None):
        self.code = code
        self.error_message = message
        self.details = details or []
        super().__init__(status_code=status_code, detail=message)


class UnauthorizedError(FiscalHTTPException):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(401, "UNAUTHORIZED", message)


class NotFoundError(FiscalHTTPException):
    """Missing, or owned by somebody else; the two are indistinguishable to callers."""

    def __init__(self, message: str):
        super().__init__(404, "NOT_FOUND", message)


class ForbiddenError(FiscalHTTPException):
    def __init__(self, message: str):
        super().__init__(403, "FORBIDDEN", message)


class ValidationFailedError(FiscalHTTPException):
    def __init__(self, message: str, details: list[ErrorDetail] | None = None):
        super().__init__(422, "VALIDATION_ERROR", message, details)


class ConflictError(FiscalHTTPException):
    def __init__(self, code: str, message: str):
        super().__init__(409, code, message)


def fiscal_http_handler(_request: Request, exc: FiscalHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.error_message,
                "details": [d.model_dump(exclude_none=True) for d in exc.details],
            }
        },
    )


def validation_error_handler(_request: Request, exc: RequestValidationError | ValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        details.append({"field": loc, "issue": err["msg"]})
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": details,
            }
        },
    )
