"""
Custom exception hierarchy for Promise Ledger.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.

The analytics engine itself raises only `ContractViolationError`, and only
when a caller breaks a precondition (e.g. negative unit counts). "No
activity" is always a normal zero-valued result, never an exception.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class LedgerException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ContractViolationError(LedgerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "CONTRACT_VIOLATION"

    def __init__(self, argument: str, value: Any, requirement: str):
        super().__init__(
            message=f"Invalid {argument}={value!r}: {requirement}.",
            details={"argument": argument, "value": value, "requirement": requirement},
        )


class SprintNotFoundError(LedgerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "SPRINT_NOT_FOUND"

    def __init__(self, sprint_id: int):
        super().__init__(
            message=f"Sprint {sprint_id} not found.",
            details={"sprint_id": sprint_id},
        )


class NoActiveSprintError(LedgerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NO_ACTIVE_SPRINT"

    def __init__(self):
        super().__init__(message="No active sprint. Create one or pass sprint_id.")


class CommitmentNotFoundError(LedgerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "COMMITMENT_NOT_FOUND"

    def __init__(self, commitment_id: int):
        super().__init__(
            message=f"Commitment {commitment_id} not found.",
            details={"commitment_id": commitment_id},
        )


class UnknownPriorityKeyError(LedgerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "UNKNOWN_PRIORITY_KEY"

    def __init__(self, unknown: list[str], allowed: list[str]):
        super().__init__(
            message=f"Unknown priority key(s): {', '.join(unknown)}.",
            details={"unknown": unknown, "allowed": allowed},
        )


class InvalidWindowError(LedgerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_WINDOW"

    def __init__(self, start: date, end: date):
        super().__init__(
            message=f"Window start {start} is after end {end}.",
            details={"start": str(start), "end": str(end)},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def ledger_exception_handler(request: Request, exc: LedgerException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
