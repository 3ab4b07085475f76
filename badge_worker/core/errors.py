"""
Custom exception hierarchy for the badge worker.

Rule: every HTTP error has a machine-readable `code` string so the push
transport (and humans reading its dead-letter queue) can branch on it
without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class BadgeWorkerException(Exception):
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


class InvalidMessageError(BadgeWorkerException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "INVALID_MESSAGE"


class MissingPayloadFieldError(BadgeWorkerException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "MISSING_PAYLOAD_FIELD"

    def __init__(self, missing: list[str]):
        super().__init__(
            message=f"Payload is missing required field(s): {', '.join(missing)}.",
            details={"missing": missing},
        )


class UnknownEventTypeError(BadgeWorkerException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "UNKNOWN_EVENT_TYPE"

    def __init__(self, event_type: str):
        super().__init__(
            message=f"Unknown event type: {event_type}",
            details={"event_type": event_type},
        )


class BadgeProcessingError(BadgeWorkerException):
    """Evaluation failed; the push transport must redeliver the message."""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "PROCESSING_FAILED"

    def __init__(self, event_type: str, user_id: str, reason: str):
        super().__init__(
            message=f"Failed to process {event_type} for user {user_id}: {reason}",
            details={"event_type": event_type, "user_id": user_id},
        )


class RuleCatalogueError(BadgeWorkerException):
    """Raised at import time when the static badge rules are inconsistent."""
    code = "RULE_CATALOGUE_INVALID"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def badge_worker_exception_handler(
    request: Request, exc: BadgeWorkerException
) -> JSONResponse:
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
