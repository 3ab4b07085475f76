"""
Badge worker router — push-delivery endpoint.

POST /pubsub/badge-worker   — one activity event per delivery

Status codes drive the push subscription's ack/retry:
  204  processed (ack)
  400  malformed envelope/payload or unknown event type
  500  evaluation failed; the subscription redelivers
"""
from __future__ import annotations

import base64
import binascii
import json
import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from badge_worker.core.errors import (
    BadgeProcessingError,
    InvalidMessageError,
    MissingPayloadFieldError,
    UnknownEventTypeError,
)
from badge_worker.db.base import get_db
from badge_worker.schemas.common import ErrorResponse
from badge_worker.schemas.events import (
    EVENT_DOMAINS,
    ActivityEventType,
    ActivityPayload,
    PushEnvelope,
)
from badge_worker.services.badge_engine import evaluate_domain

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pubsub/badge-worker", tags=["badge-worker"])


# ---------------------------------------------------------------------------
# Decoding helpers
# ---------------------------------------------------------------------------

def _decode_payload(envelope: PushEnvelope) -> ActivityPayload:
    if envelope.message is None:
        raise InvalidMessageError("Bad Request: Invalid message format")
    if not envelope.message.data:
        raise InvalidMessageError("Bad Request: No data field")

    try:
        raw = base64.b64decode(envelope.message.data, validate=True)
        decoded = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise InvalidMessageError(
            "Bad Request: message data is not base64-encoded JSON",
            details={"reason": str(exc)},
        ) from exc
    if not isinstance(decoded, dict):
        raise InvalidMessageError("Bad Request: message data must be a JSON object")

    try:
        payload = ActivityPayload.model_validate(decoded)
    except ValidationError as exc:
        raise InvalidMessageError(
            "Bad Request: malformed payload",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc

    missing = [
        name for name, value in (("eventType", payload.event_type), ("userId", payload.user_id))
        if not value
    ]
    if missing:
        raise MissingPayloadFieldError(missing)
    return payload


def _resolve_event_type(raw: str) -> ActivityEventType:
    try:
        return ActivityEventType(raw)
    except ValueError:
        raise UnknownEventTypeError(raw) from None


# ---------------------------------------------------------------------------
# POST /pubsub/badge-worker
# ---------------------------------------------------------------------------

@router.post(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Evaluate badges for one activity event",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed message or unknown event type."},
        500: {"model": ErrorResponse, "description": "Evaluation failed; message will be redelivered."},
    },
)
def handle_badge_awarding(envelope: PushEnvelope, db: Session = Depends(get_db)):
    """
    Decode an activity event and run one badge evaluation pass for its
    domain and user. Safe to redeliver: grants are idempotent.
    """
    try:
        payload = _decode_payload(envelope)
        event_type = _resolve_event_type(payload.event_type)
    except (InvalidMessageError, MissingPayloadFieldError, UnknownEventTypeError) as exc:
        logger.warning("Rejected badge-worker message: %s", exc.message)
        raise

    logger.info("Processing event %s for user %s", event_type.value, payload.user_id)
    try:
        result = evaluate_domain(db, EVENT_DOMAINS[event_type], payload.user_id)
    except Exception as exc:
        raise BadgeProcessingError(
            event_type=event_type.value,
            user_id=payload.user_id,
            reason=str(exc) or type(exc).__name__,
        ) from exc

    logger.info(
        "Processed %s for user %s: granted=%s",
        event_type.value, payload.user_id, result.granted,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
