"""
Badge Ledger — granted-badge facts per user.

Idempotency
-----------
At most one user_badges row per (user_id, badge_name). `grant` checks for
the row first and skips if present; the unique constraint is the final
guard when two passes race on the same insert. An integrity error that
leaves no matching row behind is not a race and propagates. Each grant is committed on
its own so a later failure in the same pass cannot roll earlier grants back.
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from badge_worker.models.user_badge import UserBadge

logger = logging.getLogger(__name__)


def get_grants(db: Session, user_id: str) -> set[str]:
    rows = (
        db.query(UserBadge.badge_name)
        .filter(UserBadge.user_id == user_id)
        .all()
    )
    return {name for (name,) in rows}


def _grant_exists(db: Session, user_id: str, badge_name: str) -> bool:
    return (
        db.query(UserBadge.id)
        .filter(
            UserBadge.user_id == user_id,
            UserBadge.badge_name == badge_name,
        )
        .first()
        is not None
    )


def grant(db: Session, user_id: str, badge_name: str) -> bool:
    """
    Record that `user_id` earned `badge_name`. Returns True if a row was
    inserted, False if the badge was already held.
    """
    if _grant_exists(db, user_id, badge_name):
        return False
    db.add(UserBadge(user_id=user_id, badge_name=badge_name))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if not _grant_exists(db, user_id, badge_name):
            raise
        # Another pass inserted the same (user_id, badge_name) first.
        logger.info("Badge %r already granted to %s by a concurrent pass", badge_name, user_id)
        return False
    return True


def list_grants(db: Session, user_id: str) -> list[UserBadge]:
    """User's badges, oldest grant first."""
    return (
        db.query(UserBadge)
        .filter(UserBadge.user_id == user_id)
        .order_by(UserBadge.granted_at.asc(), UserBadge.id.asc())
        .all()
    )
