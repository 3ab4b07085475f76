"""
Badges router.

GET /users/{user_id}/badges   — badges granted to a user (oldest first)
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from badge_worker.db.base import get_db
from badge_worker.schemas.badges import UserBadgeListResponse, UserBadgeResponse
from badge_worker.services.badge_ledger import list_grants

router = APIRouter(prefix="/users", tags=["badges"])


@router.get(
    "/{user_id}/badges",
    response_model=UserBadgeListResponse,
    summary="List a user's granted badges",
)
def list_user_badges(user_id: str, db: Session = Depends(get_db)):
    items = list_grants(db, user_id)
    return UserBadgeListResponse(
        user_id=user_id,
        total=len(items),
        items=[
            UserBadgeResponse(
                badge_name=ub.badge_name,
                granted_at=ub.granted_at.isoformat() if ub.granted_at else "",
            )
            for ub in items
        ],
    )
