"""
Badge ledger read schemas.

GET /users/{user_id}/badges → UserBadgeListResponse
"""
from pydantic import BaseModel, Field


class UserBadgeResponse(BaseModel):
    badge_name: str
    granted_at: str = Field(description="UTC timestamp of the grant.")


class UserBadgeListResponse(BaseModel):
    user_id: str
    total: int
    items: list[UserBadgeResponse]
