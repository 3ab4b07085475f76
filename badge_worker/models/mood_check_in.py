import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from badge_worker.db.base import Base


class MoodCheckIn(Base):
    """One mood check-in: a primary mood plus up to two secondary moods. No soft delete."""

    __tablename__ = "mood_check_ins"

    check_in_id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    mood_1: Mapped[str] = mapped_column(String(64), nullable=False)
    mood_2: Mapped[str | None] = mapped_column(String(64), nullable=True)
    mood_3: Mapped[str | None] = mapped_column(String(64), nullable=True)
    checked_in_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
