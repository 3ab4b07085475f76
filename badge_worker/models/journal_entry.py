"""
JournalEntry — written by the journal service, read here for badge checks.

Content columns hold encrypted envelopes ({iv, content, tag}) and are never
decrypted by this worker.
"""
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from badge_worker.db.base import Base


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    journal_id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title_encrypted: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    content_encrypted: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    wellness_state: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
