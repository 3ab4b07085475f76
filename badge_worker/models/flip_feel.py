"""
Flip & Feel reflection sessions.

A session (flip_feel) is started, answered question by question
(flip_feel_responses) and completed when `finished_at` is set. Each
question belongs to exactly one category.
"""
import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from badge_worker.db.base import Base


class QuestionCategory(str, enum.Enum):
    school = "school"
    opposite_sex = "opposite_sex"
    peers = "peers"
    family = "family"
    crises = "crises"
    emotions = "emotions"
    recreation = "recreation"


def _uuid() -> str:
    return str(uuid.uuid4())


class FlipFeel(Base):
    __tablename__ = "flip_feel"

    flip_feel_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    responses: Mapped[list["FlipFeelResponse"]] = relationship(
        back_populates="session", cascade="all, delete-orphan"
    )


class FlipFeelQuestion(Base):
    __tablename__ = "flip_feel_questions"

    question_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    question_text: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    category: Mapped[str] = mapped_column(
        Enum(QuestionCategory, name="flip_feel_category_enum"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    choices: Mapped[list["FlipFeelChoice"]] = relationship(
        back_populates="question", cascade="all, delete-orphan"
    )


class FlipFeelChoice(Base):
    __tablename__ = "flip_feel_choices"

    choice_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    question_id: Mapped[str] = mapped_column(
        ForeignKey("flip_feel_questions.question_id", ondelete="CASCADE"), nullable=False
    )
    choice_text: Mapped[str] = mapped_column(Text, nullable=False)
    mood_label: Mapped[str] = mapped_column(Text, nullable=False)

    question: Mapped[FlipFeelQuestion] = relationship(back_populates="choices")


class FlipFeelResponse(Base):
    __tablename__ = "flip_feel_responses"

    response_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    flip_feel_id: Mapped[str] = mapped_column(
        ForeignKey("flip_feel.flip_feel_id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[str] = mapped_column(
        ForeignKey("flip_feel_questions.question_id", ondelete="CASCADE"), nullable=False
    )
    choice_id: Mapped[str] = mapped_column(
        ForeignKey("flip_feel_choices.choice_id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    session: Mapped[FlipFeel] = relationship(back_populates="responses")
