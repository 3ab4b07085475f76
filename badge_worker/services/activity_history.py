"""
Activity History Store — read-only questions over one domain's records.

Three question shapes, answered for a single user as of now:
  has_first_entry(user)            at least one qualifying record
  has_reached_count(user, n)       at least n qualifying records
  has_consecutive_days(user, k)    some run of >= k adjacent UTC days

Flip & Feel also answers has_completed_all_categories(user, categories).

"Qualifying" is domain specific:
  journal / gratitude : is_deleted = false
  mood_check_in       : every row (no soft delete), dated by checked_in_at
  flip_feel           : finished_at IS NOT NULL, dated by finished_at

Nothing here writes. Storage errors (sqlalchemy.exc.SQLAlchemyError)
propagate untouched; an unreachable database is never reported as False.
"""
from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from badge_worker.models.flip_feel import FlipFeel, FlipFeelQuestion, FlipFeelResponse
from badge_worker.models.gratitude_entry import GratitudeEntry
from badge_worker.models.journal_entry import JournalEntry
from badge_worker.models.mood_check_in import MoodCheckIn
from badge_worker.services.rule_catalogue import ActivityDomain
from badge_worker.services.streaks import has_run_of, utc_date


class ActivityHistory:
    """
    Shared query plumbing. Subclasses set `model` and `timestamp_field`, and
    override `_qualifying` to add their domain filter.
    """

    model: type
    timestamp_field: str = "created_at"
    # Question methods this history can answer; checked by validate_catalogue.
    questions: frozenset[str] = frozenset({
        "has_first_entry", "has_reached_count", "has_consecutive_days",
    })

    def __init__(self, db: Session):
        self.db = db

    def _qualifying(self, user_id: str) -> Query:
        return self.db.query(self.model).filter(self.model.user_id == user_id)

    def has_first_entry(self, user_id: str) -> bool:
        return self._qualifying(user_id).first() is not None

    def has_reached_count(self, user_id: str, n: int) -> bool:
        count: int = (
            self._qualifying(user_id)
            .with_entities(func.count(self.model.user_id))
            .scalar()
            or 0
        )
        return count >= n

    def has_consecutive_days(self, user_id: str, days: int) -> bool:
        rows = (
            self._qualifying(user_id)
            .with_entities(getattr(self.model, self.timestamp_field))
            .all()
        )
        return has_run_of(_dates(ts for (ts,) in rows), days)

    def has_completed_all_categories(self, user_id: str, categories: Iterable[str]) -> bool:
        raise NotImplementedError(
            f"{type(self).__name__} does not track question categories"
        )


def _dates(timestamps: Iterable[datetime | None]):
    return {utc_date(ts) for ts in timestamps if ts is not None}


class JournalHistory(ActivityHistory):
    model = JournalEntry

    def _qualifying(self, user_id: str) -> Query:
        return super()._qualifying(user_id).filter(JournalEntry.is_deleted.is_(False))


class GratitudeHistory(ActivityHistory):
    model = GratitudeEntry

    def _qualifying(self, user_id: str) -> Query:
        return super()._qualifying(user_id).filter(GratitudeEntry.is_deleted.is_(False))


class MoodCheckInHistory(ActivityHistory):
    model = MoodCheckIn
    timestamp_field = "checked_in_at"


class FlipFeelHistory(ActivityHistory):
    """Completed reflection sessions only; a session counts on the day it finished."""

    model = FlipFeel
    timestamp_field = "finished_at"
    questions = ActivityHistory.questions | {"has_completed_all_categories"}

    def _qualifying(self, user_id: str) -> Query:
        return super()._qualifying(user_id).filter(FlipFeel.finished_at.is_not(None))

    def has_completed_all_categories(self, user_id: str, categories: Iterable[str]) -> bool:
        required = set(categories)
        covered: int = (
            self.db.query(func.count(func.distinct(FlipFeelQuestion.category)))
            .select_from(FlipFeel)
            .join(FlipFeelResponse, FlipFeelResponse.flip_feel_id == FlipFeel.flip_feel_id)
            .join(FlipFeelQuestion, FlipFeelQuestion.question_id == FlipFeelResponse.question_id)
            .filter(
                FlipFeel.user_id == user_id,
                FlipFeel.finished_at.is_not(None),
                FlipFeelQuestion.category.in_(sorted(required)),
            )
            .scalar()
            or 0
        )
        return covered >= len(required)


_HISTORIES: dict[ActivityDomain, type[ActivityHistory]] = {
    ActivityDomain.journal: JournalHistory,
    ActivityDomain.flip_feel: FlipFeelHistory,
    ActivityDomain.mood_check_in: MoodCheckInHistory,
    ActivityDomain.gratitude: GratitudeHistory,
}


def history_class(domain: ActivityDomain) -> type[ActivityHistory] | None:
    return _HISTORIES.get(domain)


def history_for(db: Session, domain: ActivityDomain) -> ActivityHistory:
    return _HISTORIES[domain](db)
