"""
Tests for the Activity History Store against a real (SQLite) database.

Covered:
  - first entry / count threshold boundary / streak per domain
  - soft-deleted journal and gratitude rows excluded from every question
  - multiple records on one UTC day count once toward a streak
  - flip & feel: only completed sessions count, dated by finished_at
  - category coverage: 6 of 7 fails, 7 (with repeats) passes
"""
from __future__ import annotations

from datetime import date, timedelta

import pytest

from badge_worker.services.activity_history import (
    FlipFeelHistory,
    GratitudeHistory,
    JournalHistory,
    MoodCheckInHistory,
    history_for,
)
from badge_worker.services.rule_catalogue import (
    REFLECTION_CATEGORIES,
    ActivityDomain,
    EntryCount,
    FirstEntry,
)

D = date(2025, 3, 10)


def _days(*offsets: int) -> list[date]:
    return [D + timedelta(days=o) for o in offsets]


class TestJournalHistory:
    def test_no_entries(self, db, user_id):
        h = JournalHistory(db)
        assert h.has_first_entry(user_id) is False
        assert h.has_reached_count(user_id, 1) is False
        assert h.has_consecutive_days(user_id, 1) is False

    def test_first_entry(self, db, seed, user_id):
        seed.journal(user_id, D)
        assert JournalHistory(db).has_first_entry(user_id) is True

    def test_count_threshold_boundary(self, db, seed, user_id):
        seed.journal(user_id, *_days(0, 0, 3, 9, 20))
        h = JournalHistory(db)
        assert h.has_reached_count(user_id, 5) is True
        assert h.has_reached_count(user_id, 6) is False

    def test_three_day_streak(self, db, seed, user_id):
        seed.journal(user_id, *_days(0, 1, 2))
        h = JournalHistory(db)
        assert h.has_consecutive_days(user_id, 3) is True
        assert h.has_consecutive_days(user_id, 4) is False

    def test_second_record_same_day_does_not_extend_streak(self, db, seed, user_id):
        seed.journal(user_id, *_days(0, 1, 2))
        seed.journal(user_id, *_days(2))
        h = JournalHistory(db)
        assert h.has_consecutive_days(user_id, 3) is True
        assert h.has_consecutive_days(user_id, 4) is False

    def test_gap_breaks_streak(self, db, seed, user_id):
        seed.journal(user_id, *_days(0, 1, 3))
        assert JournalHistory(db).has_consecutive_days(user_id, 3) is False

    def test_deleted_entry_not_a_first_entry(self, db, seed, user_id):
        seed.journal(user_id, D, deleted=True)
        assert JournalHistory(db).has_first_entry(user_id) is False

    def test_deleted_entries_not_counted(self, db, seed, user_id):
        seed.journal(user_id, *_days(0, 1, 2))
        seed.journal(user_id, *_days(3, 4), deleted=True)
        h = JournalHistory(db)
        assert h.has_reached_count(user_id, 3) is True
        assert h.has_reached_count(user_id, 4) is False

    def test_deleted_entry_does_not_bridge_streak(self, db, seed, user_id):
        seed.journal(user_id, *_days(0, 2))
        seed.journal(user_id, *_days(1), deleted=True)
        assert JournalHistory(db).has_consecutive_days(user_id, 3) is False

    def test_other_users_history_ignored(self, db, seed, user_id):
        seed.journal("someone-else", *_days(0, 1, 2))
        h = JournalHistory(db)
        assert h.has_first_entry(user_id) is False
        assert h.has_consecutive_days(user_id, 3) is False

    def test_categories_not_supported(self, db, user_id):
        with pytest.raises(NotImplementedError):
            JournalHistory(db).has_completed_all_categories(user_id, {"school"})


class TestGratitudeHistory:
    def test_first_entry_and_count(self, db, seed, user_id):
        seed.gratitude(user_id, *_days(0, 5, 10))
        h = GratitudeHistory(db)
        assert h.has_first_entry(user_id) is True
        assert h.has_reached_count(user_id, 3) is True
        assert h.has_reached_count(user_id, 4) is False

    def test_soft_delete_excluded_everywhere(self, db, seed, user_id):
        seed.gratitude(user_id, *_days(0, 1, 2), deleted=True)
        h = GratitudeHistory(db)
        assert h.has_first_entry(user_id) is False
        assert h.has_reached_count(user_id, 1) is False
        assert h.has_consecutive_days(user_id, 1) is False

    def test_seven_day_streak(self, db, seed, user_id):
        seed.gratitude(user_id, *_days(*range(7)))
        h = GratitudeHistory(db)
        assert h.has_consecutive_days(user_id, 7) is True
        assert h.has_consecutive_days(user_id, 8) is False


class TestMoodCheckInHistory:
    def test_fourteen_day_streak(self, db, seed, user_id):
        seed.mood(user_id, *_days(*range(14)))
        h = MoodCheckInHistory(db)
        assert h.has_consecutive_days(user_id, 14) is True
        assert h.has_consecutive_days(user_id, 15) is False

    def test_broken_streak(self, db, seed, user_id):
        seed.mood(user_id, *_days(0, 1, 2, 3, 4, 5, 7))
        assert MoodCheckInHistory(db).has_consecutive_days(user_id, 7) is False

    def test_first_entry_and_count(self, db, seed, user_id):
        h = MoodCheckInHistory(db)
        assert h.has_first_entry(user_id) is False
        seed.mood(user_id, *_days(0, 0, 4, 9, 12))
        assert h.has_first_entry(user_id) is True
        assert h.has_reached_count(user_id, 5) is True
        assert h.has_reached_count(user_id, 6) is False

    def test_mood_first_entry_and_count_rules_evaluate(self, db, seed, user_id):
        seed.mood(user_id, *_days(0, 1, 2, 3, 4))
        history = history_for(db, ActivityDomain.mood_check_in)
        assert FirstEntry().evaluate(history, user_id) is True
        assert EntryCount(5).evaluate(history, user_id) is True
        assert EntryCount(6).evaluate(history, user_id) is False


class TestFlipFeelHistory:
    def test_unfinished_session_is_not_a_first_entry(self, db, seed, user_id):
        seed.flip_feel(user_id, finished_on=None)
        assert FlipFeelHistory(db).has_first_entry(user_id) is False

    def test_finished_session_is_a_first_entry(self, db, seed, user_id):
        seed.flip_feel(user_id, finished_on=D)
        assert FlipFeelHistory(db).has_first_entry(user_id) is True

    def test_streak_dated_by_completion(self, db, seed, user_id):
        # All sessions started on the same day but finished on consecutive days.
        for d in _days(*range(7)):
            seed.flip_feel(user_id, finished_on=d, started_on=D - timedelta(days=30))
        assert FlipFeelHistory(db).has_consecutive_days(user_id, 7) is True

    def test_unfinished_sessions_do_not_count_toward_streak(self, db, seed, user_id):
        for d in _days(0, 1, 2):
            seed.flip_feel(user_id, finished_on=d)
        seed.flip_feel(user_id, finished_on=None, started_on=D + timedelta(days=3))
        h = FlipFeelHistory(db)
        assert h.has_consecutive_days(user_id, 3) is True
        assert h.has_consecutive_days(user_id, 4) is False

    def test_six_of_seven_categories(self, db, seed, user_id):
        six = tuple(sorted(REFLECTION_CATEGORIES))[:6]
        seed.flip_feel(user_id, finished_on=D, categories=six)
        assert FlipFeelHistory(db).has_completed_all_categories(
            user_id, REFLECTION_CATEGORIES
        ) is False

    def test_all_categories_across_sessions_with_repeats(self, db, seed, user_id):
        ordered = tuple(sorted(REFLECTION_CATEGORIES))
        seed.flip_feel(user_id, finished_on=D, categories=ordered[:4] + ordered[:2])
        seed.flip_feel(user_id, finished_on=D + timedelta(days=1), categories=ordered[3:])
        assert FlipFeelHistory(db).has_completed_all_categories(
            user_id, REFLECTION_CATEGORIES
        ) is True

    def test_categories_from_unfinished_session_ignored(self, db, seed, user_id):
        ordered = tuple(sorted(REFLECTION_CATEGORIES))
        seed.flip_feel(user_id, finished_on=D, categories=ordered[:6])
        seed.flip_feel(user_id, finished_on=None, categories=ordered[6:])
        assert FlipFeelHistory(db).has_completed_all_categories(
            user_id, REFLECTION_CATEGORIES
        ) is False


class TestHistoryFor:
    @pytest.mark.parametrize("domain,cls", [
        (ActivityDomain.journal, JournalHistory),
        (ActivityDomain.flip_feel, FlipFeelHistory),
        (ActivityDomain.mood_check_in, MoodCheckInHistory),
        (ActivityDomain.gratitude, GratitudeHistory),
    ])
    def test_domain_mapping(self, db, domain, cls):
        assert type(history_for(db, domain)) is cls
