from .journal_entry import JournalEntry
from .gratitude_entry import GratitudeEntry
from .mood_check_in import MoodCheckIn
from .flip_feel import (
    FlipFeel,
    FlipFeelChoice,
    FlipFeelQuestion,
    FlipFeelResponse,
    QuestionCategory,
)
from .user_badge import UserBadge

__all__ = [
    "JournalEntry",
    "GratitudeEntry",
    "MoodCheckIn",
    "FlipFeel",
    "FlipFeelChoice",
    "FlipFeelQuestion",
    "FlipFeelResponse",
    "QuestionCategory",
    "UserBadge",
]
