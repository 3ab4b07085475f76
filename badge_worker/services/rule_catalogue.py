"""
Static badge rule catalogue.

Every badge is one row in BADGE_RULES: a unique key, the activity domain
that can earn it, the badge name written to the ledger, and a predicate.
Predicates are small tagged variants that know how to ask an
ActivityHistory the right question, so the engine loop never branches on
rule keys. Adding a badge is a data change here, not a code change.

The catalogue is validated once at import of the application module
(see badge_worker.main); a broken catalogue must stop the process.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Iterable, Union

from badge_worker.core.errors import RuleCatalogueError

if TYPE_CHECKING:
    from badge_worker.services.activity_history import ActivityHistory


class ActivityDomain(str, enum.Enum):
    journal = "journal"
    flip_feel = "flip_feel"
    mood_check_in = "mood_check_in"
    gratitude = "gratitude"


REFLECTION_CATEGORIES: frozenset[str] = frozenset({
    "school", "opposite_sex", "peers", "family", "crises", "emotions", "recreation",
})


# ---------------------------------------------------------------------------
# Predicate variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FirstEntry:
    question: ClassVar[str] = "has_first_entry"

    def evaluate(self, history: ActivityHistory, user_id: str) -> bool:
        return history.has_first_entry(user_id)


@dataclass(frozen=True)
class EntryCount:
    question: ClassVar[str] = "has_reached_count"
    n: int

    def evaluate(self, history: ActivityHistory, user_id: str) -> bool:
        return history.has_reached_count(user_id, self.n)


@dataclass(frozen=True)
class ConsecutiveDays:
    question: ClassVar[str] = "has_consecutive_days"
    n: int

    def evaluate(self, history: ActivityHistory, user_id: str) -> bool:
        return history.has_consecutive_days(user_id, self.n)


@dataclass(frozen=True)
class AllCategories:
    question: ClassVar[str] = "has_completed_all_categories"
    categories: frozenset[str]

    def evaluate(self, history: ActivityHistory, user_id: str) -> bool:
        return history.has_completed_all_categories(user_id, self.categories)


Predicate = Union[FirstEntry, EntryCount, ConsecutiveDays, AllCategories]


@dataclass(frozen=True)
class BadgeRule:
    key: str
    domain: ActivityDomain
    badge_name: str
    predicate: Predicate


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

_J = ActivityDomain.journal
_F = ActivityDomain.flip_feel
_M = ActivityDomain.mood_check_in
_G = ActivityDomain.gratitude

BADGE_RULES: tuple[BadgeRule, ...] = (
    BadgeRule("JOURNAL_FIRST_ENTRY",   _J, "New Beginnings",      FirstEntry()),
    BadgeRule("JOURNAL_3_STREAK",      _J, "Mindful Momentum",    ConsecutiveDays(3)),
    BadgeRule("JOURNAL_7_STREAK",      _J, "Mind Gardener",       ConsecutiveDays(7)),
    BadgeRule("JOURNAL_10_ENTRIES",    _J, "Voice of Reflection", EntryCount(10)),
    BadgeRule("JOURNAL_20_ENTRIES",    _J, "Journey Within",      EntryCount(20)),
    BadgeRule("JOURNAL_30_ENTRIES",    _J, "Keeper of Insight",   EntryCount(30)),

    BadgeRule("FLIP_AND_FEEL_FIRST",          _F, "First Step Inward",     FirstEntry()),
    BadgeRule("FLIP_AND_FEEL_ALL_CATEGORIES", _F, "Emotional Explorer",    AllCategories(REFLECTION_CATEGORIES)),
    BadgeRule("FLIP_AND_FEEL_7_STREAK",       _F, "Steady Self-Reflector", ConsecutiveDays(7)),

    BadgeRule("MOOD_CHECKIN_7_STREAK",  _M, "Steady Observer",      ConsecutiveDays(7)),
    BadgeRule("MOOD_CHECKIN_14_STREAK", _M, "Balanced Mind Keeper", ConsecutiveDays(14)),

    BadgeRule("GRATITUDE_FIRST_ENTRY",  _G, "Grateful Heart",        FirstEntry()),
    BadgeRule("GRATITUDE_10_ENTRIES",   _G, "Growing Gratitude",     EntryCount(10)),
    BadgeRule("GRATITUDE_25_ENTRIES",   _G, "Mindful Appreciator",   EntryCount(25)),
    BadgeRule("GRATITUDE_50_ENTRIES",   _G, "Beacon of Gratitude",   EntryCount(50)),
    BadgeRule("GRATITUDE_100_ENTRIES",  _G, "Radiant Gratitude",     EntryCount(100)),
    BadgeRule("GRATITUDE_3_STREAK",     _G, "Thankful Thinker",      ConsecutiveDays(3)),
    BadgeRule("GRATITUDE_7_STREAK",     _G, "Appreciation Advocate", ConsecutiveDays(7)),
)


def rules_for(domain: ActivityDomain) -> tuple[BadgeRule, ...]:
    """Rules earnable from `domain`, in catalogue order."""
    return tuple(rule for rule in BADGE_RULES if rule.domain == domain)


def validate_catalogue(rules: Iterable[BadgeRule] = BADGE_RULES) -> None:
    """Raise RuleCatalogueError if `rules` cannot drive the engine safely."""
    # Deferred: activity_history imports ActivityDomain from this module.
    from badge_worker.services.activity_history import history_class

    rules = tuple(rules)
    problems: list[str] = []

    seen_keys: set[str] = set()
    seen_names: set[str] = set()
    for rule in rules:
        if rule.key in seen_keys:
            problems.append(f"duplicate rule key {rule.key}")
        seen_keys.add(rule.key)
        if rule.badge_name in seen_names:
            problems.append(f"duplicate badge name {rule.badge_name!r}")
        seen_names.add(rule.badge_name)

        predicate = rule.predicate
        if isinstance(predicate, (EntryCount, ConsecutiveDays)) and predicate.n < 1:
            problems.append(f"{rule.key}: threshold must be >= 1, got {predicate.n}")
        if isinstance(predicate, AllCategories) and not predicate.categories:
            problems.append(f"{rule.key}: category set is empty")

        history = history_class(rule.domain)
        if history is None:
            problems.append(f"{rule.key}: no activity history for domain {rule.domain.value}")
        elif predicate.question not in history.questions:
            problems.append(
                f"{rule.key}: {history.__name__} cannot answer {predicate.question}"
            )

    covered = {rule.domain for rule in rules}
    for domain in ActivityDomain:
        if domain not in covered:
            problems.append(f"domain {domain.value} has no rules")

    if problems:
        raise RuleCatalogueError(
            message="Badge rule catalogue is invalid.",
            details={"problems": problems},
        )
