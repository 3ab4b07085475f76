"""
Consecutive-day run detection.

Dates that belong to the same unbroken run share the value
`ordinal(date) - rank(date)` once the distinct dates are sorted ascending,
so the longest run is the size of the largest such group.

    dates : 03-01  03-02  03-03  03-05  03-06
    rank  :   0      1      2      3      4
    key   :   K      K      K     K+1    K+1     -> longest run = 3

Pure functions, no database access.
"""
from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timezone
from typing import Iterable


def utc_date(ts: datetime) -> date:
    """Calendar day of `ts` in UTC. Naive timestamps are taken as UTC already."""
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(timezone.utc).date()


def longest_run(dates: Iterable[date]) -> int:
    """Length of the longest run of day-adjacent dates (duplicates count once)."""
    ordered = sorted(set(dates))
    if not ordered:
        return 0
    groups = Counter(d.toordinal() - rank for rank, d in enumerate(ordered))
    return max(groups.values())


def has_run_of(dates: Iterable[date], days: int) -> bool:
    if days < 1:
        raise ValueError(f"streak length must be a positive integer, got {days}")
    return longest_run(dates) >= days
