"""Commit activity: bucket commit timestamps into per-day counts."""

from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from git_time_machine.models import ActivityDay, CommitSummary


def first_day(days: int, today: Optional[date] = None) -> date:
    """Oldest calendar day of a *days*-long window ending at *today*."""
    return (today or date.today()) - timedelta(days=max(days, 1) - 1)


def window_start(days: int, today: Optional[date] = None) -> datetime:
    """Local midnight that opens the *days*-long window ending at *today*.

    Queries pass this to ``git log --since`` so that "the last N days" means
    the same N calendar days the activity chart draws.
    """
    return datetime.combine(first_day(days, today), time.min).astimezone()


def bucket_by_day(
    timestamps: Iterable[datetime],
    days: int,
    today: Optional[date] = None,
) -> list[ActivityDay]:
    """Count commits per calendar day over the last *days* days.

    The result has exactly ``days`` entries, oldest first, ending at *today*.
    Days without commits are present with a count of 0 so the series can be
    plotted directly. Aware timestamps are bucketed by the local calendar
    day, matching *today*; anything outside the window is ignored.
    """
    if days < 1:
        return []
    first = first_day(days, today)

    counts = Counter(ts.astimezone().date() for ts in timestamps)
    window = [first + timedelta(days=offset) for offset in range(days)]
    return [ActivityDay(day=d, commits=counts.get(d, 0)) for d in window]


def activity_from_commits(
    commits: Iterable[CommitSummary],
    days: int,
    today: Optional[date] = None,
) -> list[ActivityDay]:
    return bucket_by_day((c.date for c in commits), days, today=today)


def busiest_day(activity: list[ActivityDay]) -> Optional[ActivityDay]:
    """Day with the most commits (the earliest one on ties), or None if idle."""
    best: Optional[ActivityDay] = None
    for entry in activity:
        if entry.commits and (best is None or entry.commits > best.commits):
            best = entry
    return best
