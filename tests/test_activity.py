"""Tests for commit activity bucketing and hotspot ranking."""

from datetime import date, datetime, timedelta, timezone

from git_time_machine.analysis.activity import (
    activity_from_commits,
    bucket_by_day,
    busiest_day,
    first_day,
    window_start,
)
from git_time_machine.analysis.hotspots import rank_changed_files
from git_time_machine.models import ActivityDay, CommitSummary

TODAY = date(2025, 3, 10)


def _noon(d: date) -> datetime:
    return datetime(d.year, d.month, d.day, 12, tzinfo=timezone.utc)


class TestBucketByDay:
    def test_window_length_and_order(self):
        buckets = bucket_by_day([], 7, today=TODAY)
        assert len(buckets) == 7
        assert buckets[0].day == TODAY - timedelta(days=6)
        assert buckets[-1].day == TODAY
        assert all(b.commits == 0 for b in buckets)

    def test_counts_per_day(self):
        stamps = [_noon(TODAY), _noon(TODAY), _noon(TODAY - timedelta(days=2))]
        buckets = bucket_by_day(stamps, 3, today=TODAY)
        assert [b.commits for b in buckets] == [1, 0, 2]

    def test_ignores_commits_outside_window(self):
        stamps = [_noon(TODAY - timedelta(days=30)), _noon(TODAY + timedelta(days=1))]
        buckets = bucket_by_day(stamps, 7, today=TODAY)
        assert sum(b.commits for b in buckets) == 0

    def test_zero_days(self):
        assert bucket_by_day([_noon(TODAY)], 0, today=TODAY) == []

    def test_from_commits(self):
        commits = [
            CommitSummary(sha="a" * 40, author_name="A", date=_noon(TODAY)),
            CommitSummary(sha="b" * 40, author_name="B", date=_noon(TODAY - timedelta(days=1))),
        ]
        buckets = activity_from_commits(commits, 2, today=TODAY)
        assert [b.commits for b in buckets] == [1, 1]


class TestWindow:
    def test_first_day(self):
        assert first_day(7, today=TODAY) == date(2025, 3, 4)
        assert first_day(1, today=TODAY) == TODAY

    def test_window_start_is_local_midnight(self):
        start = window_start(7, today=TODAY)
        assert start.tzinfo is not None
        assert start == datetime(2025, 3, 4).astimezone()
        assert (start.hour, start.minute, start.second) == (0, 0, 0)

    def test_window_start_matches_first_bucket(self):
        buckets = bucket_by_day([], 7, today=TODAY)
        assert window_start(7, today=TODAY).date() == buckets[0].day


class TestBusiestDay:
    def test_picks_maximum(self):
        activity = [
            ActivityDay(day=TODAY - timedelta(days=1), commits=2),
            ActivityDay(day=TODAY, commits=5),
        ]
        assert busiest_day(activity).day == TODAY

    def test_earliest_on_tie(self):
        activity = [
            ActivityDay(day=TODAY - timedelta(days=1), commits=3),
            ActivityDay(day=TODAY, commits=3),
        ]
        assert busiest_day(activity).day == TODAY - timedelta(days=1)

    def test_idle_window(self):
        assert busiest_day([ActivityDay(day=TODAY, commits=0)]) is None


class TestRankChangedFiles:
    def test_ranks_by_count(self):
        lines = ["a.py", "b.py", "", "a.py", "c.py", "", "a.py", "b.py"]
        ranked = rank_changed_files(lines, limit=2)
        assert [(f.path, f.changes) for f in ranked] == [("a.py", 3), ("b.py", 2)]

    def test_ties_broken_by_path(self):
        ranked = rank_changed_files(["z.py", "m.py"], limit=5)
        assert [f.path for f in ranked] == ["m.py", "z.py"]

    def test_empty(self):
        assert rank_changed_files(["", "  "]) == []
