"""Markdown rendering of query results for the results screen."""

from datetime import datetime, timezone
from typing import Optional

from git_time_machine.analysis.activity import busiest_day
from git_time_machine.models import (
    ActivityDay,
    CommitDetail,
    CommitSummary,
    Contributor,
    DiffSummary,
    FileChurn,
    RepositoryOverview,
)

BAR_WIDTH = 24

_UNITS = (
    ("year", 365 * 86400),
    ("month", 30 * 86400),
    ("week", 7 * 86400),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
)


def _cell(text: str) -> str:
    """Make *text* safe inside a Markdown table cell."""
    return text.replace("|", "\\|").replace("\n", " ")


def _bar(value: int, maximum: int, width: int = BAR_WIDTH) -> str:
    if maximum <= 0 or value <= 0:
        return ""
    return "█" * max(1, round(value / maximum * width))


def relative_time(when: datetime, now: Optional[datetime] = None) -> str:
    """Coarse "3 days ago" style age, like git's ``%cr``."""
    now = now or datetime.now(timezone.utc)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    seconds = int((now - when).total_seconds())
    if seconds < 0:
        return "in the future"
    for unit, size in _UNITS:
        if seconds >= size:
            n = seconds // size
            return f"{n} {unit}{'s' if n != 1 else ''} ago"
    return "just now"


# ── Overview ──────────────────────────────────────────────────────────────

def overview_markdown(overview: RepositoryOverview) -> str:
    lines = [
        "## Repository Stats",
        "",
        f"- **Total Commits:** {overview.total_commits}",
        f"- **Current Branch:** `{overview.current_branch}`",
        f"- **Analyzed Revision:** `{overview.revision}`",
        f"- **Recent Activity ({overview.days} days):** {overview.recent_commits} commits",
    ]
    if overview.change_summary is not None:
        lines.append(f"- **Net Change ({overview.days} days):** {overview.change_summary.label}")
    else:
        lines.append(f"- **Net Change ({overview.days} days):** history is younger than the window")
    if overview.contributor_count is not None:
        lines.append(f"- **Contributors:** {overview.contributor_count}")
    if overview.top_files:
        lines += ["", "### Most Active Files", "", files_markdown(overview.top_files)]
    return "\n".join(lines)


# ── Commits ───────────────────────────────────────────────────────────────

def commits_markdown(commits: list[CommitSummary], now: Optional[datetime] = None) -> str:
    if not commits:
        return "_No commits found._"
    rows = ["| Hash | Subject | Author | When |", "| --- | --- | --- | --- |"]
    for c in commits:
        rows.append(
            f"| `{c.short_sha}` | {_cell(c.subject)} | {_cell(c.author_name)} "
            f"| {relative_time(c.date, now)} |"
        )
    return "\n".join(rows)


def commit_detail_markdown(detail: CommitDetail) -> str:
    c = detail.commit
    lines = [
        f"## {_cell(c.subject) or '(no subject)'}",
        "",
        f"- **Commit:** `{c.sha}`",
        f"- **Author:** {c.author_name} <{c.author_email}>",
        f"- **Date:** {c.date:%Y-%m-%d %H:%M:%S %z}",
        f"- **Changes:** {len(detail.files)} files, "
        f"+{detail.additions} / -{detail.deletions}",
    ]
    if detail.body:
        lines += ["", "```", detail.body, "```"]
    if detail.files:
        lines += ["", "| File | + | - |", "| --- | ---: | ---: |"]
        for f in detail.files:
            if f.binary:
                lines.append(f"| {_cell(f.path)} | bin | bin |")
            else:
                lines.append(f"| {_cell(f.path)} | {f.additions} | {f.deletions} |")
    return "\n".join(lines)


def diff_markdown(summary: DiffSummary) -> str:
    lines = [
        f"## `{summary.base}` → `{summary.target}`",
        "",
        f"- **Files Changed:** {summary.files_changed}",
        f"- **Insertions:** {summary.insertions}",
        f"- **Deletions:** {summary.deletions}",
    ]
    if summary.files:
        lines += ["", "### Files", ""]
        lines += [f"- `{path}`" for path in summary.files]
    elif summary.files_changed == 0:
        lines += ["", "_The two commits have identical trees._"]
    return "\n".join(lines)


# ── Branches / files / people ─────────────────────────────────────────────

def branches_markdown(current: str, remote: list[str], local: list[str]) -> str:
    lines = [f"**Current Branch:** `{current}`", "", "### Remote Branches", ""]
    lines += [f"- `{b}`" for b in remote] or ["_No remote branches._"]
    lines += ["", "### Local Branches", ""]
    lines += [f"- `{b}`" + ("  ← current" if b == current else "") for b in local] or [
        "_No local branches._"
    ]
    return "\n".join(lines)


def files_markdown(files: list[FileChurn]) -> str:
    if not files:
        return "_No file changes recorded._"
    top = files[0].changes
    rows = ["| Changes | File | |", "| ---: | --- | --- |"]
    for f in files:
        rows.append(f"| {f.changes} | `{_cell(f.path)}` | {_bar(f.changes, top)} |")
    return "\n".join(rows)


def contributors_markdown(contributors: list[Contributor]) -> str:
    if not contributors:
        return "_No contributors found._"
    top = contributors[0].commits
    total = sum(c.commits for c in contributors)
    rows = [
        f"**{len(contributors)} contributors · {total} commits**",
        "",
        "| Commits | Name | |",
        "| ---: | --- | --- |",
    ]
    for c in contributors:
        rows.append(f"| {c.commits} | {_cell(c.name)} | {_bar(c.commits, top)} |")
    return "\n".join(rows)


# ── Activity ──────────────────────────────────────────────────────────────

def activity_markdown(activity: list[ActivityDay]) -> str:
    if not activity:
        return "_No activity window._"
    total = sum(a.commits for a in activity)
    active = sum(1 for a in activity if a.commits)
    peak = busiest_day(activity)
    lines = [
        f"- **Window:** {activity[0].day:%Y-%m-%d} → {activity[-1].day:%Y-%m-%d}",
        f"- **Commits:** {total}",
        f"- **Active Days:** {active} of {len(activity)}",
        f"- **Average:** {total / len(activity):.2f} commits/day",
    ]
    if peak is not None:
        lines.append(f"- **Busiest Day:** {peak.day:%Y-%m-%d} ({peak.commits} commits)")
    return "\n".join(lines)
