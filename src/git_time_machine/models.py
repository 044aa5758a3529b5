"""Data models for git-time-machine."""

import re
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Repository reference / session ────────────────────────────────────────

REMOTE_SCHEMES = ("http://", "https://", "ssh://", "git://", "file://")
_SCP_LIKE = re.compile(r"^[\w.-]+@[\w.-]+:")


class RepositoryReference(BaseModel):
    """What the user asked to analyze: a local path or a remote URL."""

    model_config = ConfigDict(frozen=True)

    raw: str = ""

    @field_validator("raw", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @classmethod
    def parse(cls, value: "Optional[str | RepositoryReference]") -> "RepositoryReference":
        if isinstance(value, RepositoryReference):
            return value
        return cls(raw=value or "")

    @property
    def is_empty(self) -> bool:
        return not self.raw

    @property
    def is_remote(self) -> bool:
        lowered = self.raw.lower()
        return lowered.startswith(REMOTE_SCHEMES) or bool(_SCP_LIKE.match(self.raw))

    @property
    def label(self) -> str:
        return self.raw or "."


class Session(BaseModel):
    """A reference bound to the directory that git queries run against."""

    model_config = ConfigDict(frozen=True)

    reference: RepositoryReference = Field(default_factory=RepositoryReference)
    working_directory: Path
    is_temporary: bool = False
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ── Configuration ─────────────────────────────────────────────────────────

class AnalysisOptions(BaseModel):
    """Options collected from the command line."""

    days: int = Field(default=30, ge=1)
    branch: str = "main"
    author: Optional[str] = None
    detailed: bool = False
    recent_limit: int = Field(default=10, ge=1)
    top_files: int = Field(default=5, ge=1)


# ── Query results ─────────────────────────────────────────────────────────

class Contributor(BaseModel):
    """One line of ``git shortlog -sn``."""

    name: str
    commits: int = 0


class CommitSummary(BaseModel):
    """A single commit as listed by ``git log``."""

    sha: str
    short_sha: str = ""
    author_name: str
    author_email: str = ""
    date: datetime
    subject: str = ""

    def model_post_init(self, _ctx: object) -> None:
        if not self.short_sha:
            self.short_sha = self.sha[:7]


class FileChange(BaseModel):
    """Per-file line counts from ``--numstat`` (binary files count as 0)."""

    path: str
    additions: int = 0
    deletions: int = 0
    binary: bool = False


class CommitDetail(BaseModel):
    """Full metadata and file stats for one commit."""

    commit: CommitSummary
    body: str = ""
    files: list[FileChange] = Field(default_factory=list)

    @property
    def additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.files)


class DiffSummary(BaseModel):
    """Parsed ``git diff --shortstat`` between two revisions."""

    base: str = ""
    target: str = ""
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0
    files: list[str] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return (
            f"{self.files_changed} files changed, "
            f"{self.insertions} insertions(+), {self.deletions} deletions(-)"
        )


class FileChurn(BaseModel):
    """How many commits touched a file."""

    path: str
    changes: int = 0


class ActivityDay(BaseModel):
    """Commits made on one calendar day."""

    day: date
    commits: int = 0


class RepositoryOverview(BaseModel):
    """Headline numbers for the overview screen."""

    current_branch: str
    revision: str = "HEAD"
    total_commits: int = 0
    recent_commits: int = 0
    days: int = 30
    change_summary: Optional[DiffSummary] = None
    contributor_count: Optional[int] = None
    top_files: list[FileChurn] = Field(default_factory=list)


# ── Presentation ─────────────────────────────────────────────────────────

class MenuAction(str, Enum):
    """Entries of the interactive menu."""

    overview = "overview"
    recent_commits = "recent_commits"
    activity = "activity"
    branches = "branches"
    code_changes = "code_changes"
    contributors = "contributors"
    inspect_commit = "inspect_commit"
    compare_commits = "compare_commits"
    exit = "exit"

    @property
    def label(self) -> str:
        labels = {
            MenuAction.overview: "📊 Show Repository Overview",
            MenuAction.recent_commits: "📝 View Recent Commits",
            MenuAction.activity: "📈 Show Commit Activity",
            MenuAction.branches: "🌿 Show Branch Information",
            MenuAction.code_changes: "🔥 Analyze Code Changes",
            MenuAction.contributors: "👥 View Contributors",
            MenuAction.inspect_commit: "🔍 Inspect a Commit",
            MenuAction.compare_commits: "↔  Compare Two Commits",
            MenuAction.exit: "🚪 Exit",
        }
        return labels[self]


class ReportView(BaseModel):
    """A rendered result: Markdown plus an optional sparkline series."""

    title: str
    markdown: str = ""
    sparkline: Optional[list[int]] = None
    sparkline_caption: str = ""
