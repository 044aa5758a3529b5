"""Repository data via the git CLI (through GitPython).

Every query takes the working directory explicitly; nothing here depends on
or changes the process's current directory.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import git  # GitPython

from git_time_machine.analysis.activity import window_start
from git_time_machine.analysis.hotspots import rank_changed_files
from git_time_machine.errors import FetchError, QueryError
from git_time_machine.models import (
    CommitDetail,
    CommitSummary,
    Contributor,
    DiffSummary,
    FileChange,
    FileChurn,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Fields are separated by the ASCII unit separator so subjects may contain anything.
_FIELD = "\x1f"
SUMMARY_FORMAT = "%H%x1f%h%x1f%an%x1f%ae%x1f%aI%x1f%s"

_SHORTSTAT_RE = re.compile(
    r"(?P<files>\d+) files? changed"
    r"(?:, (?P<insertions>\d+) insertions?\(\+\))?"
    r"(?:, (?P<deletions>\d+) deletions?\(-\))?"
)


class GitDataProvider:
    """Read-only queries against a working directory, plus ``clone``."""

    # ── Plumbing ──────────────────────────────────────────────────────────

    def _run(
        self,
        workdir: PathLike,
        command: str,
        *args: str,
        error: Optional[str] = None,
    ) -> str:
        """Run ``git <command> <args>`` in *workdir* and return stdout."""
        try:
            with git.Repo(str(workdir), search_parent_directories=True) as repo:
                logger.debug("git %s %s (in %s)", command, " ".join(args), workdir)
                return getattr(repo.git, command.replace("-", "_"))(*args)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as exc:
            raise QueryError(f"Not a git repository: {workdir}") from exc
        except git.exc.GitCommandError as exc:
            raise QueryError(error or f"git {command} failed: {_stderr(exc)}") from exc

    def verify_commit(self, workdir: PathLike, revision: str) -> str:
        """Return the full hash *revision* points at, or raise QueryError."""
        revision = (revision or "").strip()
        if not revision or revision.startswith("-"):
            raise QueryError(f"Not a valid commit reference: {revision!r}")
        return self._run(
            workdir,
            "rev-parse",
            "--verify",
            "--quiet",
            f"{revision}^{{commit}}",
            error=f"Unknown commit: {revision}",
        )

    def resolve_revision(self, workdir: PathLike, branch: str) -> str:
        """Pick the revision to analyze: *branch*, ``origin/<branch>``, else HEAD."""
        for candidate in (branch, f"origin/{branch}"):
            try:
                self.verify_commit(workdir, candidate)
            except QueryError:
                continue
            return candidate
        return "HEAD"

    # ── Branches ──────────────────────────────────────────────────────────

    def remote_branches(self, workdir: PathLike) -> list[str]:
        out = self._run(workdir, "branch", "-r")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def local_branches(self, workdir: PathLike) -> list[str]:
        out = self._run(workdir, "branch", "--format=%(refname:short)")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def current_branch(self, workdir: PathLike) -> str:
        return self._run(workdir, "rev-parse", "--abbrev-ref", "HEAD").strip()

    # ── Counts ────────────────────────────────────────────────────────────

    def commit_count(self, workdir: PathLike, revision: str = "HEAD") -> int:
        out = self._run(workdir, "rev-list", "--count", revision, "--")
        try:
            return int(out.strip())
        except ValueError as exc:
            raise QueryError(f"Unexpected output from git rev-list: {out!r}") from exc

    def contributors(self, workdir: PathLike) -> list[Contributor]:
        """Commit counts per author across all refs (``git shortlog -sn --all``)."""
        out = self._run(workdir, "shortlog", "-sn", "--all")
        return parse_shortlog(out)

    # ── Commits ───────────────────────────────────────────────────────────

    def commits_since(
        self,
        workdir: PathLike,
        days: int,
        revision: str = "HEAD",
        author: Optional[str] = None,
    ) -> list[CommitSummary]:
        """Commits reachable from *revision* committed during the last *days* calendar days.

        The window opens at local midnight, the same boundary the activity
        chart uses.
        """
        since = window_start(days).isoformat()
        args = [f"--since={since}", f"--pretty=format:{SUMMARY_FORMAT}"]
        if author:
            args.append(f"--author={author}")
        out = self._run(workdir, "log", *args, revision, "--")
        return parse_log(out)

    def recent_commits(
        self,
        workdir: PathLike,
        limit: int = 10,
        revision: str = "HEAD",
        author: Optional[str] = None,
    ) -> list[CommitSummary]:
        args = [f"--max-count={limit}", f"--pretty=format:{SUMMARY_FORMAT}"]
        if author:
            args.append(f"--author={author}")
        out = self._run(workdir, "log", *args, revision, "--")
        return parse_log(out)

    def commit_detail(self, workdir: PathLike, sha: str) -> CommitDetail:
        full = self.verify_commit(workdir, sha)
        summary = parse_log(
            self._run(workdir, "log", "-1", f"--pretty=format:{SUMMARY_FORMAT}", full, "--")
        )
        if not summary:
            raise QueryError(f"Unknown commit: {sha}")
        body = self._run(workdir, "log", "-1", "--pretty=format:%b", full, "--")
        numstat = self._run(workdir, "show", "--numstat", "--format=", full, "--")
        return CommitDetail(commit=summary[0], body=body.strip(), files=parse_numstat(numstat))

    # ── Files / diffs ─────────────────────────────────────────────────────

    def most_changed_files(
        self, workdir: PathLike, limit: int = 5, revision: str = "HEAD"
    ) -> list[FileChurn]:
        out = self._run(workdir, "log", "--pretty=format:", "--name-only", revision, "--")
        return rank_changed_files(out.splitlines(), limit=limit)

    def change_summary_since(
        self, workdir: PathLike, days: int, revision: str = "HEAD"
    ) -> Optional[DiffSummary]:
        """Net change between the state *days* ago and *revision*.

        None when the history does not reach back that far.
        """
        before = window_start(days).isoformat()
        base = self._run(
            workdir, "rev-list", "--max-count=1", f"--before={before}", revision, "--"
        ).strip()
        if not base:
            return None
        out = self._run(workdir, "diff", "--shortstat", base, revision, "--")
        return parse_shortstat(out, base=base[:7], target=revision)

    def diff_summary(self, workdir: PathLike, base: str, target: str) -> DiffSummary:
        """Shortstat and changed file names between two commits."""
        base_sha = self.verify_commit(workdir, base)
        target_sha = self.verify_commit(workdir, target)
        stat = self._run(workdir, "diff", "--shortstat", base_sha, target_sha, "--")
        names = self._run(workdir, "diff", "--name-only", base_sha, target_sha, "--")
        summary = parse_shortstat(stat, base=base.strip(), target=target.strip())
        summary.files = [n for n in names.splitlines() if n.strip()]
        return summary

    # ── Clone ─────────────────────────────────────────────────────────────

    @staticmethod
    def clone(url: str, destination: PathLike) -> None:
        """Clone *url* into *destination*. A failure is not retried."""
        env = {"GIT_TERMINAL_PROMPT": "0"}  # Never prompt for credentials
        try:
            repo = git.Repo.clone_from(url, str(destination), env=env)
        except git.exc.GitCommandError as exc:
            raise FetchError(f"Could not clone {url}: {_stderr(exc)}") from exc
        repo.close()


# ── Parsers ───────────────────────────────────────────────────────────────

def parse_log(output: str) -> list[CommitSummary]:
    """Parse ``git log`` output produced with :data:`SUMMARY_FORMAT`."""
    commits: list[CommitSummary] = []
    for line in output.splitlines():
        fields = line.split(_FIELD, 5)
        if len(fields) != 6:
            continue
        sha, short_sha, name, email, when, subject = fields
        commits.append(
            CommitSummary(
                sha=sha,
                short_sha=short_sha,
                author_name=name,
                author_email=email,
                date=datetime.fromisoformat(when),
                subject=subject,
            )
        )
    return commits


def parse_shortlog(output: str) -> list[Contributor]:
    contributors: list[Contributor] = []
    for line in output.splitlines():
        count, _, name = line.strip().partition("\t")
        if not name or not count.isdigit():
            continue
        contributors.append(Contributor(name=name.strip(), commits=int(count)))
    return sorted(contributors, key=lambda c: -c.commits)


def parse_numstat(output: str) -> list[FileChange]:
    changes: list[FileChange] = []
    for line in output.splitlines():
        parts = line.split("\t", 2)
        if len(parts) != 3:
            continue
        added, deleted, path = parts
        if added == "-" and deleted == "-":
            changes.append(FileChange(path=path, binary=True))
        elif added.isdigit() and deleted.isdigit():
            changes.append(FileChange(path=path, additions=int(added), deletions=int(deleted)))
    return changes


def parse_shortstat(output: str, base: str = "", target: str = "") -> DiffSummary:
    """Parse ``N files changed, X insertions(+), Y deletions(-)``; empty means no change."""
    match = _SHORTSTAT_RE.search(output)
    if not match:
        return DiffSummary(base=base, target=target)
    return DiffSummary(
        base=base,
        target=target,
        files_changed=int(match.group("files")),
        insertions=int(match.group("insertions") or 0),
        deletions=int(match.group("deletions") or 0),
    )


def _stderr(exc: git.exc.GitCommandError) -> str:
    text = str(exc.stderr or "").strip()
    text = text.removeprefix("stderr:").strip().strip("'").strip()
    return text or str(exc)
