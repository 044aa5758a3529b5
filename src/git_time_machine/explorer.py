"""History explorer: runs the queries behind each menu action.

Combines provider queries and the small local aggregations into ready-to-show
ReportViews. All queries run against the session's working directory.
"""

from pathlib import Path
from typing import Callable, Optional

from git_time_machine import report
from git_time_machine.analysis.activity import activity_from_commits
from git_time_machine.models import (
    AnalysisOptions,
    MenuAction,
    ReportView,
    RepositoryOverview,
    Session,
)
from git_time_machine.provider import GitDataProvider


class HistoryExplorer:
    """Answers menu actions for one session."""

    def __init__(
        self,
        session: Session,
        options: Optional[AnalysisOptions] = None,
        provider: Optional[GitDataProvider] = None,
        on_status: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.session = session
        self.options = options or AnalysisOptions()
        self.provider = provider or GitDataProvider()
        self._on_status = on_status or (lambda _: None)
        self._revision: Optional[str] = None

    # ── Helpers ───────────────────────────────────────────────────────────

    @property
    def workdir(self) -> Path:
        return self.session.working_directory

    @property
    def revision(self) -> str:
        """The configured branch if it exists here, otherwise HEAD."""
        if self._revision is None:
            self._revision = self.provider.resolve_revision(self.workdir, self.options.branch)
        return self._revision

    def _status(self, msg: str) -> None:
        self._on_status(msg)

    def view(self, action: MenuAction) -> ReportView:
        """Build the view for an action that needs no extra input."""
        builders: dict[MenuAction, Callable[[], ReportView]] = {
            MenuAction.overview: self.overview,
            MenuAction.recent_commits: self.recent_commits,
            MenuAction.activity: self.activity,
            MenuAction.branches: self.branches,
            MenuAction.code_changes: self.code_changes,
            MenuAction.contributors: self.contributors,
        }
        if action not in builders:
            raise ValueError(f"{action.value} needs input and has no direct view")
        return builders[action]()

    # ── Actions ───────────────────────────────────────────────────────────

    def build_overview(self) -> RepositoryOverview:
        opts = self.options
        self._status("Fetching repository information …")
        overview = RepositoryOverview(
            current_branch=self.provider.current_branch(self.workdir),
            revision=self.revision,
            total_commits=self.provider.commit_count(self.workdir, self.revision),
            days=opts.days,
        )
        recent = self.provider.commits_since(self.workdir, opts.days, self.revision, opts.author)
        # Same day buckets as the activity chart.
        overview.recent_commits = sum(
            day.commits for day in activity_from_commits(recent, opts.days)
        )
        self._status("Summarizing recent changes …")
        overview.change_summary = self.provider.change_summary_since(
            self.workdir, opts.days, self.revision
        )
        if opts.detailed:
            self._status("Collecting detailed statistics …")
            overview.contributor_count = len(self.provider.contributors(self.workdir))
            overview.top_files = self.provider.most_changed_files(
                self.workdir, opts.top_files, self.revision
            )
        return overview

    def overview(self) -> ReportView:
        return ReportView(
            title="Overview",
            markdown=report.overview_markdown(self.build_overview()),
        )

    def recent_commits(self) -> ReportView:
        self._status("Fetching recent commits …")
        commits = self.provider.recent_commits(
            self.workdir, self.options.recent_limit, self.revision, self.options.author
        )
        title = "Recent Commits"
        if self.options.author:
            title += f" by {self.options.author}"
        return ReportView(title=title, markdown=report.commits_markdown(commits))

    def activity(self) -> ReportView:
        days = self.options.days
        self._status(f"Counting commits over {days} days …")
        commits = self.provider.commits_since(
            self.workdir, days, self.revision, self.options.author
        )
        buckets = activity_from_commits(commits, days)
        return ReportView(
            title="Commit Activity",
            markdown=report.activity_markdown(buckets),
            sparkline=[b.commits for b in buckets],
            sparkline_caption=f"Commits per day, last {days} days",
        )

    def branches(self) -> ReportView:
        self._status("Analyzing branches …")
        return ReportView(
            title="Branches",
            markdown=report.branches_markdown(
                self.provider.current_branch(self.workdir),
                self.provider.remote_branches(self.workdir),
                self.provider.local_branches(self.workdir),
            ),
        )

    def code_changes(self) -> ReportView:
        self._status("Analyzing code changes …")
        files = self.provider.most_changed_files(
            self.workdir, self.options.top_files, self.revision
        )
        return ReportView(title="Most Active Files", markdown=report.files_markdown(files))

    def contributors(self) -> ReportView:
        self._status("Fetching contributor information …")
        return ReportView(
            title="Contributors",
            markdown=report.contributors_markdown(self.provider.contributors(self.workdir)),
        )

    def commit(self, sha: str) -> ReportView:
        self._status(f"Looking up {sha} …")
        detail = self.provider.commit_detail(self.workdir, sha)
        return ReportView(
            title=f"Commit {detail.commit.short_sha}",
            markdown=report.commit_detail_markdown(detail),
        )

    def compare(self, base: str, target: str) -> ReportView:
        self._status(f"Comparing {base} and {target} …")
        summary = self.provider.diff_summary(self.workdir, base, target)
        return ReportView(title="Comparison", markdown=report.diff_markdown(summary))
