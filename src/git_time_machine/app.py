"""Main Textual TUI application for git-time-machine."""

from typing import Callable, Optional

from textual.app import App

from git_time_machine.errors import QueryError
from git_time_machine.explorer import HistoryExplorer
from git_time_machine.models import AnalysisOptions, MenuAction, ReportView, Session
from git_time_machine.screens.commit_input import CommitInputScreen
from git_time_machine.screens.loading import LoadingScreen
from git_time_machine.screens.menu import MenuScreen
from git_time_machine.screens.results import ResultsScreen


class GitTimeMachineApp(App):
    """Interactive menu over one repository session.

    The app never touches the filesystem; every query goes through the
    explorer, against the session's working directory.
    """

    TITLE = "Git Time Machine"
    SUB_TITLE = "Interactive git history visualization and analysis"

    CSS = """
    Screen {
        background: $background;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        session: Session,
        options: Optional[AnalysisOptions] = None,
        explorer: Optional[HistoryExplorer] = None,
        **kwargs,
    ) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.session = session
        self.options = options or AnalysisOptions()
        self.explorer = explorer or HistoryExplorer(
            session, self.options, on_status=self._on_status
        )
        self._loading: Optional[LoadingScreen] = None

    def on_mount(self) -> None:
        self.push_screen(MenuScreen(self.session, self.options))

    # ── Menu dispatch ─────────────────────────────────────────────────────

    def choose_action(self, action: MenuAction) -> None:
        """Called from MenuScreen when an entry is chosen."""
        if action is MenuAction.exit:
            self.exit()
        elif action in (MenuAction.inspect_commit, MenuAction.compare_commits):
            self.push_screen(CommitInputScreen(action))
        else:
            self._run_query(action.label, lambda: self.explorer.view(action))

    def run_commit_lookup(self, sha: str) -> None:
        self._run_query(
            MenuAction.inspect_commit.label, lambda: self.explorer.commit(sha)
        )

    def run_comparison(self, base: str, target: str) -> None:
        self._run_query(
            MenuAction.compare_commits.label, lambda: self.explorer.compare(base, target)
        )

    # ── Query worker ──────────────────────────────────────────────────────

    def _run_query(self, label: str, build: Callable[[], ReportView]) -> None:
        """Run *build* in a worker thread behind the loading screen.

        The worker group is exclusive, so at most one query is in flight.
        """
        loading = LoadingScreen(label)
        self._loading = loading
        self.push_screen(loading)

        def _do_work() -> None:
            try:
                view = build()
            except QueryError as exc:
                self.call_from_thread(self._show_query_error, loading, exc)
            else:
                self.call_from_thread(self._show_results, loading, view)

        self.run_worker(_do_work, thread=True, exclusive=True, group="query")

    def _on_status(self, msg: str) -> None:
        # Called from the worker thread.
        loading = self._loading
        if loading is not None:
            self.call_from_thread(loading.update_status, msg)

    def _dismiss_loading(self, loading: LoadingScreen) -> None:
        if self.screen is loading:
            self.pop_screen()
        self._loading = None

    def _show_results(self, loading: LoadingScreen, view: ReportView) -> None:
        """Replace the loading screen with the results."""
        self._dismiss_loading(loading)
        self.push_screen(ResultsScreen(view))

    def _show_query_error(self, loading: LoadingScreen, exc: QueryError) -> None:
        """Report a failed query inline and return to where the user was."""
        self._dismiss_loading(loading)
        self.notify(str(exc), title="Query failed", severity="error")
        if isinstance(self.screen, CommitInputScreen):
            self.screen.show_error(str(exc))
