"""Loading screen: shown while a git query runs."""

from textual.app import ComposeResult
from textual.containers import Center, Vertical
from textual.screen import Screen
from textual.css.query import NoMatches
from textual.widgets import Footer, Header, Label, ProgressBar, Static


class LoadingScreen(Screen):
    """Displayed while a query is in flight. Queries cannot be cancelled."""

    CSS = """
    LoadingScreen {
        align: center middle;
    }
    #loading-container {
        width: 64;
        height: auto;
        padding: 2 4;
        border: round $primary;
        background: $surface;
    }
    #loading-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }
    #status-label {
        text-align: center;
        width: 100%;
        margin-bottom: 1;
    }
    #progress-bar {
        margin: 1 0;
    }
    """

    def __init__(self, title: str, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.title_text = title

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Center():
            with Vertical(id="loading-container"):
                yield Static(f"⏳  {self.title_text}", id="loading-title")
                yield Label("Running git …", id="status-label", markup=False)
                yield ProgressBar(total=None, show_eta=False, show_percentage=False, id="progress-bar")
        yield Footer()

    def update_status(self, message: str) -> None:
        """Show the step the query is currently on."""
        try:
            self.query_one("#status-label", Label).update(message)
        except NoMatches:
            pass  # not composed yet
