"""Results screen: one query result, with an optional activity sparkline."""

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Header, Label, Markdown, Sparkline, Static

from git_time_machine.models import ReportView


class ResultsScreen(Screen):
    """Shows a ReportView until the user goes back to the menu."""

    CSS = """
    ResultsScreen {
        layout: vertical;
    }
    #results-header {
        height: 3;
        background: $primary;
        color: $text;
        text-align: center;
        padding: 1 2;
        text-style: bold;
    }
    #sparkline-caption {
        margin: 1 2 0 2;
        color: $text-muted;
    }
    #activity-sparkline {
        height: 5;
        margin: 0 2 1 2;
    }
    #results-body {
        padding: 0 2;
    }
    """

    BINDINGS = [
        ("b", "go_back", "Back"),
        ("escape", "go_back", "Back"),
    ]

    def __init__(self, report: ReportView, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.report = report

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static(f"  {self.report.title}  ", id="results-header", markup=False)
        if self.report.sparkline is not None:
            yield Label(self.report.sparkline_caption, id="sparkline-caption", markup=False)
            yield Sparkline(self.report.sparkline, summary_function=max, id="activity-sparkline")
        with VerticalScroll(id="results-body"):
            yield Markdown(self.report.markdown)
        yield Footer()

    def action_go_back(self) -> None:
        """Return to the menu."""
        self.app.pop_screen()
