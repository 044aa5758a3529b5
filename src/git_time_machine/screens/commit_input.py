"""Commit input screen: asks for the hash(es) of a commit query."""

from textual import on
from textual.app import ComposeResult
from textual.containers import Center, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Label, Static

from git_time_machine.models import MenuAction


class CommitInputScreen(Screen):
    """Collects one commit (inspect) or two commits (compare)."""

    CSS = """
    CommitInputScreen {
        align: center middle;
    }
    #input-container {
        width: 64;
        height: auto;
        padding: 1 4;
        border: round $primary;
        background: $surface;
    }
    #input-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }
    .field-label {
        margin-top: 1;
    }
    #run-btn {
        margin-top: 2;
        width: 100%;
    }
    #error-label {
        color: $error;
        text-align: center;
        width: 100%;
        margin-top: 1;
    }
    """

    BINDINGS = [
        ("escape", "go_back", "Back"),
    ]

    def __init__(self, menu_action: MenuAction, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.menu_action = menu_action

    @property
    def comparing(self) -> bool:
        return self.menu_action is MenuAction.compare_commits

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Center():
            with Vertical(id="input-container"):
                yield Static(self.menu_action.label, id="input-title")
                if self.comparing:
                    yield Label("Base commit:", classes="field-label")
                    yield Input(placeholder="e.g. HEAD~5 or a1b2c3d", id="base-input")
                    yield Label("Target commit:", classes="field-label")
                    yield Input(placeholder="e.g. HEAD", id="target-input")
                else:
                    yield Label("Commit hash or ref:", classes="field-label")
                    yield Input(placeholder="e.g. a1b2c3d", id="sha-input")
                yield Button("▶  Run", id="run-btn", variant="primary")
                yield Label("", id="error-label", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self.query(Input).first().focus()

    def show_error(self, message: str) -> None:
        self.query_one("#error-label", Label).update(f"⚠  {message}")

    @on(Button.Pressed, "#run-btn")
    @on(Input.Submitted)
    def submit(self) -> None:
        if self.comparing:
            base = self.query_one("#base-input", Input).value.strip()
            target = self.query_one("#target-input", Input).value.strip()
            if not base or not target:
                self.show_error("Enter both commits to compare")
                return
            self.app.run_comparison(base, target)  # type: ignore[attr-defined]
        else:
            sha = self.query_one("#sha-input", Input).value.strip()
            if not sha:
                self.show_error("Enter a commit hash")
                return
            self.app.run_commit_lookup(sha)  # type: ignore[attr-defined]

    def action_go_back(self) -> None:
        """Return to the menu."""
        self.app.pop_screen()
