"""Menu screen: the interactive loop's list of actions."""

from textual import on
from textual.app import ComposeResult
from textual.containers import Center, Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, OptionList, Static
from textual.widgets.option_list import Option

from git_time_machine import __version__
from git_time_machine.models import AnalysisOptions, MenuAction, Session


class MenuScreen(Screen):
    """Lists the available actions for the open repository."""

    CSS = """
    MenuScreen {
        align: center middle;
    }
    #menu-container {
        width: 72;
        height: auto;
        padding: 1 4;
        border: round $primary;
        background: $surface;
    }
    #title-art {
        text-align: center;
        color: $accent;
    }
    #session-info {
        text-align: center;
        color: $text-muted;
        margin-bottom: 1;
    }
    #menu {
        height: auto;
        max-height: 14;
    }
    """

    TITLE_ART = f"""
╭─────────────────────────────╮
│   🕰️  Git Time Machine      │
│      Version {__version__:<15}│
╰─────────────────────────────╯
"""

    def __init__(self, session: Session, options: AnalysisOptions, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.session = session
        self.options = options

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Center():
            with Vertical(id="menu-container"):
                yield Static(self.TITLE_ART, id="title-art")
                yield Static(self._session_line(), id="session-info", markup=False)
                yield OptionList(
                    *[Option(action.label, id=action.value) for action in MenuAction],
                    id="menu",
                )
        yield Footer()

    def _session_line(self) -> str:
        source = self.session.reference.label
        if self.session.is_temporary:
            source += "  (temporary clone)"
        line = f"{source}  ·  branch {self.options.branch}  ·  last {self.options.days} days"
        if self.options.author:
            line += f"  ·  author {self.options.author}"
        return line

    def on_mount(self) -> None:
        self.query_one("#menu", OptionList).focus()

    @on(OptionList.OptionSelected, "#menu")
    def choose(self, event: OptionList.OptionSelected) -> None:
        self.app.choose_action(MenuAction(event.option.id))  # type: ignore[attr-defined]
