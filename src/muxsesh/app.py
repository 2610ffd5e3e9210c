"""mux-sesh: Textual TUI for picking, creating and managing tmux sessions."""

from __future__ import annotations

import re
import sys
from collections.abc import Callable

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Input, Static

from muxsesh import tmux
from muxsesh.actions import Action, CloneAndCreate, describe, run_action
from muxsesh.config import Config, load_config
from muxsesh.models import Entry, View
from muxsesh.picker import QUERY_LIMIT, BrowseMode, CreateMode, FilterMode, Picker, RenameMode
from muxsesh.providers.projects import ProjectProvider
from muxsesh.providers.sessions import SessionProvider

_TITLES = {
    BrowseMode: "Tmux Session Manager",
    FilterMode: "Search Sessions",
    CreateMode: "New Session",
    RenameMode: "Rename Session",
}

_PROMPTS = {
    FilterMode: ("/ ", "Type to search..."),
    CreateMode: ("+ ", "Type project name, GitHub URL, or custom session name..."),
    RenameMode: ("✎ ", "Enter new session name..."),
}


class TargetList(Static):
    """Left pane: the visible window of the ranked list."""

    BORDER_TITLE = "Sessions"


class DetailsPane(Static):
    """Right pane: windows of the highlighted session."""

    BORDER_TITLE = "Details"


class MuxSeshApp(App[Action | None]):
    """Renders a :class:`Picker` and forwards key presses to it.

    Text entry goes through a Textual :class:`Input`, so typing, pasting
    and in-line cursor movement are handled by the widget and reported to
    the picker as whole values. List navigation, commit and cancel keys
    are priority bindings that reach the picker even while the input has
    focus.
    """

    TITLE = "mux-sesh"
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("enter", "picker('enter')", "Select", priority=True),
        Binding("up", "picker('up')", "Up", show=False, priority=True),
        Binding("down", "picker('down')", "Down", show=False, priority=True),
        Binding("ctrl+c", "picker('ctrl+c')", "Quit", show=False, priority=True),
        Binding("escape", "query('escape')", "Cancel", priority=True),
        Binding("escape", "browse('escape')", "Quit", show=False, priority=True),
        Binding("ctrl+k", "query('ctrl+k')", "Up", show=False, priority=True),
        Binding("ctrl+j", "query('ctrl+j')", "Down", show=False, priority=True),
        Binding("d", "browse('d')", "Kill"),
        Binding("r", "browse('r')", "Rename"),
        Binding("n", "browse('n')", "New"),
        Binding("slash", "browse('slash')", "Search", key_display="/"),
        Binding("i", "browse('i')", "Search", show=False),
        Binding("s", "browse('s')", "Sessions"),
        Binding("p", "browse('p')", "Projects"),
        Binding("R", "browse('R')", "Refresh", key_display="R"),
        Binding("q", "browse('q')", "Quit"),
        Binding("j", "browse('j')", "Down", show=False),
        Binding("k", "browse('k')", "Up", show=False),
    ] + [Binding(digit, f"browse('{digit}')", "Pick", show=False) for digit in "123456789"]

    CSS = """
    Screen {
        layout: vertical;
    }

    #title {
        height: 1;
        content-align: center middle;
        text-style: bold;
        color: $accent;
    }

    #main {
        height: 1fr;
    }

    #list-pane {
        width: 1fr;
        min-width: 40;
    }

    #target-list {
        height: 1fr;
        border: round $accent;
        padding: 0 1;
    }

    #count {
        height: 1;
        color: $text-muted;
        padding: 0 2;
    }

    #details {
        width: 1fr;
        border: round $accent;
        padding: 1 2;
    }

    #query-line {
        height: 1;
        padding: 0 1;
    }

    #query-prompt {
        width: auto;
        color: $text-muted;
    }

    #query-input {
        width: 1fr;
        height: 1;
        border: none;
        padding: 0;
    }

    #status-bar {
        height: 1;
        background: $surface;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        picker: Picker,
        windows: Callable[[str], list[tmux.WindowInfo]] = tmux.list_windows,
    ) -> None:
        super().__init__()
        self.picker = picker
        self._windows = windows
        self._input_mode: type | None = None

    def compose(self) -> ComposeResult:
        yield Static("", id="title")
        with Horizontal(id="main"):
            with Vertical(id="list-pane"):
                yield TargetList("", id="target-list")
                yield Static("", id="count")
            yield DetailsPane("", id="details")
        with Horizontal(id="query-line"):
            yield Static("", id="query-prompt")
            yield Input(id="query-input", max_length=QUERY_LIMIT, select_on_focus=False)
        yield Static("", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_view()

    # -- key routing ----------------------------------------------------------

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        browsing = isinstance(self.picker.mode, BrowseMode)
        if action == "browse":
            return browsing
        if action == "query":
            return not browsing
        return True

    def action_picker(self, key: str) -> None:
        self._send(key)

    def action_browse(self, key: str) -> None:
        self._send(key)

    def action_query(self, key: str) -> None:
        self._send(key)

    def on_input_changed(self, event: Input.Changed) -> None:
        self.picker.set_query(event.value)
        self._refresh_view()

    def _send(self, key: str) -> None:
        if not isinstance(self.picker.mode, BrowseMode):
            # Key bindings can overtake the input's pending Changed message.
            self.picker.set_query(self.query_one("#query-input", Input).value)
        result = self.picker.handle_key(key)
        if result is not None:
            self.exit(result.action)
            return
        self._refresh_view()

    # -- rendering ------------------------------------------------------------

    def _refresh_view(self) -> None:
        mode = self.picker.mode
        self.query_one("#title", Static).update(_TITLES[type(mode)])

        target_list = self.query_one("#target-list", TargetList)
        target_list.border_title = self._list_title()
        target_list.update("\n".join(self._list_lines()))

        self.query_one("#count", Static).update(self.picker.count_label())

        details = self.query_one("#details", DetailsPane)
        details.display = not isinstance(mode, CreateMode)
        details.update(self._details_text())

        self._sync_input()
        self.query_one("#status-bar", Static).update(escape(self.picker.state.message))
        self.refresh_bindings()

    def _sync_input(self) -> None:
        """Show and seed the input line when a text-entry mode starts."""
        mode = self.picker.mode
        if type(mode) is self._input_mode:
            return
        self._input_mode = type(mode)

        line = self.query_one("#query-line", Horizontal)
        query_input = self.query_one("#query-input", Input)
        if isinstance(mode, BrowseMode):
            line.display = False
            self.screen.set_focus(None)
            return

        prefix, placeholder = _PROMPTS[type(mode)]
        self.query_one("#query-prompt", Static).update(escape(prefix))
        query_input.placeholder = placeholder
        with self.prevent(Input.Changed):
            query_input.value = mode.query
        query_input.cursor_position = len(mode.query)
        line.display = True
        query_input.focus()

    def _list_title(self) -> str:
        mode = self.picker.mode
        if isinstance(mode, CreateMode):
            return "Projects"
        if isinstance(mode, (BrowseMode, FilterMode)) and mode.view is View.PROJECTS:
            return "Projects"
        return "Sessions"

    def _list_lines(self) -> list[str]:
        window, start = self.picker.visible()
        if not window:
            return self._empty_lines()

        lines = []
        cursor = self.picker.state.cursor
        for offset, entry in enumerate(window):
            index = start + offset
            label = f"{index + 1} {self._entry_label(entry)}"
            if index == cursor:
                lines.append(f"[bold reverse]▶ {label}[/bold reverse]")
            else:
                lines.append(f"  {label}")
        return lines

    def _empty_lines(self) -> list[str]:
        lines = [escape(line) for line in self.picker.empty_state()]
        if isinstance(self.picker.mode, CreateMode) and self.picker.state.query:
            # The typed text itself is the selection.
            return [f"[bold reverse]▶ {lines[0]}[/bold reverse]"]
        return [f"[dim]{line}[/dim]" for line in lines]

    def _entry_label(self, entry: Entry) -> str:
        if entry.is_session:
            indicator = "[bold green]●[/bold green]" if entry.attached else "[dim]○[/dim]"
            return f"{indicator} {escape(entry.title)} ({entry.window_count})"
        if isinstance(self.picker.mode, CreateMode):
            return self._highlight_text(entry.description or entry.target, self.picker.state.query)
        label = escape(entry.title)
        if entry.description:
            label += f" [dim]{escape(entry.description)}[/dim]"
        return label

    @staticmethod
    def _highlight_text(text: str, term: str) -> str:
        """Bold case-insensitive matches of *term*, dimming the rest."""
        if not term:
            return f"[dim]{escape(text)}[/dim]"
        parts = []
        last = 0
        for m in re.finditer(re.escape(term), text, flags=re.IGNORECASE):
            if m.start() > last:
                parts.append(f"[dim]{escape(text[last:m.start()])}[/dim]")
            parts.append(f"[bold]{escape(m.group())}[/bold]")
            last = m.end()
        if last < len(text):
            parts.append(f"[dim]{escape(text[last:])}[/dim]")
        return "".join(parts)

    def _details_text(self) -> str:
        mode = self.picker.mode
        if isinstance(mode, RenameMode):
            return f"Renaming session [bold]{escape(mode.target)}[/bold]...\n\nEnter new name for session"
        if isinstance(mode, FilterMode):
            return (
                "Searching...\n\nType to filter by name\n"
                f"(showing max {self.picker.max_results} results)"
            )
        entry = self.picker.selected
        if entry is None or not entry.is_session:
            return "No session selected"
        return self._session_details(entry)

    def _session_details(self, entry: Entry) -> str:
        status = "[bold green]⚡ Active[/bold green]" if entry.attached else "[dim]○ Inactive[/dim]"
        lines = [
            f"[bold]{escape(entry.title)}[/bold]",
            "",
            f"Status: {status}",
            f"Windows: {entry.window_count}",
            "",
            "[bold]⊞ Windows[/bold]",
        ]
        windows = self._windows(entry.target)
        if not windows:
            lines.append("  No windows found")
        for window in windows:
            lines.append(f"  {escape(window.index)}: {escape(window.name)}")
            if window.program:
                lines.append(f"      [yellow]{escape(window.program)}[/yellow]")
            lines.append(f"      [cyan]{escape(window.path)}[/cyan]")
        return "\n".join(lines)


def build_picker(config: Config) -> Picker:
    return Picker(
        sessions=SessionProvider(),
        projects=ProjectProvider(config.project_roots(), config.search_depth),
        max_results=config.max_results,
    )


def execute(action: Action, config: Config) -> None:
    """Run the chosen action once the TUI has released the terminal."""
    if isinstance(action, CloneAndCreate):
        print(f"Cloning repository: {action.url}")
    try:
        run_action(action, config)
    except tmux.CommandError as exc:
        print(f"Error {describe(action)}: {exc}", file=sys.stderr)
        raise SystemExit(1)


def tui_main(config: Config | None = None) -> None:
    config = config or load_config()
    app = MuxSeshApp(build_picker(config))
    action = app.run()
    if action is not None:
        execute(action, config)


if __name__ == "__main__":
    tui_main()
