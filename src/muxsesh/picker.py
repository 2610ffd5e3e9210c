"""Modal state machine behind the interactive picker.

The picker owns a single :class:`SelectionState`. Each key event is
handled to completion before the next one: the mode may change, the
ranked list is recomputed and the cursor is re-clamped. Modes are small
frozen dataclasses that carry only the fields meaningful to them, so a
rename target cannot linger once the user is back in Browse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Protocol

from muxsesh import tmux
from muxsesh.actions import Action, action_for_entry, resolve_create, resolve_selection
from muxsesh.models import Entry, View
from muxsesh.providers import EntryProvider
from muxsesh.ranking import filter_entries
from muxsesh.remote import extract_repo_name, is_remote_reference
from muxsesh.viewport import move_cursor, quick_select, reset_cursor, visible_window

logger = logging.getLogger(__name__)

QUERY_LIMIT = 50
DEFAULT_MAX_RESULTS = 15

QUIT_KEYS = frozenset({"q", "escape", "ctrl+c"})
CANCEL_KEYS = frozenset({"escape", "ctrl+c"})
FILTER_KEYS = frozenset({"i", "slash"})
BROWSE_UP = frozenset({"up", "k"})
BROWSE_DOWN = frozenset({"down", "j"})
QUERY_UP = frozenset({"up", "ctrl+k"})
QUERY_DOWN = frozenset({"down", "ctrl+j"})
DIGITS = frozenset("123456789")


@dataclass(frozen=True)
class BrowseMode:
    view: View = View.SESSIONS


@dataclass(frozen=True)
class FilterMode:
    view: View
    query: str = ""


@dataclass(frozen=True)
class CreateMode:
    query: str = ""


@dataclass(frozen=True)
class RenameMode:
    target: str
    query: str


Mode = BrowseMode | FilterMode | CreateMode | RenameMode


@dataclass
class SelectionState:
    mode: Mode
    catalog: tuple[Entry, ...] = ()
    ranked: list[Entry] = field(default_factory=list)
    cursor: int = 0
    message: str = ""

    @property
    def query(self) -> str:
        if isinstance(self.mode, BrowseMode):
            return ""
        return self.mode.query


@dataclass(frozen=True)
class Finished:
    """The picker is done; *action* is ``None`` when the user quit."""

    action: Action | None = None


class SessionSink(Protocol):
    def kill_session(self, name: str) -> None: ...

    def rename_session(self, old: str, new: str) -> str: ...


class Picker:
    """Dispatches key events to the handler of the current mode."""

    def __init__(
        self,
        sessions: EntryProvider,
        projects: EntryProvider,
        sink: SessionSink = tmux,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self.sessions = sessions
        self.projects = projects
        self.sink = sink
        self.max_results = max_results

        session_entries = tuple(sessions.list_entries())
        if session_entries:
            self.state = self._browse_state(View.SESSIONS, session_entries)
        else:
            self.state = self._browse_state(View.PROJECTS, self._scan_projects())

    # -- derived view data ------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def ascending(self) -> bool:
        """Create mode lists its best match last, next to the input line."""
        return isinstance(self.state.mode, CreateMode)

    @property
    def capacity(self) -> int | None:
        if isinstance(self.state.mode, (FilterMode, CreateMode)):
            return self.max_results
        return None

    @property
    def selected(self) -> Entry | None:
        ranked, cursor = self.state.ranked, self.state.cursor
        return ranked[cursor] if 0 <= cursor < len(ranked) else None

    def visible(self) -> tuple[list[Entry], int]:
        return visible_window(self.state.ranked, self.state.cursor, self.capacity)

    def count_label(self) -> str:
        """``shown/total`` for overflowing filtered lists, else the total."""
        if self.capacity is None:
            return ""
        total = len(self.state.ranked)
        if total > self.capacity:
            return f"{self.capacity}/{total}"
        return str(total) if total else ""

    def empty_state(self) -> list[str]:
        """Lines to show in place of an empty list."""
        mode, query = self.state.mode, self.state.query
        if isinstance(mode, CreateMode):
            if not query:
                return ["No projects found"]
            if is_remote_reference(query):
                repo = extract_repo_name(query)
                return [f"Clone & create session: {repo}" if repo else "Clone repository"]
            return [f"Create session: {query}"]
        if isinstance(mode, FilterMode):
            return ["No matches found"] if query else ["Start typing to search..."]
        if isinstance(mode, BrowseMode) and mode.view is View.PROJECTS:
            return ["No projects found"]
        return ["No tmux sessions found", "Press 'n' to create a new session"]

    # -- transitions --------------------------------------------------------

    def handle_key(self, key: str) -> Finished | None:
        """Process one key event; returns :class:`Finished` to exit.

        Text entry is not a key event here: the input line reports its
        whole value through :meth:`set_query`.
        """
        self.state.message = ""
        mode = self.state.mode
        if isinstance(mode, BrowseMode):
            return self._handle_browse(mode, key)
        if isinstance(mode, (FilterMode, CreateMode)):
            return self._handle_query(mode, key)
        if isinstance(mode, RenameMode):
            return self._handle_rename(mode, key)
        raise TypeError(f"Unknown mode: {mode!r}")

    def _handle_browse(self, mode: BrowseMode, key: str) -> Finished | None:
        if key in QUIT_KEYS:
            return Finished()
        if key in FILTER_KEYS:
            catalog = self.state.catalog
            self.state = SelectionState(FilterMode(mode.view), catalog, list(catalog))
        elif key == "n":
            self._enter_create()
        elif key == "r":
            entry = self.selected
            if entry is not None and entry.is_session:
                self.state.mode = RenameMode(target=entry.title, query=entry.title)
        elif key == "d":
            self._kill_selected(mode)
        elif key == "R":
            self.enter_browse(mode.view)
            self.state.message = "Refreshed"
        elif key == "s":
            self.enter_browse(View.SESSIONS)
        elif key == "p":
            self.enter_browse(View.PROJECTS)
        elif key == "enter":
            action = resolve_selection(self.state.ranked, self.state.cursor)
            if action is not None:
                return Finished(action)
        elif key in BROWSE_UP:
            self._move(-1)
        elif key in BROWSE_DOWN:
            self._move(1)
        elif key in DIGITS:
            index = quick_select(self.state.ranked, self.state.cursor, self.capacity, int(key))
            if index is not None:
                return Finished(action_for_entry(self.state.ranked[index]))
        return None

    def _handle_query(self, mode: FilterMode | CreateMode, key: str) -> Finished | None:
        if key in CANCEL_KEYS:
            self.enter_browse(mode.view if isinstance(mode, FilterMode) else View.SESSIONS)
        elif key == "enter":
            if isinstance(mode, CreateMode):
                action = resolve_create(mode.query, self.state.ranked, self.state.cursor)
            else:
                action = resolve_selection(self.state.ranked, self.state.cursor)
            if action is not None:
                return Finished(action)
        elif key in QUERY_UP:
            self._move(-1)
        elif key in QUERY_DOWN:
            self._move(1)
        return None

    def _handle_rename(self, mode: RenameMode, key: str) -> Finished | None:
        if key in CANCEL_KEYS:
            self.enter_browse(View.SESSIONS)
        elif key == "enter":
            new_name = mode.query.strip()
            if not new_name or new_name == mode.target:
                self.enter_browse(View.SESSIONS)
                return None
            try:
                renamed = self.sink.rename_session(mode.target, new_name)
            except tmux.CommandError as exc:
                logger.warning(f"Renaming {mode.target} failed: {exc}")
                self.state.message = f"Error renaming session: {exc}"
                return None
            self.enter_browse(View.SESSIONS)
            self.state.message = f"Session renamed to '{renamed}'"
        return None

    def set_query(self, text: str) -> None:
        """Replace the text of the active input line.

        Filter and Create re-rank on every change; Browse has no input
        line and ignores late updates.
        """
        mode = self.state.mode
        if isinstance(mode, BrowseMode):
            return
        text = text[:QUERY_LIMIT]
        if text == mode.query:
            return
        self.state.mode = replace(mode, query=text)
        if not isinstance(mode, RenameMode):
            self._refilter()

    # -- helpers ------------------------------------------------------------

    def _browse_state(self, view: View, catalog: tuple[Entry, ...]) -> SelectionState:
        return SelectionState(BrowseMode(view), catalog, list(catalog))

    def enter_browse(self, view: View) -> None:
        """Return to Browse on a freshly pulled catalog."""
        if view is View.SESSIONS:
            catalog = tuple(self.sessions.list_entries())
        else:
            catalog = self._scan_projects()
        self.state = self._browse_state(view, catalog)

    def _scan_projects(self) -> tuple[Entry, ...]:
        return tuple(self.projects.list_entries())

    def _enter_create(self) -> None:
        catalog = self._scan_projects()
        self.state = SelectionState(
            CreateMode(),
            catalog,
            list(catalog),
            reset_cursor(len(catalog), ascending=True),
        )

    def _kill_selected(self, mode: BrowseMode) -> None:
        entry = self.selected
        if entry is None or not entry.is_session:
            return
        try:
            self.sink.kill_session(entry.title)
        except tmux.CommandError as exc:
            logger.warning(f"Killing {entry.title} failed: {exc}")
            self.state.message = f"Error killing session: {exc}"
            return
        self.enter_browse(mode.view)
        self.state.message = f"Session '{entry.title}' killed"

    def _refilter(self) -> None:
        ascending = self.ascending
        ranked = filter_entries(self.state.catalog, self.state.query, ascending=ascending)
        self.state.ranked = ranked
        self.state.cursor = reset_cursor(len(ranked), ascending=ascending)

    def _move(self, delta: int) -> None:
        self.state.cursor = move_cursor(self.state.cursor, delta, len(self.state.ranked))

