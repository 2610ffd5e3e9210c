"""Textual pilot smoke tests for MuxSeshApp.

These tests use Textual's headless ``run_test()`` driver to verify that
the TUI boots, renders the picker and forwards key presses to it without
touching tmux or the filesystem.
"""

from __future__ import annotations

import pytest
import pytest_asyncio
from textual import events
from textual.widgets import Input

from muxsesh import app as app_mod
from muxsesh.actions import CloneAndCreate, CreateNamed, Switch
from muxsesh.app import MuxSeshApp
from muxsesh.config import Config
from muxsesh.models import View
from muxsesh.picker import BrowseMode, CreateMode, FilterMode, Picker, RenameMode
from muxsesh.tmux import WindowInfo
from tests.helpers import FakeProvider, FakeSink, make_project, make_session


def _picker() -> Picker:
    sessions = FakeProvider([make_session("api", attached=True), make_session("web")])
    projects = FakeProvider([make_project("/home/me/dev/widgets")])
    return Picker(sessions, projects, sink=FakeSink(sessions))


@pytest_asyncio.fixture()
async def app():
    """Yield a headless MuxSeshApp driven by fake collaborators."""
    windows = lambda name: [WindowInfo("1", "editor", "nvim", "~/dev/api")]
    mux_app = MuxSeshApp(_picker(), windows=windows)
    async with mux_app.run_test() as pilot:
        await pilot.pause()
        yield mux_app, pilot


@pytest.mark.integration
@pytest.mark.asyncio
async def test_app_mounts_expected_widgets(app):
    mux_app, _pilot = app

    mux_app.query_one("#title")
    mux_app.query_one("#target-list")
    mux_app.query_one("#details")
    mux_app.query_one("#query-line")
    mux_app.query_one("#query-input", Input)
    mux_app.query_one("#status-bar")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_browse_lines_mark_cursor(app):
    mux_app, pilot = app

    lines = mux_app._list_lines()
    assert len(lines) == 2
    assert "▶ 1" in lines[0]
    assert "api" in lines[0]

    await pilot.press("down")
    lines = mux_app._list_lines()
    assert "▶ 2" in lines[1]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_details_show_windows(app):
    mux_app, _pilot = app

    text = mux_app._details_text()
    assert "Active" in text
    assert "1: editor" in text
    assert "nvim" in text


@pytest.mark.integration
@pytest.mark.asyncio
async def test_typing_filters(app):
    mux_app, pilot = app

    await pilot.press("slash")
    await pilot.pause()
    assert mux_app.picker.mode == FilterMode(View.SESSIONS, "")
    assert mux_app.focused is mux_app.query_one("#query-input", Input)

    await pilot.press("w", "e")
    await pilot.pause()
    assert mux_app.picker.state.query == "we"
    assert [e.title for e in mux_app.picker.state.ranked] == ["web"]

    await pilot.press("escape")
    await pilot.pause()
    assert mux_app.picker.mode == BrowseMode(View.SESSIONS)
    assert mux_app.query_one("#query-line").display is False
    assert mux_app.focused is None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_mode_hides_details(app):
    mux_app, pilot = app

    await pilot.press("n")
    await pilot.pause()
    assert isinstance(mux_app.picker.mode, CreateMode)
    assert mux_app.query_one("#details").display is False

    await pilot.press("w", "i", "d")
    await pilot.pause()
    assert "[bold]wid[/bold]" in mux_app._list_lines()[0]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_rename_flow(app):
    mux_app, pilot = app

    await pilot.press("r")
    await pilot.pause()
    assert mux_app.picker.mode == RenameMode(target="api", query="api")
    assert mux_app.query_one("#query-input", Input).value == "api"

    await pilot.press("2")
    await pilot.pause()
    await pilot.press("enter")
    assert mux_app.picker.state.message == "Session renamed to 'api2'"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_enter_exits_with_action(app):
    mux_app, pilot = app

    await pilot.press("enter")
    assert mux_app.return_value == Switch("api")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_pasted_url_in_create_clones(app):
    mux_app, pilot = app
    url = "https://github.com/acme/widgets"

    await pilot.press("n")
    await pilot.pause()
    mux_app.post_message(events.Paste(url))
    await pilot.pause()
    assert mux_app.picker.state.query == url
    assert "Clone & create session: widgets" in mux_app._list_lines()[0]

    await pilot.press("enter")
    assert mux_app.return_value == CloneAndCreate(url)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_input_supports_cursor_movement(app):
    mux_app, pilot = app

    await pilot.press("slash")
    await pilot.pause()
    await pilot.press("w", "b", "left", "e")
    await pilot.pause()
    assert mux_app.picker.state.query == "web"

    await pilot.press("ctrl+u")
    await pilot.pause()
    assert mux_app.picker.state.query == "b"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_navigation_keys_reach_picker_while_typing(app):
    mux_app, pilot = app

    await pilot.press("slash")
    await pilot.pause()
    await pilot.press("ctrl+j")
    await pilot.pause()
    assert mux_app.picker.state.cursor == 1

    await pilot.press("ctrl+k", "down")
    await pilot.pause()
    assert mux_app.picker.state.cursor == 1
    assert isinstance(mux_app.picker.mode, FilterMode)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_footer_shows_commands_for_current_mode(app):
    mux_app, pilot = app

    bindings = mux_app.screen.active_bindings
    assert bindings["d"].binding.description == "Kill"
    assert bindings["n"].binding.description == "New"

    await pilot.press("slash")
    await pilot.pause()
    bindings = mux_app.screen.active_bindings
    assert "d" not in bindings
    assert bindings["escape"].binding.description == "Cancel"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_letters_type_into_query_instead_of_commands(app):
    mux_app, pilot = app

    await pilot.press("slash")
    await pilot.pause()
    await pilot.press("q", "d")
    await pilot.pause()
    assert mux_app.picker.state.query == "qd"
    assert mux_app.return_value is None
    assert isinstance(mux_app.picker.mode, FilterMode)

def test_highlight_text_escapes_markup() -> None:
    out = MuxSeshApp._highlight_text("~/dev/[x]/Widgets", "wid")
    assert "[bold]Wid[/bold]" in out
    assert "\\[x]" in out


def test_execute_reports_failure(monkeypatch, capsys) -> None:
    from muxsesh.tmux import CommandError

    def _fail(action, config):
        raise CommandError("duplicate session")

    monkeypatch.setattr(app_mod, "run_action", _fail)
    with pytest.raises(SystemExit) as exc:
        app_mod.execute(CreateNamed("x"), Config())
    assert exc.value.code == 1
    assert "Error creating tmux session: duplicate session" in capsys.readouterr().err
