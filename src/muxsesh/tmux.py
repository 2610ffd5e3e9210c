"""tmux operations: create, switch, kill and rename sessions."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path

from muxsesh.paths import abbreviate_home

logger = logging.getLogger(__name__)

# Delay before typing the editor command into a session that is being
# attached in the foreground.
EDITOR_DELAY_SECONDS = 0.1

PLAIN_SHELLS = frozenset({"bash", "zsh", "fish"})


class CommandError(RuntimeError):
    """An external command failed; the message is the reason to show."""


@dataclass
class WindowInfo:
    index: str
    name: str
    command: str
    path: str

    @property
    def program(self) -> str:
        """Running program, or ``""`` when the pane is sitting at a shell."""
        return "" if self.command in PLAIN_SHELLS else self.command


def _run_tmux(*args: str, check: bool = True) -> subprocess.CompletedProcess:
    """Run a tmux command, capturing its output."""
    cmd = ["tmux", *args]
    logger.debug(f"Running tmux command: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise CommandError("tmux is not installed") from exc
    if check and result.returncode != 0:
        reason = result.stderr.strip() or f"tmux {args[0]} exited with status {result.returncode}"
        raise CommandError(reason)
    return result


def _run_tmux_foreground(*args: str) -> None:
    """Run a tmux command attached to the current terminal."""
    cmd = ["tmux", *args]
    logger.debug(f"Running tmux in foreground: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd)
    except FileNotFoundError as exc:
        raise CommandError("tmux is not installed") from exc
    if result.returncode != 0:
        raise CommandError(f"tmux {args[0]} exited with status {result.returncode}")


def inside_tmux() -> bool:
    return "TMUX" in os.environ


def server_running() -> bool:
    try:
        return _run_tmux("list-sessions", check=False).returncode == 0
    except CommandError:
        return False


def session_exists(name: str) -> bool:
    return _run_tmux("has-session", f"-t={name}", check=False).returncode == 0


def sanitize_session_name(name: str) -> str:
    """tmux treats '.' as a target separator, so map it (and spaces) to '_'."""
    return name.replace(".", "_").replace(" ", "_")


def session_name_for_path(path: str) -> str:
    return Path(path).name.replace(".", "_")


def _send_editor(name: str, editor_cmd: str) -> None:
    if not editor_cmd:
        return
    try:
        _run_tmux("send-keys", "-t", name, editor_cmd, "Enter", check=False)
    except CommandError as exc:
        logger.debug(f"Could not open editor in {name}: {exc}")


def open_editor_later(name: str, editor_cmd: str, delay: float = EDITOR_DELAY_SECONDS) -> threading.Thread:
    """Fire-and-forget: type *editor_cmd* into *name* after *delay* seconds."""

    def _worker() -> None:
        time.sleep(delay)
        _send_editor(name, editor_cmd)

    thread = threading.Thread(target=_worker, name=f"editor-{name}", daemon=True)
    thread.start()
    return thread


def switch_to(name: str) -> None:
    """Switch the current client to *name*, or attach when outside tmux."""
    if not name:
        raise CommandError("session name cannot be empty")
    if inside_tmux():
        _run_tmux("switch-client", "-t", name)
    else:
        _run_tmux_foreground("attach-session", "-t", name)


def _create(name: str, cwd: str | None, editor_cmd: str) -> str:
    cwd_args = ["-c", cwd] if cwd else []

    if not inside_tmux() and not server_running():
        # No server to switch into: the new session takes over this
        # terminal, so the editor has to be started from another thread.
        open_editor_later(name, editor_cmd)
        _run_tmux_foreground("new-session", "-s", name, *cwd_args)
        logger.info(f"Session {name} exited")
        return name

    if not session_exists(name):
        _run_tmux("new-session", "-d", "-s", name, *cwd_args)
        logger.info(f"Created session {name}" + (f" in {cwd}" if cwd else ""))
        _send_editor(name, editor_cmd)
    switch_to(name)
    return name


def create_at(path: str, editor_cmd: str = "") -> str:
    """Create (or reuse) a session rooted at *path* and switch to it."""
    if not path:
        raise CommandError("project path cannot be empty")
    return _create(session_name_for_path(path), path, editor_cmd)


def create_named(name: str, editor_cmd: str = "") -> str:
    """Create (or reuse) a session called *name* and switch to it."""
    name = sanitize_session_name(name.strip())
    if not name:
        raise CommandError("session name cannot be empty")
    return _create(name, None, editor_cmd)


def kill_session(name: str) -> None:
    if not name:
        raise CommandError("session name cannot be empty")
    _run_tmux("kill-session", "-t", name)
    logger.info(f"Killed session {name}")


def rename_session(old: str, new: str) -> str:
    """Rename *old* and return the name tmux actually received."""
    new = sanitize_session_name(new)
    if not old or not new:
        raise CommandError("session names cannot be empty")
    _run_tmux("rename-session", "-t", old, new)
    logger.info(f"Renamed session {old} -> {new}")
    return new


def list_windows(name: str) -> list[WindowInfo]:
    """Describe the windows of session *name*; empty when it cannot be queried."""
    fmt = "#{window_index}\t#{window_name}\t#{pane_current_command}\t#{pane_current_path}"
    try:
        result = _run_tmux("list-windows", "-t", name, "-F", fmt)
    except CommandError as exc:
        logger.debug(f"Could not list windows of {name}: {exc}")
        return []

    windows = []
    for line in result.stdout.splitlines():
        parts = line.split("\t")
        if len(parts) != 4:
            continue
        index, window_name, command, path = parts
        windows.append(WindowInfo(index, window_name, command, abbreviate_home(path)))
    return windows
