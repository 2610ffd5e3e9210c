"""Live tmux sessions as catalog entries."""

from __future__ import annotations

import logging

from muxsesh.models import Entry, EntryKind
from muxsesh.providers import EntryProvider
from muxsesh.tmux import CommandError, _run_tmux

logger = logging.getLogger(__name__)

SESSION_FORMAT = "#{session_name}:#{session_attached}:#{session_windows}"


def parse_session_line(line: str) -> Entry | None:
    """Parse one ``name:attached:windows`` line from ``list-sessions``."""
    parts = line.rsplit(":", 2)
    if len(parts) < 3 or not parts[0]:
        return None
    name, attached, windows = parts
    try:
        attached_clients = int(attached)
        window_count = int(windows)
    except ValueError:
        return None
    return Entry(
        title=name,
        kind=EntryKind.SESSION,
        target=name,
        attached=attached_clients > 0,
        window_count=window_count,
    )


class SessionProvider(EntryProvider):
    def list_entries(self) -> list[Entry]:
        try:
            result = _run_tmux("list-sessions", "-F", SESSION_FORMAT)
        except CommandError as exc:
            # No server running is the common case here.
            logger.debug(f"No tmux sessions: {exc}")
            return []

        entries = []
        for line in result.stdout.splitlines():
            entry = parse_session_line(line.strip())
            if entry is not None:
                entries.append(entry)
        entries.sort(key=lambda e: e.title)
        return entries
