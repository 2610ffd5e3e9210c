from __future__ import annotations

import subprocess

from muxsesh.models import Entry, EntryKind
from muxsesh.providers import EntryProvider
from muxsesh.tmux import CommandError


def make_session(name: str = "main", **overrides) -> Entry:
    data = {
        "title": name,
        "kind": EntryKind.SESSION,
        "target": name,
        "description": "",
        "attached": False,
        "window_count": 1,
    }
    data.update(overrides)
    return Entry(**data)


def make_project(path: str = "/home/me/dev/widgets", **overrides) -> Entry:
    data = {
        "title": path.rsplit("/", 1)[-1],
        "kind": EntryKind.PROJECT,
        "target": path,
        "description": path.replace("/home/me", "~", 1),
    }
    data.update(overrides)
    return Entry(**data)


class FakeProvider(EntryProvider):
    """Serves a mutable list of entries and counts refreshes."""

    def __init__(self, entries=None) -> None:
        self.entries = list(entries or [])
        self.calls = 0

    def list_entries(self) -> list[Entry]:
        self.calls += 1
        return sorted(self.entries, key=lambda e: e.title)


class FakeSink:
    """Records kill/rename calls; set ``fail`` to make them raise."""

    def __init__(self, sessions: FakeProvider | None = None) -> None:
        self.sessions = sessions
        self.killed: list[str] = []
        self.renamed: list[tuple[str, str]] = []
        self.fail: str | None = None

    def kill_session(self, name: str) -> None:
        if self.fail:
            raise CommandError(self.fail)
        self.killed.append(name)
        if self.sessions is not None:
            self.sessions.entries = [e for e in self.sessions.entries if e.title != name]

    def rename_session(self, old: str, new: str) -> str:
        if self.fail:
            raise CommandError(self.fail)
        self.renamed.append((old, new))
        if self.sessions is not None:
            self.sessions.entries = [
                make_session(new) if e.title == old else e for e in self.sessions.entries
            ]
        return new


def completed(args, returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)
