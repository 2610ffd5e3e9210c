"""Data models for mux-sesh."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EntryKind(Enum):
    SESSION = "session"
    PROJECT = "project"


class View(Enum):
    """Which catalog source Browse mode is showing."""

    SESSIONS = "sessions"
    PROJECTS = "projects"


@dataclass(frozen=True)
class Entry:
    title: str
    kind: EntryKind
    target: str  # session name, or absolute directory path
    description: str = ""  # "~"-abbreviated path for projects
    attached: bool = False  # sessions only
    window_count: int = 0  # sessions only

    @property
    def is_session(self) -> bool:
        return self.kind is EntryKind.SESSION


@dataclass(frozen=True)
class RankedEntry:
    entry: Entry
    score: int
