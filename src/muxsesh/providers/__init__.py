"""Catalog providers: the sources of selectable entries."""

from __future__ import annotations

from abc import ABC, abstractmethod

from muxsesh.models import Entry


class EntryProvider(ABC):
    """Base class for catalog sources (tmux sessions, project directories)."""

    @abstractmethod
    def list_entries(self) -> list[Entry]:
        """Return a fresh snapshot, sorted by title.

        Providers never raise for an unavailable source; they return an
        empty list instead.
        """
