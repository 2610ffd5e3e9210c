"""Candidate project directories under the configured search roots."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from muxsesh.models import Entry, EntryKind
from muxsesh.paths import abbreviate_home
from muxsesh.providers import EntryProvider

logger = logging.getLogger(__name__)

EXCLUDED_DIRS = frozenset({"node_modules", "target", "build", "dist"})


def _is_candidate(name: str) -> bool:
    return not name.startswith(".") and name not in EXCLUDED_DIRS


def scan_projects(roots: Iterable[Path], max_depth: int = 3) -> list[str]:
    """Return directories 1..*max_depth* levels below each existing root.

    Hidden and build-artifact directories are skipped along with
    everything beneath them.
    """
    found: list[str] = []
    for root in roots:
        if not root.is_dir():
            logger.debug(f"Skipping missing project root {root}")
            continue
        base_depth = len(root.parts)

        def _skip(exc: OSError) -> None:
            logger.debug(f"Cannot scan {exc.filename}: {exc}")

        for dirpath, dirnames, _filenames in os.walk(root, onerror=_skip):
            depth = len(Path(dirpath).parts) - base_depth
            dirnames[:] = sorted(name for name in dirnames if _is_candidate(name))
            for name in dirnames:
                found.append(os.path.join(dirpath, name))
            if depth + 1 >= max_depth:
                dirnames[:] = []
    return found


def project_entry(path: str) -> Entry:
    return Entry(
        title=os.path.basename(path),
        kind=EntryKind.PROJECT,
        target=path,
        description=abbreviate_home(path),
    )


class ProjectProvider(EntryProvider):
    def __init__(self, roots: Iterable[Path], max_depth: int = 3) -> None:
        self.roots = list(roots)
        self.max_depth = max_depth

    def list_entries(self) -> list[Entry]:
        entries = [project_entry(p) for p in scan_projects(self.roots, self.max_depth)]
        entries.sort(key=lambda e: (e.title, e.target))
        return entries
