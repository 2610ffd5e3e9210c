"""Outbound actions: what a commit resolves to, and how it is carried out."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from muxsesh import git, tmux
from muxsesh.config import Config
from muxsesh.models import Entry
from muxsesh.remote import is_remote_reference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Switch:
    target: str


@dataclass(frozen=True)
class CreateFromPath:
    path: str


@dataclass(frozen=True)
class CreateNamed:
    name: str


@dataclass(frozen=True)
class CloneAndCreate:
    url: str


Action = Switch | CreateFromPath | CreateNamed | CloneAndCreate


def action_for_entry(entry: Entry) -> Action:
    """Switch to a live session, or create one for a project directory."""
    if entry.is_session:
        return Switch(entry.target)
    return CreateFromPath(entry.target)


def resolve_selection(ranked: Sequence[Entry], cursor: int) -> Action | None:
    """Commit in Browse/Filter: act on the highlighted entry, if any."""
    if not 0 <= cursor < len(ranked):
        return None
    return action_for_entry(ranked[cursor])


def resolve_create(query: str, ranked: Sequence[Entry], cursor: int) -> Action | None:
    """Commit in Create mode.

    A remote repository URL always wins over the list; otherwise the
    highlighted project (or the first one) is used, and with no matches
    left the typed text names a brand-new session.
    """
    text = query.strip()
    if not text:
        return None
    if is_remote_reference(text):
        return CloneAndCreate(text)
    if ranked:
        entry = ranked[cursor] if 0 <= cursor < len(ranked) else ranked[0]
        return CreateFromPath(entry.target)
    return CreateNamed(text)


def describe(action: Action) -> str:
    """What running *action* is doing, for error messages."""
    if isinstance(action, Switch):
        return "switching to tmux session"
    if isinstance(action, CloneAndCreate):
        return "cloning repository"
    return "creating tmux session"


def run_action(action: Action, config: Config) -> str:
    """Carry out *action*; returns the session name that was targeted.

    Raises :class:`tmux.CommandError` (or :class:`git.CloneError`) with the
    failure reason.
    """
    logger.info(f"Running {action}")
    if isinstance(action, Switch):
        tmux.switch_to(action.target)
        return action.target
    if isinstance(action, CreateFromPath):
        return tmux.create_at(action.path, config.editor_cmd)
    if isinstance(action, CreateNamed):
        return tmux.create_named(action.name, config.editor_cmd)
    if isinstance(action, CloneAndCreate):
        path = git.clone_repo(action.url, config.repos_dir())
        return tmux.create_at(str(path), config.editor_cmd)
    raise TypeError(f"Unknown action: {action!r}")
