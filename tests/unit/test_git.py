from __future__ import annotations

from pathlib import Path

import pytest

from muxsesh.git import CloneError, clone_repo
from muxsesh.tmux import CommandError


def test_clone_into_repos_dir(fake_run, tmp_path: Path) -> None:
    repos = tmp_path / "repos"
    target = clone_repo("git@github.com:acme/widgets.git", repos)
    assert target == repos / "widgets"
    assert repos.is_dir()
    assert fake_run.calls == [
        ["git", "clone", "git@github.com:acme/widgets.git", str(repos / "widgets")]
    ]


def test_existing_checkout_is_reused(fake_run, tmp_path: Path) -> None:
    (tmp_path / "widgets").mkdir()
    assert clone_repo("https://github.com/acme/widgets", tmp_path) == tmp_path / "widgets"
    assert fake_run.calls == []


def test_unparseable_url(fake_run, tmp_path: Path) -> None:
    with pytest.raises(CloneError, match="could not extract"):
        clone_repo("https://github.com/acme", tmp_path)


def test_clone_failure_is_a_command_error(fake_run, tmp_path: Path) -> None:
    fake_run.responses["clone"] = (128, "", "fatal: repository not found\n")
    with pytest.raises(CommandError, match="repository not found"):
        clone_repo("https://github.com/acme/missing", tmp_path)
