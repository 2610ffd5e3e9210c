from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import completed


@pytest.fixture()
def tmp_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    from muxsesh import config

    config_dir = tmp_path / "config" / "mux-sesh"
    monkeypatch.setattr(config, "CONFIG_FILE", config_dir / "config.json")
    return config_dir


@pytest.fixture(autouse=True)
def outside_tmux(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests start outside any tmux client unless they set $TMUX."""
    monkeypatch.delenv("TMUX", raising=False)


class FakeRun:
    """Stand-in for ``subprocess.run`` that records argv lists.

    ``responses`` maps a tmux/git subcommand (``argv[1]``) to either a
    CompletedProcess-like tuple ``(returncode, stdout, stderr)`` or a
    callable taking the argv list.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.responses: dict = {}

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        response = self.responses.get(cmd[1], (0, "", ""))
        if callable(response):
            response = response(cmd)
        returncode, stdout, stderr = response
        return completed(cmd, returncode, stdout, stderr)

    def subcommands(self) -> list[str]:
        return [c[1] for c in self.calls]


@pytest.fixture()
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    import muxsesh.git as git_mod
    import muxsesh.tmux as tmux_mod

    runner = FakeRun()
    monkeypatch.setattr(tmux_mod.subprocess, "run", runner)
    monkeypatch.setattr(git_mod.subprocess, "run", runner)
    return runner
