"""User configuration stored as JSON under the XDG config directory."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from muxsesh.paths import CONFIG_DIR

logger = logging.getLogger(__name__)

CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_EDITOR_CMD = (
    "nvim -c \"lua if pcall(require, 'telescope') then vim.cmd('Telescope find_files') end\""
)


def _default_project_paths() -> list[str]:
    return ["~/dev", "~/personal"]


@dataclass
class Config:
    project_paths: list[str] = field(default_factory=_default_project_paths)
    repos_path: str = "~/dev/repos"
    editor: str = "nvim"
    editor_cmd: str = DEFAULT_EDITOR_CMD
    max_results: int = 15
    search_depth: int = 3

    def project_roots(self) -> list[Path]:
        return [Path(p).expanduser() for p in self.project_paths]

    def repos_dir(self) -> Path:
        return Path(self.repos_path).expanduser()


def _normalize_config(data: object) -> Config:
    config = Config()
    if not isinstance(data, dict):
        return config

    paths = data.get("project_paths")
    if isinstance(paths, list) and paths and all(isinstance(p, str) and p for p in paths):
        config.project_paths = list(paths)

    for key in ("repos_path", "editor", "editor_cmd"):
        value = data.get(key)
        if isinstance(value, str) and value:
            setattr(config, key, value)

    for key in ("max_results", "search_depth"):
        value = data.get(key)
        # bool is an int subclass
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            setattr(config, key, value)

    return config


def load_config() -> Config:
    """Load the configuration, creating the file with defaults on first run."""
    if not CONFIG_FILE.exists():
        config = Config()
        save_config(config)
        return config
    try:
        with open(CONFIG_FILE) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning(f"Ignoring unreadable config {CONFIG_FILE}: {exc}")
        return Config()
    return _normalize_config(data)


def save_config(config: Config) -> None:
    """Save known configuration keys to disk."""
    data = asdict(_normalize_config(asdict(config)))
    try:
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "w") as f:
            json.dump(data, f, indent=2)
    except OSError as exc:
        logger.warning(f"Could not write config {CONFIG_FILE}: {exc}")
