"""XDG Base Directory paths for mux-sesh."""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "mux-sesh"


def _xdg_cache_home() -> Path:
    val = os.environ.get("XDG_CACHE_HOME", "")
    if val and Path(val).is_absolute():
        return Path(val)
    return Path.home() / ".cache"


def _xdg_config_home() -> Path:
    val = os.environ.get("XDG_CONFIG_HOME", "")
    if val and Path(val).is_absolute():
        return Path(val)
    return Path.home() / ".config"


CACHE_DIR = _xdg_cache_home() / APP_NAME
CONFIG_DIR = _xdg_config_home() / APP_NAME
LOG_FILE = CACHE_DIR / f"{APP_NAME}.log"


def abbreviate_home(path: str) -> str:
    """Replace a leading home directory with ``~``."""
    home = str(Path.home())
    if path == home or path.startswith(home + os.sep):
        return "~" + path[len(home):]
    return path
