"""Clone remote repositories into the configured repos directory."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from muxsesh.remote import extract_repo_name
from muxsesh.tmux import CommandError

logger = logging.getLogger(__name__)


class CloneError(CommandError):
    pass


def clone_repo(url: str, repos_dir: Path) -> Path:
    """Clone *url* into *repos_dir* and return the local checkout.

    An existing checkout with the same repository name is reused as-is.
    """
    repo_name = extract_repo_name(url)
    if not repo_name:
        raise CloneError("could not extract repository name from URL")

    try:
        repos_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CloneError(f"failed to create repos directory: {exc}") from exc

    target = repos_dir / repo_name
    if target.exists():
        logger.info(f"Reusing existing checkout {target}")
        return target

    cmd = ["git", "clone", url.strip(), str(target)]
    logger.debug(f"Running git command: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise CloneError("git is not installed") from exc
    if result.returncode != 0:
        reason = result.stderr.strip() or f"git clone exited with status {result.returncode}"
        raise CloneError(f"failed to clone repository: {reason}")

    logger.info(f"Cloned {url} into {target}")
    return target
