"""Recognition of clonable remote repository references."""

from __future__ import annotations

WEB_PREFIX = "https://github.com/"
SCP_PREFIX = "git@github.com:"
REMOTE_PREFIXES = (WEB_PREFIX, SCP_PREFIX)
REPO_SUFFIX = ".git"


def is_remote_reference(text: str) -> bool:
    """True when *text* looks like a GitHub web or SCP-style repository URL."""
    return text.strip().startswith(REMOTE_PREFIXES)


def extract_repo_name(url: str) -> str:
    """Return the repository segment (after the owner) of *url*, or ``""``.

    >>> extract_repo_name("git@github.com:acme/widgets.git")
    'widgets'
    """
    url = url.strip()
    for prefix in REMOTE_PREFIXES:
        if url.startswith(prefix):
            path = url[len(prefix):]
            if path.endswith(REPO_SUFFIX):
                path = path[: -len(REPO_SUFFIX)]
            parts = path.split("/")
            if len(parts) >= 2:
                return parts[1]
            return ""
    return ""
