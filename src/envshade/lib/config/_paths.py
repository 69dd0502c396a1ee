"""Locate the repository an envshade command works on."""

from __future__ import annotations

import os
from pathlib import Path

from envshade.lib.config.settings import CONFIG_FILE_NAME

# Either marker ends the upward search; `.git` may be a file in worktrees.
_ROOT_MARKERS = (CONFIG_FILE_NAME, ".git")


def resolve_repo_root(explicit: Path | str | None = None) -> Path:
    """`explicit`, else `$ENVSHADE_REPO_ROOT`, else the nearest marked ancestor.

    Falls back to the working directory when no ancestor of it holds
    `.envshade.toml` or `.git`.
    """

    chosen = explicit if explicit is not None else os.getenv("ENVSHADE_REPO_ROOT")
    if chosen:
        return Path(chosen).expanduser().resolve()

    cwd = Path.cwd().resolve()
    for directory in (cwd, *cwd.parents):
        if any((directory / marker).exists() for marker in _ROOT_MARKERS):
            return directory
    return cwd
