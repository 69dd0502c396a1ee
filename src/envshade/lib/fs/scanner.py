"""Recursive discovery of `.env` and `.env.example` files."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SKIP_DIRS: frozenset[str] = frozenset(
    {
        "node_modules",
        ".git",
        "vendor",
        "dist",
        "build",
        ".next",
        ".nuxt",
        "__pycache__",
    }
)

ENV_FILE_NAME = ".env"
EXAMPLE_SUFFIX = ".example"


def _is_env_family(name: str) -> bool:
    # `.env` itself or `.env.<anything>`; `.envrc` and friends do not count.
    return name == ENV_FILE_NAME or name.startswith(f"{ENV_FILE_NAME}.")


def is_env_file(name: str) -> bool:
    """`.env`, `.env.local`, `.env.production`, ... but never `*.example`."""

    return _is_env_family(name) and not name.endswith(EXAMPLE_SUFFIX)


def is_example_file(name: str) -> bool:
    """`.env.example` or `.env.<name>.example`."""

    return _is_env_family(name) and name.endswith(EXAMPLE_SUFFIX)


def _log_walk_error(error: OSError) -> None:
    logger.debug("Skipping unreadable path '%s': %s", error.filename, error.strerror)


def _walk(
    root: Path,
    *,
    matches: Callable[[str], bool],
    skip_dirs: Iterable[str],
) -> list[str]:
    if not root.is_dir():
        raise FileNotFoundError(f"Scan root '{root}' does not exist or is not a directory.")

    skipped = frozenset(skip_dirs)
    found: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        # Prune in place so os.walk never descends into dependency directories.
        dirnames[:] = sorted(name for name in dirnames if name not in skipped)
        current = Path(dirpath)
        for name in sorted(filenames):
            if matches(name):
                found.append((current / name).relative_to(root).as_posix())
    return found


def scan(root: Path | str, *, skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS) -> list[str]:
    """Return `.env` files under `root` as POSIX paths relative to it."""

    return _walk(Path(root), matches=is_env_file, skip_dirs=skip_dirs)


def scan_examples(
    root: Path | str,
    *,
    skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
) -> list[str]:
    """Return `.env*.example` files under `root` as POSIX paths relative to it."""

    return _walk(Path(root), matches=is_example_file, skip_dirs=skip_dirs)
