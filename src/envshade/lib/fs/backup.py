"""Timestamped sibling backups taken before an output file is overwritten."""

from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def backup_path(path: Path | str, timestamp: datetime) -> Path:
    """Return `<path>.bak.<YYYYMMDDHHMMSS>` without touching the filesystem."""

    target = Path(path)
    return target.with_name(f"{target.name}.bak.{timestamp.strftime(BACKUP_TIMESTAMP_FORMAT)}")


def create_backup(path: Path | str, *, now: datetime | None = None) -> Path | None:
    """Copy `path` (content and permission bits) next to itself.

    Returns `None` when there is nothing to back up.
    """

    source = Path(path)
    if not source.exists():
        return None

    destination = backup_path(source, now or datetime.now())
    shutil.copyfile(source, destination)
    shutil.copymode(source, destination)
    logger.info("backup created", source=source.as_posix(), backup=destination.as_posix())
    return destination
