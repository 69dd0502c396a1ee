"""Timestamped backups of files about to be overwritten."""

from __future__ import annotations

import os
import stat
from datetime import datetime
from pathlib import Path

from envshade.lib.fs.backup import backup_path, create_backup

_NOW = datetime(2024, 3, 5, 7, 8, 9)


def test_backup_path_format(tmp_path: Path) -> None:
    assert backup_path(tmp_path / ".env", _NOW) == tmp_path / ".env.bak.20240305070809"


def test_create_backup_missing_file_returns_none(tmp_path: Path) -> None:
    assert create_backup(tmp_path / ".env", now=_NOW) is None
    assert list(tmp_path.iterdir()) == []


def test_create_backup_copies_content_and_mode(tmp_path: Path) -> None:
    source = tmp_path / ".env"
    source.write_text("SECRET=1\n", encoding="utf-8")
    os.chmod(source, 0o600)

    created = create_backup(source, now=_NOW)

    assert created == tmp_path / ".env.bak.20240305070809"
    assert created.read_text(encoding="utf-8") == "SECRET=1\n"
    assert stat.S_IMODE(created.stat().st_mode) == 0o600
    assert source.read_text(encoding="utf-8") == "SECRET=1\n"
