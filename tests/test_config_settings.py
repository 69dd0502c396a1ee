"""Config file loading, environment overrides and repo-root resolution."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import pytest

from envshade.lib.config import EnvshadeConfig, load_config, resolve_repo_root
from envshade.lib.fs.scanner import DEFAULT_SKIP_DIRS


def _install_config(repo_root: Path, content: str) -> None:
    repo_root.mkdir(parents=True, exist_ok=True)
    (repo_root / ".envshade.toml").write_text(content, encoding="utf-8")


def test_load_config_from_fixture_toml(fixtures_dir: Path, tmp_path: Path) -> None:
    shutil.copyfile(fixtures_dir / "config" / "settings.toml", tmp_path / ".envshade.toml")

    loaded = load_config(tmp_path)

    assert loaded == EnvshadeConfig(create_backup=False, skip_dirs=("node_modules", "fixtures"))


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    loaded = load_config(tmp_path)

    assert loaded == EnvshadeConfig()
    assert loaded.create_backup is True
    assert set(loaded.skip_dirs) == DEFAULT_SKIP_DIRS


def test_load_config_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _install_config(tmp_path, "[generate]\nbackup = true\n")
    monkeypatch.setenv("ENVSHADE_BACKUP", "off")
    monkeypatch.setenv("ENVSHADE_SKIP_DIRS", "vendor, .venv ,")

    loaded = load_config(tmp_path)

    assert loaded.create_backup is False
    assert loaded.skip_dirs == ("vendor", ".venv")


def test_load_config_warns_on_unknown_keys(
    caplog: pytest.LogCaptureFixture,
    tmp_path: Path,
) -> None:
    _install_config(
        tmp_path,
        "[generate]\nbackup = false\nunknown_flag = 1\n\n[mystery]\nvalue = 123\n",
    )
    caplog.set_level(logging.WARNING, logger="envshade.lib.config.settings")

    loaded = load_config(tmp_path)

    assert loaded.create_backup is False
    messages = [record.getMessage() for record in caplog.records]
    assert any("generate.unknown_flag" in message for message in messages)
    assert any("mystery" in message for message in messages)


def test_load_config_rejects_type_errors(tmp_path: Path) -> None:
    _install_config(tmp_path, "[generate]\nbackup = 'yes'\n")

    with pytest.raises(ValueError, match=r"generate\.backup.*expected bool"):
        load_config(tmp_path)


def test_load_config_rejects_non_string_skip_dirs(tmp_path: Path) -> None:
    _install_config(tmp_path, "[scan]\nskip_dirs = ['ok', 3]\n")

    with pytest.raises(ValueError, match=r"scan\.skip_dirs"):
        load_config(tmp_path)


def test_load_config_rejects_non_table_section(tmp_path: Path) -> None:
    _install_config(tmp_path, "generate = true\n")

    with pytest.raises(ValueError, match="expected table"):
        load_config(tmp_path)


def test_load_config_rejects_bad_env_override(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("ENVSHADE_BACKUP", "maybe")

    with pytest.raises(ValueError, match="ENVSHADE_BACKUP"):
        load_config(tmp_path)


def test_resolve_repo_root_precedence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    project = tmp_path / "project"
    nested = project / "services" / "api"
    nested.mkdir(parents=True)
    (project / ".envshade.toml").write_text("", encoding="utf-8")
    monkeypatch.chdir(nested)

    assert resolve_repo_root() == project.resolve()

    monkeypatch.setenv("ENVSHADE_REPO_ROOT", str(tmp_path))
    assert resolve_repo_root() == tmp_path.resolve()
    assert resolve_repo_root(nested) == nested.resolve()


def test_resolve_repo_root_stops_at_git_boundary(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    project = tmp_path / "project"
    (project / ".git").mkdir(parents=True)
    (project / "pkg").mkdir()
    monkeypatch.chdir(project / "pkg")

    assert resolve_repo_root() == project.resolve()
