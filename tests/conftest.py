"""Shared pytest fixtures for library and CLI integration checks."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable

PACKAGE_ROOT = Path(__file__).resolve().parents[1]

_ENVSHADE_ENV_VARS = ("ENVSHADE_REPO_ROOT", "ENVSHADE_BACKUP", "ENVSHADE_SKIP_DIRS")


@dataclass(frozen=True, slots=True)
class CliResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


@pytest.fixture(autouse=True)
def _isolate_envshade_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENVSHADE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def package_root() -> Path:
    return PACKAGE_ROOT


@pytest.fixture
def fixtures_dir(package_root: Path) -> Path:
    return package_root / "tests" / "fixtures"


@pytest.fixture
def repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty project directory that resolves as the repository root."""

    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.setenv("ENVSHADE_REPO_ROOT", str(root))
    return root


@pytest.fixture
def cli_env(package_root: Path) -> dict[str, str]:
    env = {key: value for key, value in os.environ.items() if key not in _ENVSHADE_ENV_VARS}
    existing = env.get("PYTHONPATH", "")
    root = str(package_root / "src")
    env["PYTHONPATH"] = root if not existing else f"{root}:{existing}"
    return env


@pytest.fixture
def run_envshade(
    package_root: Path,
    cli_env: dict[str, str],
) -> Callable[..., CliResult]:
    def _run(
        args: list[str],
        *,
        cwd: Path | None = None,
        stdin: str | None = None,
        timeout: float = 15.0,
    ) -> CliResult:
        env = dict(cli_env)
        if cwd is not None:
            env["ENVSHADE_REPO_ROOT"] = str(cwd)
        completed = subprocess.run(
            [sys.executable, "-m", "envshade", *args],
            cwd=cwd or package_root,
            env=env,
            input=stdin if stdin is not None else "",
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
        return CliResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    return _run
