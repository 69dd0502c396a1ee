"""`.envshade.toml` loading with environment overrides."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, cast

from envshade.lib.fs.scanner import DEFAULT_SKIP_DIRS

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".envshade.toml"

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class EnvshadeConfig:
    """Resolved operational configuration for envshade."""

    create_backup: bool = True
    skip_dirs: tuple[str, ...] = tuple(sorted(DEFAULT_SKIP_DIRS))


@dataclass(frozen=True, slots=True)
class Setting:
    """Where one `EnvshadeConfig` field is read from."""

    field: str
    section: str
    key: str
    env_var: str
    kind: Literal["bool", "names"]
    aliases: tuple[str, ...] = ()

    @property
    def dotted_key(self) -> str:
        return f"{self.section}.{self.key}"


SETTINGS: tuple[Setting, ...] = (
    Setting(
        field="create_backup",
        section="generate",
        key="backup",
        env_var="ENVSHADE_BACKUP",
        kind="bool",
        aliases=("create_backup",),
    ),
    Setting(
        field="skip_dirs",
        section="scan",
        key="skip_dirs",
        env_var="ENVSHADE_SKIP_DIRS",
        kind="names",
    ),
)


def config_path(repo_root: Path) -> Path:
    return repo_root / CONFIG_FILE_NAME


def _find_setting(section: str, key: str) -> Setting | None:
    for setting in SETTINGS:
        if setting.section == section and key in (setting.key, *setting.aliases):
            return setting
    return None


def _file_value(setting: Setting, raw: object) -> object:
    where = setting.dotted_key
    if setting.kind == "bool":
        if not isinstance(raw, bool):
            raise ValueError(f"Invalid value for '{where}': expected bool, got {raw!r}.")
        return raw

    items = cast("list[object]", raw) if isinstance(raw, list) else None
    if items is None or not all(isinstance(item, str) and item.strip() for item in items):
        raise ValueError(
            f"Invalid value for '{where}': expected an array of non-empty strings, got {raw!r}."
        )
    return tuple(cast("str", item).strip() for item in items)


def _env_value(setting: Setting, raw: str) -> object:
    if setting.kind == "bool":
        word = raw.strip().lower()
        if word not in _TRUE_WORDS | _FALSE_WORDS:
            raise ValueError(f"Invalid {setting.env_var}={raw!r}: expected a boolean word.")
        return word in _TRUE_WORDS

    names = tuple(name.strip() for name in raw.split(",") if name.strip())
    if not names:
        raise ValueError(f"Invalid {setting.env_var}={raw!r}: expected comma-separated names.")
    return names


def read_file_values(path: Path) -> dict[str, object]:
    """Validated values set in `path`, keyed by `EnvshadeConfig` field.

    A missing file sets nothing. Unknown sections and keys are logged and
    ignored.
    """

    if not path.is_file():
        return {}
    document = tomllib.loads(path.read_text(encoding="utf-8"))

    values: dict[str, object] = {}
    for section, table in document.items():
        if not any(setting.section == section for setting in SETTINGS):
            logger.warning("Ignoring unknown section [%s] in %s.", section, path)
            continue
        if not isinstance(table, dict):
            raise ValueError(f"Invalid value for '{section}' in '{path}': expected table.")
        for key, raw in cast("dict[str, object]", table).items():
            setting = _find_setting(section, key)
            if setting is None:
                logger.warning("Ignoring unknown key '%s.%s' in %s.", section, key, path)
                continue
            values[setting.field] = _file_value(setting, raw)
    return values


def read_env_values() -> dict[str, object]:
    """Values set through `ENVSHADE_*` variables, keyed by field."""

    values: dict[str, object] = {}
    for setting in SETTINGS:
        raw = os.getenv(setting.env_var)
        if raw is not None:
            values[setting.field] = _env_value(setting, raw)
    return values


def load_config(repo_root: Path) -> EnvshadeConfig:
    """Defaults, then `.envshade.toml` in `repo_root`, then the environment."""

    values = read_file_values(config_path(repo_root))
    values.update(read_env_values())
    return EnvshadeConfig(**cast("dict[str, object]", values))  # type: ignore[arg-type]
