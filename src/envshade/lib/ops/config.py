"""`config init` and `config show`: scaffold and explain `.envshade.toml`."""

from __future__ import annotations

import asyncio
import json
import os
from dataclasses import dataclass
from itertools import groupby
from typing import TYPE_CHECKING, Literal

from envshade.lib.config.settings import (
    CONFIG_FILE_NAME,
    SETTINGS,
    EnvshadeConfig,
    config_path,
    read_file_values,
)
from envshade.lib.ops._runtime import resolve_runtime_root_and_config
from envshade.lib.ops.registry import OperationSpec, operation
from envshade.lib.serialization import to_jsonable

if TYPE_CHECKING:
    from envshade.lib.formatting import FormatContext

ValueSource = Literal["builtin", "file", "env var"]


def _toml_literal(value: object) -> str:
    # JSON spells bools, strings and string arrays the way TOML does.
    return json.dumps(to_jsonable(value))


@dataclass(frozen=True, slots=True)
class ConfigInitInput:
    repo_root: str | None = None


@dataclass(frozen=True, slots=True)
class ConfigInitOutput:
    path: str
    created: bool

    def format_text(self, ctx: FormatContext | None = None) -> str:
        _ = ctx
        return f"{'created' if self.created else 'exists'}: {self.path}"


@dataclass(frozen=True, slots=True)
class ConfigShowInput:
    repo_root: str | None = None


@dataclass(frozen=True, slots=True)
class ConfigResolvedValue:
    key: str
    value: object
    source: ValueSource
    env_var: str | None = None


@dataclass(frozen=True, slots=True)
class ConfigShowOutput:
    path: str
    exists: bool
    values: tuple[ConfigResolvedValue, ...]

    def format_text(self, ctx: FormatContext | None = None) -> str:
        """The effective settings as TOML, each annotated with its origin."""

        _ = ctx
        lines = [f"# {self.path}" + ("" if self.exists else " (not found)")]
        for section, items in groupby(self.values, key=lambda item: item.key.split(".")[0]):
            lines.extend(("", f"[{section}]"))
            for item in items:
                origin = item.source if item.env_var is None else f"env var {item.env_var}"
                name = item.key.split(".", 1)[1]
                lines.append(f"{name} = {_toml_literal(item.value)}  # {origin}")
        return "\n".join(lines)


def scaffold_text(defaults: EnvshadeConfig | None = None) -> str:
    """Commented-out `.envshade.toml` listing every setting and its default."""

    defaults = defaults or EnvshadeConfig()
    lines = [
        f"# envshade configuration ({CONFIG_FILE_NAME}).",
        "# Uncomment a key to override its built-in default.",
    ]
    for section, settings in groupby(SETTINGS, key=lambda setting: setting.section):
        lines.extend(("", f"[{section}]"))
        for setting in settings:
            lines.append(f"# Environment: {setting.env_var}")
            default = getattr(defaults, setting.field)
            lines.append(f"# {setting.key} = {_toml_literal(default)}")
    return "\n".join(lines) + "\n"


def config_init_sync(payload: ConfigInitInput) -> ConfigInitOutput:
    repo_root, _ = resolve_runtime_root_and_config(payload.repo_root)
    path = config_path(repo_root)
    created = not path.exists()
    if created:
        path.write_text(scaffold_text(), encoding="utf-8")
    return ConfigInitOutput(path=path.as_posix(), created=created)


def config_show_sync(payload: ConfigShowInput) -> ConfigShowOutput:
    repo_root, resolved = resolve_runtime_root_and_config(payload.repo_root)
    path = config_path(repo_root)
    set_in_file = read_file_values(path)

    values: list[ConfigResolvedValue] = []
    for setting in SETTINGS:
        env_var: str | None = None
        source: ValueSource = "builtin"
        if os.getenv(setting.env_var) is not None:
            source, env_var = "env var", setting.env_var
        elif setting.field in set_in_file:
            source = "file"
        values.append(
            ConfigResolvedValue(
                key=setting.dotted_key,
                value=getattr(resolved, setting.field),
                source=source,
                env_var=env_var,
            )
        )
    return ConfigShowOutput(path=path.as_posix(), exists=path.is_file(), values=tuple(values))


async def config_init(payload: ConfigInitInput) -> ConfigInitOutput:
    return await asyncio.to_thread(config_init_sync, payload)


async def config_show(payload: ConfigShowInput) -> ConfigShowOutput:
    return await asyncio.to_thread(config_show_sync, payload)


operation(
    OperationSpec[ConfigInitInput, ConfigInitOutput](
        name="config.init",
        handler=config_init,
        sync_handler=config_init_sync,
        input_type=ConfigInitInput,
        output_type=ConfigInitOutput,
        cli_group="config",
        cli_name="init",
        mcp_name="config_init",
        description=f"Scaffold {CONFIG_FILE_NAME} with commented defaults.",
        cli_only=True,
    )
)

operation(
    OperationSpec[ConfigShowInput, ConfigShowOutput](
        name="config.show",
        handler=config_show,
        sync_handler=config_show_sync,
        input_type=ConfigShowInput,
        output_type=ConfigShowOutput,
        cli_group="config",
        cli_name="show",
        mcp_name="config_show",
        description="Show resolved configuration values and where each came from.",
    )
)
