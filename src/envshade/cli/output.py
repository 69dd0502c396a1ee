"""Render operation results on stdout as text, JSON or porcelain."""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Literal, cast

from envshade.lib.formatting import FormatContext, TextFormattable
from envshade.lib.serialization import to_jsonable

__all__ = ["OutputConfig", "emit", "normalize_output_format", "render"]

OutputFormat = Literal["text", "json", "porcelain"]
_FORMATS: tuple[str, ...] = ("text", "json", "porcelain")


@dataclass(frozen=True, slots=True)
class OutputConfig:
    format: OutputFormat
    verbosity: int = 0


def normalize_output_format(
    *,
    requested: str | None,
    json_mode: bool,
    porcelain_mode: bool,
) -> OutputFormat:
    """`--json` beats `--porcelain`, which beats `--format`."""

    if json_mode:
        return "json"
    if porcelain_mode:
        return "porcelain"
    choice = (requested or "text").strip().lower()
    if choice not in _FORMATS:
        raise SystemExit(f"--format must be one of: {', '.join(_FORMATS)}")
    return cast("OutputFormat", choice)


def _porcelain_field(value: object) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def porcelain_lines(payload: object) -> Iterator[str]:
    """One line per record: `key=value` pairs sorted by key, tab separated.

    A list payload yields one line per item; nested values are compact JSON.
    """

    records = cast("list[object]", payload) if isinstance(payload, list) else [payload]
    for record in records:
        if isinstance(record, dict):
            fields = cast("dict[str, object]", record)
            yield "\t".join(f"{key}={_porcelain_field(fields[key])}" for key in sorted(fields))
        else:
            yield str(record)


def render(value: Any, config: OutputConfig) -> str:
    if config.format == "text" and isinstance(value, TextFormattable):
        return value.format_text(FormatContext(verbosity=config.verbosity))
    payload = to_jsonable(value)
    if config.format == "porcelain":
        return "\n".join(porcelain_lines(payload))
    # Text mode falls back to indented JSON for values without a text form.
    indent = 2 if config.format == "text" else None
    return json.dumps(payload, sort_keys=True, indent=indent)


def emit(value: Any, config: OutputConfig) -> None:
    print(render(value, config))
