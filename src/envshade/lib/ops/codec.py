"""Convert MCP tool arguments into operation input dataclasses.

Operation inputs only carry `str` and `bool` fields, either of which may be
optional, so those are the only types converted here.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import MISSING, Field, fields
from typing import Any, TypeVar, cast, get_type_hints

PayloadT = TypeVar("PayloadT")

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_BOOL_HINTS: tuple[object, ...] = (bool, bool | None)
_STR_HINTS: tuple[object, ...] = (str, str | None)


def _field_default(field: Field[Any]) -> object:
    if field.default is not MISSING:
        return field.default
    if field.default_factory is not MISSING:
        return field.default_factory()
    return inspect.Parameter.empty


def _convert(name: str, hint: object, value: object) -> object:
    if value is None:
        return None
    if hint in _BOOL_HINTS:
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_WORDS
        return bool(value)
    if hint in _STR_HINTS:
        return str(value)
    raise TypeError(f"Unsupported type for tool field '{name}': {hint!r}")


def coerce_input_payload(payload_type: type[PayloadT], raw_input: object) -> PayloadT:
    """Build `payload_type` from tool arguments.

    Omitted fields keep their dataclass default; a field without one raises
    `TypeError`, as does a non-object payload.
    """

    if raw_input is None:
        raw_input = {}
    if not isinstance(raw_input, Mapping):
        raise TypeError(f"Tool input must be an object, got {type(raw_input).__name__}")
    arguments = cast("Mapping[str, object]", raw_input)

    hints = get_type_hints(payload_type)
    values: dict[str, object] = {}
    for field in fields(cast("Any", payload_type)):
        if field.name in arguments:
            values[field.name] = _convert(field.name, hints[field.name], arguments[field.name])
        elif _field_default(field) is inspect.Parameter.empty:
            raise TypeError(f"Missing required field '{field.name}'")
    return payload_type(**values)


def signature_from_dataclass(payload_type: type[object]) -> inspect.Signature:
    """Keyword-only signature mirroring the dataclass, used for tool schemas."""

    hints = get_type_hints(payload_type)
    return inspect.Signature(
        [
            inspect.Parameter(
                field.name,
                inspect.Parameter.KEYWORD_ONLY,
                default=_field_default(field),
                annotation=hints[field.name],
            )
            for field in fields(cast("Any", payload_type))
        ]
    )
