"""Every operation output renders as text, JSON and porcelain.

Prevents silent JSON fallback in text mode for new output types that
forgot to add format_text().
"""

from __future__ import annotations

import dataclasses
import inspect
import json
import types
from typing import Any, get_type_hints

import pytest

from envshade.cli.output import OutputConfig, emit, normalize_output_format
from envshade.lib.formatting import FormatContext, TextFormattable, tabular
from envshade.lib.ops.files import InspectedKey, InspectOutput
from envshade.lib.ops.registry import get_all_operations

_DUMMY_VALUES: dict[type, Any] = {
    str: "",
    int: 0,
    float: 0.0,
    bool: False,
}


def _resolve_dummy(annotation: Any) -> Any:
    if annotation in _DUMMY_VALUES:
        return _DUMMY_VALUES[annotation]

    origin = getattr(annotation, "__origin__", None)
    args = getattr(annotation, "__args__", ())
    if origin is types.UnionType:
        return None if type(None) in args else _resolve_dummy(args[0])
    if origin is tuple:
        return ()
    # Literal aliases and anything else: an empty string is a valid "unknown".
    return ""


def _make_dummy(output_type: type[Any]) -> Any:
    hints = get_type_hints(output_type)
    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(output_type):
        if field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING:
            kwargs[field.name] = _resolve_dummy(hints.get(field.name))
    return output_type(**kwargs)


def test_all_output_types_are_text_formattable() -> None:
    missing = [
        f"{spec.output_type.__name__} (from {spec.name})"
        for spec in get_all_operations()
        if not issubclass(spec.output_type, TextFormattable)
    ]
    assert not missing, "Output types without format_text():\n" + "\n".join(missing)


def test_format_text_accepts_format_context() -> None:
    for spec in get_all_operations():
        params = list(inspect.signature(spec.output_type.format_text).parameters)
        assert params[1:] == ["ctx"], f"{spec.output_type.__name__}.format_text params: {params}"


def test_format_text_returns_string_for_minimal_instances() -> None:
    failures: list[str] = []
    for spec in get_all_operations():
        try:
            result = _make_dummy(spec.output_type).format_text(FormatContext())
        except Exception as exc:
            failures.append(f"{spec.output_type.__name__}: {exc}")
            continue
        if not isinstance(result, str):
            failures.append(f"{spec.output_type.__name__}: returned {type(result).__name__}")
    assert not failures, "format_text() failed:\n" + "\n".join(failures)


def _inspect_output() -> InspectOutput:
    return InspectOutput(
        path=".env",
        keys=(
            InspectedKey(key="API_KEY", secret=True, placeholder="sk_***"),
            InspectedKey(key="PORT", secret=False),
        ),
    )


def test_emit_text_uses_format_text(capsys: pytest.CaptureFixture[str]) -> None:
    emit(_inspect_output(), OutputConfig(format="text"))

    out = capsys.readouterr().out
    assert out.startswith("API_KEY  secret  sk_***\nPORT     plain\n")
    assert "comments" not in out


def test_emit_text_passes_verbosity(capsys: pytest.CaptureFixture[str]) -> None:
    emit(_inspect_output(), OutputConfig(format="text", verbosity=1))

    assert "0 comments, 0 blank lines" in capsys.readouterr().out


def test_emit_json_is_sorted_and_complete(capsys: pytest.CaptureFixture[str]) -> None:
    emit(_inspect_output(), OutputConfig(format="json"))

    payload = json.loads(capsys.readouterr().out)
    assert list(payload) == sorted(payload)
    assert payload["keys"][0] == {
        "exported": False,
        "key": "API_KEY",
        "placeholder": "sk_***",
        "secret": True,
    }


def test_emit_porcelain_list(capsys: pytest.CaptureFixture[str]) -> None:
    emit([{"b": 1, "a": "x"}, "plain"], OutputConfig(format="porcelain"))

    assert capsys.readouterr().out == "a=x\tb=1\nplain\n"


@pytest.mark.parametrize(
    ("requested", "json_mode", "porcelain_mode", "expected"),
    [
        (None, False, False, "text"),
        ("JSON", False, False, "json"),
        ("text", True, True, "json"),
        ("text", False, True, "porcelain"),
    ],
)
def test_normalize_output_format(
    requested: str | None,
    json_mode: bool,
    porcelain_mode: bool,
    expected: str,
) -> None:
    assert (
        normalize_output_format(
            requested=requested,
            json_mode=json_mode,
            porcelain_mode=porcelain_mode,
        )
        == expected
    )


def test_normalize_output_format_rejects_unknown() -> None:
    with pytest.raises(SystemExit, match="--format must be one of"):
        normalize_output_format(requested="yaml", json_mode=False, porcelain_mode=False)


def test_tabular_pads_short_rows() -> None:
    assert tabular([["a", "bb"], ["ccc"]]) == "a    bb\nccc"
