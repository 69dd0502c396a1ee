"""Global flags are stripped from argv before cyclopts dispatches."""

from __future__ import annotations

import pytest

from envshade.cli.main import _extract_global_options


def test_global_flags_are_removed_wherever_they_appear() -> None:
    args, options = _extract_global_options(
        ["generate", "--yes", "all", "-v", "--verbose", "--porcelain", "--dry-run"]
    )

    assert args == ["generate", "all", "--dry-run"]
    assert options.yes is True
    assert options.no_input is False
    assert options.output.format == "porcelain"
    assert options.output.verbosity == 2


@pytest.mark.parametrize(
    "argv",
    [["--format", "json", "scan"], ["scan", "--format=json"], ["--porcelain", "--json", "scan"]],
)
def test_format_selection(argv: list[str]) -> None:
    args, options = _extract_global_options(argv)

    assert args == ["scan"]
    assert options.output.format == "json"


def test_negated_switches_are_dropped() -> None:
    args, options = _extract_global_options(["--no-json", "--no-no-input", "scan"])

    assert args == ["scan"]
    assert options.output.format == "text"
    assert options.no_input is False


def test_tokens_after_separator_are_untouched() -> None:
    args, options = _extract_global_options(["inspect", "--", "--json"])

    assert args == ["inspect", "--", "--json"]
    assert options.output.format == "text"


def test_format_without_value_exits() -> None:
    with pytest.raises(SystemExit, match="--format requires a value"):
        _extract_global_options(["scan", "--format"])
