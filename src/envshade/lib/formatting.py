"""Text rendering shared by operation outputs and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import zip_longest
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class FormatContext:
    verbosity: int = 0


@runtime_checkable
class TextFormattable(Protocol):
    """Outputs with a human-readable form used by `--format text`."""

    def format_text(self, ctx: FormatContext | None = None) -> str: ...


def tabular(rows: Sequence[Sequence[str]], sep: str = "  ") -> str:
    """Left-align cells into columns; short rows are padded.

    >>> tabular([["API_KEY", "secret", "sk_***"], ["PORT", "plain", ""]])
    'API_KEY  secret  sk_***\\nPORT     plain'
    """

    widths = [max(map(len, column)) for column in zip_longest(*rows, fillvalue="")]
    return "\n".join(
        sep.join(cell.ljust(width) for cell, width in zip_longest(row, widths, fillvalue=""))
        .rstrip()
        for row in rows
    )
