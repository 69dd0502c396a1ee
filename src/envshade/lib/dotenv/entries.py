"""Typed, order-preserving model of a `.env` file."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TypeAlias
from enum import StrEnum


class QuoteStyle(StrEnum):
    """Quote character wrapped around a value in the source text."""

    NONE = ""
    DOUBLE = '"'
    SINGLE = "'"


@dataclass(frozen=True, slots=True)
class KeyValue:
    """One `KEY=value` assignment.

    `value` is stored without its surrounding quotes and without any
    unescaping; `quote_style` records what has to be re-applied on write.
    """

    key: str
    value: str
    quote_style: QuoteStyle = QuoteStyle.NONE
    exported: bool = False


@dataclass(frozen=True, slots=True)
class Comment:
    """Verbatim comment line (or unrecognised line kept as-is)."""

    text: str


@dataclass(frozen=True, slots=True)
class BlankLine:
    """Empty line, kept positionally."""


Entry: TypeAlias = KeyValue | Comment | BlankLine


@dataclass(frozen=True, slots=True)
class Document:
    """Ordered entries of one file. Duplicate keys are legal and all kept."""

    entries: tuple[Entry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def key_values(self) -> tuple[KeyValue, ...]:
        return tuple(entry for entry in self.entries if isinstance(entry, KeyValue))

    def keys(self) -> tuple[str, ...]:
        return tuple(entry.key for entry in self.key_values())
