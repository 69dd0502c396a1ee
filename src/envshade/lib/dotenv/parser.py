"""Line-oriented `.env` parser with multi-line quoted values."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import IO, TypeAlias

from envshade.lib.dotenv.entries import BlankLine, Comment, Document, Entry, KeyValue, QuoteStyle
from envshade.lib.dotenv.errors import InvalidKeyValueError, UnclosedQuoteError

ENCODING = "utf-8"
# Undecodable bytes survive a parse/write round trip as lone surrogates.
ENCODING_ERRORS = "surrogateescape"

_EXPORT_PREFIX = "export "
_QUOTE_CHARS: dict[str, QuoteStyle] = {
    QuoteStyle.DOUBLE.value: QuoteStyle.DOUBLE,
    QuoteStyle.SINGLE.value: QuoteStyle.SINGLE,
}
_TRAILING_WHITESPACE = " \t\r\n"


@dataclass(frozen=True, slots=True)
class _Normal:
    pass


@dataclass(frozen=True, slots=True)
class _InQuote:
    quote: str
    accumulated: str
    unescaped_count: int
    start_line: int
    first_line: str


_State: TypeAlias = _Normal | _InQuote


def count_unescaped(text: str, quote: str) -> int:
    """Count occurrences of `quote` not preceded by an odd run of backslashes."""

    count = 0
    backslashes = 0
    for char in text:
        if char == "\\":
            backslashes += 1
            continue
        if char == quote and backslashes % 2 == 0:
            count += 1
        backslashes = 0
    return count


def _split_assignment(line: str, line_number: int) -> tuple[bool, str, str]:
    exported = False
    remainder = line
    if remainder.startswith(_EXPORT_PREFIX):
        exported = True
        remainder = remainder[len(_EXPORT_PREFIX) :].lstrip()

    key, sep, raw_value = remainder.partition("=")
    key = key.strip()
    if not sep or not key:
        raise InvalidKeyValueError(line_number=line_number, line=line)
    return exported, key, raw_value


def _parse_key_value(line: str, line_number: int) -> KeyValue:
    exported, key, raw_value = _split_assignment(line, line_number)
    if len(raw_value) >= 2:
        style = _QUOTE_CHARS.get(raw_value[0])
        if style is not None and raw_value[-1] == raw_value[0]:
            return KeyValue(
                key=key,
                value=raw_value[1:-1],
                quote_style=style,
                exported=exported,
            )
    return KeyValue(key=key, value=raw_value, exported=exported)


def _open_quote(line: str, raw_line: str, line_number: int) -> _InQuote | None:
    _, _, raw_value = _split_assignment(line, line_number)
    if not raw_value or raw_value[0] not in _QUOTE_CHARS:
        return None
    quote = raw_value[0]
    count = count_unescaped(raw_value, quote)
    if count % 2 == 0:
        return None
    return _InQuote(
        quote=quote,
        # Trailing whitespace on the opening line is part of the quoted value.
        accumulated=raw_line,
        unescaped_count=count,
        start_line=line_number,
        first_line=line,
    )


def _continue_quote(state: _InQuote, raw_line: str) -> tuple[_State, KeyValue | None]:
    accumulated = f"{state.accumulated}\n{raw_line}"
    count = state.unescaped_count + count_unescaped(raw_line, state.quote)
    if count % 2 == 1:
        return (
            _InQuote(
                quote=state.quote,
                accumulated=accumulated,
                unescaped_count=count,
                start_line=state.start_line,
                first_line=state.first_line,
            ),
            None,
        )
    logical = accumulated.rstrip(_TRAILING_WHITESPACE)
    return _Normal(), _parse_key_value(logical, state.start_line)


def _physical_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def parse_text(text: str) -> Document:
    """Parse `.env` content into a document.

    Raises `InvalidKeyValueError` for an assignment without a key and
    `UnclosedQuoteError` when input ends inside a quoted value.
    """

    entries: list[Entry] = []
    state: _State = _Normal()

    for line_number, raw_line in enumerate(_physical_lines(text), start=1):
        if isinstance(state, _InQuote):
            state, closed = _continue_quote(state, raw_line)
            if closed is not None:
                entries.append(closed)
            continue

        line = raw_line.rstrip(_TRAILING_WHITESPACE)
        if not line:
            entries.append(BlankLine())
            continue
        # Comment detection only happens outside of an open quote.
        if line.startswith("#") or "=" not in line:
            entries.append(Comment(text=line))
            continue

        opened = _open_quote(line, raw_line, line_number)
        if opened is not None:
            state = opened
            continue
        entries.append(_parse_key_value(line, line_number))

    if isinstance(state, _InQuote):
        raise UnclosedQuoteError(line_number=state.start_line, line=state.first_line)
    return Document(entries=tuple(entries))


def parse(source: IO[bytes] | IO[str]) -> Document:
    """Parse a binary or text stream. The stream is read, not closed."""

    data = source.read()
    if isinstance(data, bytes):
        data = data.decode(ENCODING, errors=ENCODING_ERRORS)
    return parse_text(data)


def parse_file(path: Path | str) -> Document:
    with Path(path).open("rb") as handle:
        return parse(handle)
