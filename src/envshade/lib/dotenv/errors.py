"""Error types raised while reading and writing `.env` documents."""

from __future__ import annotations


class DotenvError(Exception):
    """Base class for dotenv pipeline failures."""


class ParseError(DotenvError, ValueError):
    """Input could not be turned into a document. Parsing is all-or-nothing."""

    reason = "parse error"

    def __init__(self, *, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"line {line_number}: {self.reason}: {line!r}")


class InvalidKeyValueError(ParseError):
    reason = "invalid key-value format"


class UnclosedQuoteError(ParseError):
    """End of input reached while a quoted value was still open.

    `line_number` and `line` point at the line that opened the quote.
    """

    reason = "unclosed quote"


class WriteError(DotenvError, OSError):
    """Underlying I/O failure while emitting a document."""
