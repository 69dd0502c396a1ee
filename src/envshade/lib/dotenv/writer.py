"""Render documents back to `.env` text."""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import IO

from envshade.lib.dotenv.entries import BlankLine, Comment, Document, Entry, KeyValue, QuoteStyle
from envshade.lib.dotenv.errors import WriteError
from envshade.lib.dotenv.parser import ENCODING, ENCODING_ERRORS

DEFAULT_FILE_MODE = 0o600


def render_entry(entry: Entry) -> str:
    """Render one entry as a single logical line without the newline."""

    match entry:
        case KeyValue(key=key, value=value, quote_style=quote_style, exported=exported):
            prefix = "export " if exported else ""
            if quote_style is QuoteStyle.NONE:
                return f"{prefix}{key}={value}"
            quote = quote_style.value
            return f"{prefix}{key}={quote}{value}{quote}"
        case Comment(text=text):
            return text
        case BlankLine():
            return ""


def render(document: Document) -> str:
    return "".join(f"{render_entry(entry)}\n" for entry in document)


def write(document: Document, sink: IO[bytes] | IO[str]) -> None:
    """Write every entry followed by a newline to `sink`.

    Any I/O failure is raised as `WriteError`; nothing already emitted is
    rolled back.
    """

    binary = not isinstance(sink, io.TextIOBase)
    try:
        for entry in document:
            line = f"{render_entry(entry)}\n"
            if binary:
                sink.write(line.encode(ENCODING, errors=ENCODING_ERRORS))  # type: ignore[arg-type]
            else:
                sink.write(line)  # type: ignore[arg-type]
    except OSError as exc:
        raise WriteError(f"failed to write entry: {exc}") from exc


def write_file(document: Document, path: Path | str, *, mode: int = DEFAULT_FILE_MODE) -> None:
    """Create or truncate `path` and write `document` to it."""

    target = Path(path)
    try:
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    except OSError as exc:
        raise WriteError(f"failed to create {target}: {exc}") from exc
    try:
        with os.fdopen(fd, "wb") as handle:
            write(document, handle)
    except WriteError:
        raise
    except OSError as exc:
        raise WriteError(f"failed to close {target}: {exc}") from exc
