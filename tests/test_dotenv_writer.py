"""Writer output and parse/write round trips."""

from __future__ import annotations

import io
import stat
from pathlib import Path

import pytest

from envshade.lib.dotenv import (
    BlankLine,
    Comment,
    Document,
    KeyValue,
    QuoteStyle,
    WriteError,
    parse_text,
    render,
    render_entry,
    write,
    write_file,
)


def test_render_entry_variants() -> None:
    assert render_entry(KeyValue(key="A", value="1")) == "A=1"
    assert render_entry(KeyValue(key="A", value="1", exported=True)) == "export A=1"
    assert render_entry(KeyValue(key="A", value="x y", quote_style=QuoteStyle.DOUBLE)) == 'A="x y"'
    assert render_entry(KeyValue(key="A", value="", quote_style=QuoteStyle.SINGLE)) == "A=''"
    assert render_entry(Comment(text="# note")) == "# note"
    assert render_entry(BlankLine()) == ""


def test_render_terminates_every_entry_with_newline() -> None:
    document = Document(entries=(Comment(text="# c"), BlankLine(), KeyValue(key="K", value="v")))

    assert render(document) == "# c\n\nK=v\n"


@pytest.mark.parametrize(
    "text",
    [
        "# header\nPORT=3000\n\nexport API_KEY=\"sk_live_abc\"\n",
        'KEY="line1\nline2"\n',
        "CERT='a\n# b\nc=d'\nNEXT=\n",
        'MSG="say \\"hi\\""\n',
        "QUERY=a=b=c\nNOVALUELINE\n",
    ],
)
def test_write_parse_round_trip(text: str) -> None:
    document = parse_text(text)

    assert render(document) == text
    assert parse_text(render(document)) == document


def test_round_trip_normalises_missing_trailing_newline() -> None:
    assert render(parse_text("A=1")) == "A=1\n"


def test_write_to_binary_and_text_sinks() -> None:
    document = parse_text("A=1\nB='two'\n")
    binary = io.BytesIO()
    text = io.StringIO()

    write(document, binary)
    write(document, text)

    assert binary.getvalue() == b"A=1\nB='two'\n"
    assert text.getvalue() == "A=1\nB='two'\n"


def test_write_preserves_undecodable_bytes() -> None:
    sink = io.BytesIO()

    write(Document(entries=(KeyValue(key="RAW", value="\udcff"),)), sink)

    assert sink.getvalue() == b"RAW=\xff\n"


class _BrokenSink(io.RawIOBase):
    def writable(self) -> bool:
        return True

    def write(self, _: object) -> int:
        raise OSError("disk full")


def test_write_failure_surfaces_as_write_error() -> None:
    with pytest.raises(WriteError, match="disk full"):
        write(parse_text("A=1\n"), _BrokenSink())


def test_write_file_creates_owner_only_file(tmp_path: Path) -> None:
    target = tmp_path / ".env.example"

    write_file(parse_text("A=1\n"), target)

    assert target.read_text(encoding="utf-8") == "A=1\n"
    assert stat.S_IMODE(target.stat().st_mode) & 0o077 == 0


def test_write_file_truncates_existing_content(tmp_path: Path) -> None:
    target = tmp_path / ".env"
    target.write_text("OLD=value\nOTHER=longer content\n", encoding="utf-8")

    write_file(parse_text("NEW=1\n"), target)

    assert target.read_text(encoding="utf-8") == "NEW=1\n"


def test_write_file_missing_directory_is_write_error(tmp_path: Path) -> None:
    with pytest.raises(WriteError):
        write_file(parse_text("A=1\n"), tmp_path / "missing" / ".env")
