"""Parse, mask, and regenerate `.env` documents."""

from envshade.lib.dotenv.entries import BlankLine, Comment, Document, Entry, KeyValue, QuoteStyle
from envshade.lib.dotenv.errors import (
    DotenvError,
    InvalidKeyValueError,
    ParseError,
    UnclosedQuoteError,
    WriteError,
)
from envshade.lib.dotenv.example import generate_env, generate_example, masked_keys
from envshade.lib.dotenv.parser import parse, parse_file, parse_text
from envshade.lib.dotenv.writer import render, render_entry, write, write_file

__all__ = [
    "BlankLine",
    "Comment",
    "Document",
    "DotenvError",
    "Entry",
    "InvalidKeyValueError",
    "KeyValue",
    "ParseError",
    "QuoteStyle",
    "UnclosedQuoteError",
    "WriteError",
    "generate_env",
    "generate_example",
    "masked_keys",
    "parse",
    "parse_file",
    "parse_text",
    "render",
    "render_entry",
    "write",
    "write_file",
]
