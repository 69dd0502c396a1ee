"""Turn a real `.env` document into a shareable `.env.example` document."""

from __future__ import annotations

from envshade.lib.dotenv.entries import Document, Entry, KeyValue, QuoteStyle
from envshade.lib.safety.detector import is_secret
from envshade.lib.safety.placeholder import generate_placeholder


def _mask_entry(entry: Entry) -> Entry:
    if not isinstance(entry, KeyValue) or not is_secret(entry.key, entry.value):
        return entry
    # Placeholders are never re-quoted, even when the original value was.
    return KeyValue(
        key=entry.key,
        value=generate_placeholder(entry.key, entry.value),
        quote_style=QuoteStyle.NONE,
        exported=entry.exported,
    )


def generate_example(document: Document) -> Document:
    """Mask secret values; every other entry is passed through as the same object."""

    return Document(entries=tuple(_mask_entry(entry) for entry in document))


def masked_keys(document: Document) -> tuple[str, ...]:
    """Keys whose values `generate_example` would mask, in document order."""

    return tuple(entry.key for entry in document.key_values() if is_secret(entry.key, entry.value))


def generate_env(document: Document) -> Document:
    """Materialise a `.env` from a `.env.example`: entries are copied unchanged."""

    return Document(entries=document.entries)
