"""Core envshade library exports."""

from envshade.lib.dotenv import Document, KeyValue, generate_example, parse, render
from envshade.lib.safety.detector import is_secret
from envshade.lib.safety.placeholder import generate_placeholder

__all__ = [
    "Document",
    "KeyValue",
    "generate_example",
    "generate_placeholder",
    "is_secret",
    "parse",
    "render",
]
