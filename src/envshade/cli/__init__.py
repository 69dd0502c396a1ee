"""Command-line interface for envshade."""
