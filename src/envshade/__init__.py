"""Mask secrets in `.env` files and keep `.env.example` files in sync."""

__version__ = "0.1.0"
