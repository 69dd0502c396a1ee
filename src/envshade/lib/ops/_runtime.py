"""Root and config lookup for operation handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from envshade.lib.config import load_config, resolve_repo_root

if TYPE_CHECKING:
    from pathlib import Path

    from envshade.lib.config import EnvshadeConfig


def resolve_runtime_root_and_config(repo_root: str | None = None) -> tuple[Path, EnvshadeConfig]:
    # Tool arguments arrive as "" when a client fills in every field.
    root = resolve_repo_root(repo_root or None)
    return root, load_config(root)
