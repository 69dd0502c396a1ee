"""Configuration loading for envshade."""

from envshade.lib.config._paths import resolve_repo_root
from envshade.lib.config.settings import EnvshadeConfig, load_config

__all__ = ["EnvshadeConfig", "load_config", "resolve_repo_root"]
