"""Configuration helpers for the Hansard engine."""
from __future__ import annotations

from .settings import (
    AppConfig,
    ParserConfig,
    ResolverConfig,
    StorageConfig,
    load_config,
    resolve_config_path,
    save_config,
)

__all__ = [
    "AppConfig",
    "ParserConfig",
    "ResolverConfig",
    "StorageConfig",
    "load_config",
    "resolve_config_path",
    "save_config",
]
