"""Configuration management."""

from .options import ReconcileOptions, ResolvedOptions, resolve_options
from .manager import (
    ConfigManager,
    ConfigError,
    DatasetConfig,
    ReconciliationConfig,
    create_sample_config,
)

__all__ = [
    "ReconcileOptions",
    "ResolvedOptions",
    "resolve_options",
    "ConfigManager",
    "ConfigError",
    "DatasetConfig",
    "ReconciliationConfig",
    "create_sample_config",
]
