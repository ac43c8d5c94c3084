"""Configuration loading and management for rootarchive."""

from rootarchive.kernel.config.loader import ConfigLoader, get_default_config, load_config
from rootarchive.kernel.config.models import (
    MAX_NAME_ATTEMPTS,
    LoggingConfig,
    RootArchiveConfig,
    StorageConfig,
    TopologyConfig,
    TopologyPaths,
    join_path,
)

__all__ = [
    "MAX_NAME_ATTEMPTS",
    "ConfigLoader",
    "LoggingConfig",
    "RootArchiveConfig",
    "StorageConfig",
    "TopologyConfig",
    "TopologyPaths",
    "get_default_config",
    "join_path",
    "load_config",
]
