"""Configuration loader for rootarchive.

Supports two config sources:

1. **kind: Config YAML**: loaded via explicit path or the
   ``ROOTARCHIVE_CONFIG_PATH`` env var.
2. **pyproject.toml [tool.rootarchive]**: auto-discovery fallback.
"""

from __future__ import annotations

import os
import re
import tomllib
from pathlib import Path
from typing import Any, Literal, cast

import yaml

from rootarchive.kernel.config.models import (
    MAX_NAME_ATTEMPTS,
    LoggingConfig,
    RootArchiveConfig,
    StorageConfig,
    TopologyConfig,
    TopologyPaths,
)
from rootarchive.kernel.exceptions import ConfigurationError
from rootarchive.kernel.logging import get_logger

# Constants for boolean environment variable parsing
_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = sorted(_TRUTHY_VALUES | _FALSY_VALUES)
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


class ConfigLoader:
    """Loads rootarchive configuration from YAML or TOML files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> RootArchiveConfig:
        """Load configuration from YAML or pyproject.toml.

        Parameters
        ----------
        path : str | Path | None
            Path to config file. If None, searches using discovery order.

        Raises
        ------
        FileNotFoundError
            If no configuration file can be found
        ConfigurationError
            If the file exists but is not a valid configuration
        """
        config_path = self._find_config_file(path)
        logger.info("Loading configuration from {path}", path=str(config_path))

        if config_path.suffix in (".yaml", ".yml"):
            data = self._load_yaml(config_path)
        else:
            data = self._load_toml(config_path)

        return self._parse_config(self._substitute_env_vars(data))

    def _load_yaml(self, config_path: Path) -> dict[str, Any]:
        """Read the ``spec`` mapping of a kind: Config manifest."""
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ConfigurationError(
                config_path.name, f"expected a mapping, got {type(data).__name__}"
            )

        kind = data.get("kind")
        if kind != "Config":
            raise ConfigurationError(
                config_path.name, f"YAML config must use 'kind: Config', got 'kind: {kind}'"
            )

        spec = data.get("spec", {})
        if not isinstance(spec, dict):
            raise ConfigurationError(config_path.name, "'spec' must be a mapping")
        return spec

    def _load_toml(self, config_path: Path) -> dict[str, Any]:
        """Read ``[tool.rootarchive]`` or a flat TOML document."""
        with config_path.open("rb") as f:
            data = tomllib.load(f)

        section = data.get("tool", {}).get("rootarchive")
        if section is not None:
            return section
        if config_path.name == "pyproject.toml":
            logger.warning("No [tool.rootarchive] section found in pyproject.toml, using defaults")
            return {}
        return data

    def _find_config_file(self, path: str | Path | None) -> Path:
        """Find configuration file.

        Discovery order:
        1. Explicit path argument
        2. ``ROOTARCHIVE_CONFIG_PATH`` env var
        3. ``pyproject.toml`` in CWD or a parent with ``[tool.rootarchive]``
        """
        if path:
            config_path = Path(path).expanduser()
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv("ROOTARCHIVE_CONFIG_PATH"):
            config_path = Path(env_path).expanduser()
            if config_path.exists():
                return config_path
            logger.warning("ROOTARCHIVE_CONFIG_PATH set but file not found: {path}", path=env_path)

        current = Path.cwd()
        for directory in (current, *current.parents):
            pyproject = directory / "pyproject.toml"
            if not pyproject.exists():
                continue
            with pyproject.open("rb") as f:
                data = tomllib.load(f)
            if "rootarchive" in data.get("tool", {}):
                return pyproject

        raise FileNotFoundError(
            "No configuration file found. Provide a kind: Config YAML path, "
            "set ROOTARCHIVE_CONFIG_PATH, or add [tool.rootarchive] to pyproject.toml"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively replace ``${VAR}`` placeholders with environment values."""
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                value = os.environ.get(match.group(1))
                if value is None:
                    logger.debug("Environment variable {name} not set", name=match.group(1))
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> RootArchiveConfig:
        """Parse format-agnostic configuration data."""
        paths_data = data.get("paths", {})
        paths = TopologyPaths(
            data_root=paths_data.get("data_root", "/data"),
            data_namespaces=tuple(
                paths_data.get("data_namespaces", TopologyPaths().data_namespaces)
            ),
            library_root=paths_data.get("library_root", "/library"),
            settings_root=paths_data.get("settings_root", "/settings"),
            owners_root=paths_data.get("owners_root", "/owners"),
            default_owner_alias=paths_data.get("default_owner_alias", "/public"),
        )

        try:
            topology = TopologyConfig(
                paths=paths,
                profile_id=int(data.get("profile_id", 0)),
                allow_remote=bool(data.get("allow_remote", True)),
                max_name_attempts=int(data.get("max_name_attempts", MAX_NAME_ATTEMPTS)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError("topology", str(e)) from e

        storage_data = data.get("storage", {})
        storage = StorageConfig(
            base_dir=Path(storage_data.get("base_dir", "~/.rootarchive")),
            profile_db=Path(storage_data["profile_db"]) if storage_data.get("profile_db") else None,
            users_file=Path(storage_data["users_file"]) if storage_data.get("users_file") else None,
        )

        return RootArchiveConfig(
            topology=topology,
            storage=storage,
            logging=self._parse_logging_config(data.get("logging", {})),
        )

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over config file values:
        - ROOTARCHIVE_LOG_LEVEL
        - ROOTARCHIVE_LOG_FORMAT
        - ROOTARCHIVE_LOG_FILE
        - ROOTARCHIVE_LOG_COLOR (true/false)
        - ROOTARCHIVE_LOG_TIMESTAMP (true/false)
        """
        level = logging_data.get("level", "INFO")
        format_type = logging_data.get("format", "structured")
        output_file = logging_data.get("output_file")
        use_color = logging_data.get("use_color", True)
        include_timestamp = logging_data.get("include_timestamp", True)
        enable_stdlib_bridge = logging_data.get("enable_stdlib_bridge", False)

        if env_level := os.getenv("ROOTARCHIVE_LOG_LEVEL"):
            level = env_level
        if env_format := os.getenv("ROOTARCHIVE_LOG_FORMAT"):
            format_type = env_format.lower()
        if env_file := os.getenv("ROOTARCHIVE_LOG_FILE"):
            output_file = env_file

        if env_color := os.getenv("ROOTARCHIVE_LOG_COLOR"):
            try:
                use_color = _parse_bool_env(env_color)
            except ValueError as e:
                logger.warning("Invalid ROOTARCHIVE_LOG_COLOR value: {error}", error=str(e))

        if env_timestamp := os.getenv("ROOTARCHIVE_LOG_TIMESTAMP"):
            try:
                include_timestamp = _parse_bool_env(env_timestamp)
            except ValueError as e:
                logger.warning("Invalid ROOTARCHIVE_LOG_TIMESTAMP value: {error}", error=str(e))

        return LoggingConfig(
            level=cast("Literal['TRACE', 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']", level.upper()),
            format=cast("Literal['console', 'json', 'structured', 'dual', 'rich']", format_type),
            output_file=output_file,
            use_color=use_color,
            include_timestamp=include_timestamp,
            enable_stdlib_bridge=enable_stdlib_bridge,
        )


def load_config(path: str | Path | None = None) -> RootArchiveConfig:
    """Load configuration from file or return defaults when none is found."""
    try:
        return ConfigLoader().load_config_file(path)
    except FileNotFoundError:
        if path:
            raise
        logger.info("No configuration file found, using defaults")
        return get_default_config()


def get_default_config() -> RootArchiveConfig:
    """Default configuration."""
    return RootArchiveConfig()


__all__ = ["ConfigLoader", "get_default_config", "load_config"]
