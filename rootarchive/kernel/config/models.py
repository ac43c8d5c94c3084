"""Configuration data models for rootarchive."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from rootarchive.kernel.exceptions import ConfigurationError

# Upper bound of the unique-name search; exhausting it is a fatal error
MAX_NAME_ATTEMPTS = 10**9


def join_path(*parts: str) -> str:
    """Join archive path segments into one absolute, normalised path."""
    joined = posixpath.join("/", *(part.strip("/") for part in parts if part))
    return posixpath.normpath(joined)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration.

    Attributes
    ----------
    level : str, default="INFO"
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich, dual)
    output_file : str | None, default=None
        Optional file path that also receives JSON records
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    enable_stdlib_bridge : bool, default=False
        Route stdlib logging through Loguru

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.rootarchive.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export ROOTARCHIVE_LOG_LEVEL=DEBUG
    export ROOTARCHIVE_LOG_FORMAT=json
    export ROOTARCHIVE_LOG_FILE=/var/log/rootarchive.log
    ```
    """

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "structured", "dual", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True
    enable_stdlib_bridge: bool = False


@dataclass(frozen=True, slots=True)
class TopologyPaths:
    """Canonical layout of the root archive namespace.

    The defaults are the persisted schema of existing root archives; changing
    them on an archive that was already set up orphans the old locations.
    """

    data_root: str = "/data"
    data_namespaces: tuple[str, ...] = ("unwalled.garden", "unwalled.garden/bookmarks")
    library_root: str = "/library"
    settings_root: str = "/settings"
    owners_root: str = "/owners"
    default_owner_alias: str = "/public"

    def __post_init__(self) -> None:
        """Validate the layout.

        Raises
        ------
        ConfigurationError
            If a root is not absolute, is the archive root, or a namespace
            escapes the data root.
        """
        for name in ("data_root", "library_root", "settings_root", "owners_root"):
            value = getattr(self, name)
            if not value.startswith("/"):
                raise ConfigurationError("topology", f"{name} must be absolute, got {value!r}")
            if join_path(value) == "/":
                raise ConfigurationError("topology", f"{name} cannot be the archive root")
        if not self.default_owner_alias.startswith("/"):
            raise ConfigurationError(
                "topology", f"default_owner_alias must be absolute, got {self.default_owner_alias!r}"
            )
        if join_path(self.default_owner_alias).startswith(join_path(self.owners_root) + "/"):
            raise ConfigurationError(
                "topology", "default_owner_alias must live outside owners_root"
            )
        for namespace in self.data_namespaces:
            if ".." in namespace.split("/") or not namespace.strip("/"):
                raise ConfigurationError("topology", f"invalid data namespace {namespace!r}")

    def data_ns(self, namespace: str) -> str:
        """Path of a namespaced data directory."""
        return join_path(self.data_root, namespace)

    def owner(self, label: str) -> str:
        """Path of an owner's mount."""
        return join_path(self.owners_root, label)

    def library_entry(self, name: str) -> str:
        """Path of a library mount."""
        return join_path(self.library_root, name)

    def canonical_directories(self) -> list[str]:
        """Every fixed directory, parents before children."""
        paths = [self.data_root]
        paths.extend(self.data_ns(ns) for ns in self.data_namespaces)
        paths.extend([self.library_root, self.settings_root, self.owners_root])

        ordered: list[str] = []
        for path in sorted((join_path(p) for p in paths), key=lambda p: p.count("/")):
            if path not in ordered:
                ordered.append(path)
        return ordered


@dataclass(frozen=True, slots=True)
class TopologyConfig:
    """Reconciler settings.

    Attributes
    ----------
    paths : TopologyPaths
        Canonical namespace layout
    profile_id : int, default=0
        Profile record holding the root archive address
    allow_remote : bool, default=True
        Allow the engine to resolve non-key addresses remotely
    max_name_attempts : int
        Candidates tried before name allocation fails
    """

    paths: TopologyPaths = field(default_factory=TopologyPaths)
    profile_id: int = 0
    allow_remote: bool = True
    max_name_attempts: int = MAX_NAME_ATTEMPTS

    def __post_init__(self) -> None:
        if self.max_name_attempts < 1:
            raise ConfigurationError("topology", "max_name_attempts must be at least 1")


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Where the local drivers keep their state.

    Attributes
    ----------
    base_dir : Path
        Directory holding the archives (``<base_dir>/archives/<key>``)
    profile_db : Path | None
        SQLite profile database; defaults to ``<base_dir>/profiles.db``
    users_file : Path | None
        YAML owner list; defaults to ``<base_dir>/users.yaml``
    """

    base_dir: Path = field(default_factory=lambda: Path("~/.rootarchive"))
    profile_db: Path | None = None
    users_file: Path | None = None

    @property
    def resolved_base_dir(self) -> Path:
        return self.base_dir.expanduser()

    @property
    def resolved_profile_db(self) -> Path:
        return (self.profile_db or self.resolved_base_dir / "profiles.db").expanduser()

    @property
    def resolved_users_file(self) -> Path:
        return (self.users_file or self.resolved_base_dir / "users.yaml").expanduser()


@dataclass(slots=True)
class RootArchiveConfig:
    """Complete rootarchive configuration.

    Examples
    --------
    TOML configuration in pyproject.toml:

    ```toml
    [tool.rootarchive]
    profile_id = 0
    allow_remote = false

    [tool.rootarchive.paths]
    owners_root = "/owners"
    default_owner_alias = "/public"

    [tool.rootarchive.storage]
    base_dir = "~/.rootarchive"

    [tool.rootarchive.logging]
    level = "DEBUG"
    ```
    """

    topology: TopologyConfig = field(default_factory=TopologyConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
