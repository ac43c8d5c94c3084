"""Core exception hierarchy for rootarchive.

All rootarchive exceptions inherit from RootArchiveError so callers can catch
the whole family at once. Most of these never leave the reconciler: storage
failures and type conflicts are caught per path and turned into outcomes.
Only name allocation exhaustion and API misuse propagate to callers.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class RootArchiveError(Exception):
    """Base exception for all rootarchive errors."""

    pass


# ============================================================================
# Configuration & Validation Errors
# ============================================================================


class ConfigurationError(RootArchiveError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("topology", "owners_root must be absolute")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the configuration section that is invalid
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


class ValidationError(RootArchiveError):
    """Raised when data validation fails.

    Examples
    --------
    Example usage::

        raise ValidationError("label", "must not contain '/'", value="a/b")
    """

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        """Initialize validation error.

        Args
        ----
            field: Name of the field that failed validation
            constraint: Description of the validation constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Validation failed for '{field}': {constraint} (got {value!r})"
        else:
            msg = f"Validation failed for '{field}': {constraint}"
        super().__init__(msg)
        self.field = field
        self.constraint = constraint
        self.value = value


# ============================================================================
# Archive Storage Errors
# ============================================================================


class ArchiveError(RootArchiveError):
    """Raised when an archive storage operation fails.

    Examples
    --------
    Example usage::

        raise ArchiveError("/library/my-post", "parent directory does not exist")
    """

    def __init__(self, path: str, reason: str) -> None:
        """Initialize archive error.

        Args
        ----
            path: The archive path that caused the error
            reason: Explanation of what went wrong
        """
        super().__init__(f"Archive error at '{path}': {reason}")
        self.path = path
        self.reason = reason


class ArchiveNotFoundError(ArchiveError):
    """Raised by ``astat`` when nothing exists at a path."""

    def __init__(self, path: str) -> None:
        super().__init__(path, "no such file or directory")


class AddressResolutionError(RootArchiveError):
    """Raised when an archive address cannot be resolved to a key.

    Examples
    --------
    Example usage::

        raise AddressResolutionError("hyper://example.com/", "remote lookup disabled")
    """

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(f"Cannot resolve address '{address}': {reason}")
        self.address = address
        self.reason = reason


# ============================================================================
# Topology Errors
# ============================================================================


class TopologyConflictError(RootArchiveError):
    """A path holds a node of the wrong kind for the operation being ensured.

    Conflicts are reported, never fixed: the reconciler does not delete or
    overwrite a node it did not create.
    """

    def __init__(self, path: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Expected a {expected} at '{path}' but an unexpected {actual} exists there"
        )
        self.path = path
        self.expected = expected
        self.actual = actual


class NameAllocationError(RootArchiveError):
    """Raised when no free name can be found under a containing path.

    This is the one failure the reconciler treats as fatal; it implies a
    pathological namespace rather than transient drift.
    """

    def __init__(self, containing_path: str, title: str | None, attempts: int) -> None:
        super().__init__(
            f"Unable to find an available name for {title!r} under "
            f"'{containing_path}' after {attempts} attempts"
        )
        self.containing_path = containing_path
        self.title = title
        self.attempts = attempts


class RootArchiveNotLoadedError(RootArchiveError):
    """Raised when the root archive is used before setup has loaded it."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Cannot {operation}: the root archive has not been set up")
        self.operation = operation


__all__ = [
    # Base
    "RootArchiveError",
    # Configuration & Validation
    "ConfigurationError",
    "ValidationError",
    # Archive storage
    "AddressResolutionError",
    "ArchiveError",
    "ArchiveNotFoundError",
    # Topology
    "NameAllocationError",
    "RootArchiveNotLoadedError",
    "TopologyConflictError",
]
