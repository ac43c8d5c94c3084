"""Shared helpers for archive drivers."""

from __future__ import annotations

import secrets

from rootarchive.kernel.domain.address import is_archive_key, parse_archive_host, parse_archive_key
from rootarchive.kernel.exceptions import AddressResolutionError, ArchiveError, ValidationError


def split_path(path: str) -> list[str]:
    """Split an absolute archive path into its segments.

    Raises
    ------
    ArchiveError
        If the path is relative or contains ``.``/``..`` segments.
    """
    if not path.startswith("/"):
        raise ArchiveError(path, "path must be absolute (start with '/')")
    segments = [s for s in path.split("/") if s]
    if any(s in (".", "..") for s in segments):
        raise ArchiveError(path, "path must not contain '.' or '..' segments")
    return segments


def normalize_path(path: str) -> str:
    return "/" + "/".join(split_path(path))


def new_archive_key() -> str:
    """Fresh random 32-byte key, hex encoded."""
    return secrets.token_hex(32)


def check_key(path: str, key: str) -> str:
    if not is_archive_key(key):
        raise ArchiveError(path, f"invalid archive key {key!r}")
    return key


class NameRegistry:
    """Name to key table used to resolve non-key addresses.

    Stands in for the engine's remote lookup (DNS TXT records and the like):
    names only resolve when the caller allows remote resolution.
    """

    def __init__(self, names: dict[str, str] | None = None) -> None:
        self._names: dict[str, str] = {}
        for name, key in (names or {}).items():
            self.register(name, key)

    def register(self, name: str, key: str) -> None:
        if not is_archive_key(key):
            raise ValidationError(f"names[{name}]", "must be a 64 character hex key", value=key)
        self._names[name.lower()] = key

    def resolve(self, address: str, allow_remote: bool) -> str:
        """Resolve an address to a key.

        Raises
        ------
        AddressResolutionError
            If the address carries no key and the name is unknown or remote
            lookups are not allowed.
        """
        key = parse_archive_key(address)
        if key is not None:
            return key

        host = parse_archive_host(address)
        if host is None:
            raise AddressResolutionError(address, "not an archive address")
        if not allow_remote:
            raise AddressResolutionError(address, "name lookup requires remote resolution")
        if host not in self._names:
            raise AddressResolutionError(address, f"unknown name {host!r}")
        return self._names[host]


__all__ = ["NameRegistry", "check_key", "new_archive_key", "normalize_path", "split_path"]
