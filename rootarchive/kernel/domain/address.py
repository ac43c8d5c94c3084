"""Archive address parsing.

Archives are identified by a 32-byte key, written as 64 lowercase hex
characters. Addresses are URLs carrying that key as their host:
``hyper://<key>/``. Older ``dat://`` links and bare keys are accepted too.
Anything else (e.g. a DNS name) needs a resolver.
"""

from __future__ import annotations

import re

ADDRESS_SCHEME = "hyper"

_KEY_PATTERN = re.compile(r"^[0-9a-f]{64}$")
_ADDRESS_PATTERN = re.compile(
    r"^(?:(?:hyper|dat)://)?(?P<host>[^/?#:]+)(?:[/?#].*)?$",
    re.IGNORECASE,
)


def is_archive_key(value: str) -> bool:
    """Whether ``value`` is a 64 character lowercase hex key."""
    return bool(_KEY_PATTERN.match(value))


def parse_archive_key(address: str) -> str | None:
    """Extract the key an address carries, or None if it carries a name.

    >>> parse_archive_key("hyper://" + "ab" * 32 + "/posts")
    'abababababababababababababababababababababababababababababababab'
    >>> parse_archive_key("hyper://example.com/") is None
    True
    """
    match = _ADDRESS_PATTERN.match(address.strip())
    if match is None:
        return None
    host = match.group("host").lower()
    # Strip an optional "+version" suffix
    host = host.split("+", 1)[0]
    return host if is_archive_key(host) else None


def parse_archive_host(address: str) -> str | None:
    """Host part of an address (a key or a name), lowercased."""
    match = _ADDRESS_PATTERN.match(address.strip())
    if match is None:
        return None
    return match.group("host").lower().split("+", 1)[0]


def format_archive_address(key: str) -> str:
    """Canonical address for a key."""
    return f"{ADDRESS_SCHEME}://{key}/"


__all__ = [
    "ADDRESS_SCHEME",
    "format_archive_address",
    "is_archive_key",
    "parse_archive_host",
    "parse_archive_key",
]
