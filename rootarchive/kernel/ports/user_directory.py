"""User directory port definition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rootarchive.kernel.domain.owner import Owner


@runtime_checkable
class UserDirectory(Protocol):
    """Port enumerating the known owners.

    Drivers: ``StaticUserDirectory``, ``YamlUserDirectory``.
    """

    async def alist_users(self) -> list[Owner]:
        """Every known owner, temporary ones included."""
        ...
