"""Profile store port definition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rootarchive.kernel.domain.owner import Profile


@runtime_checkable
class ProfileStore(Protocol):
    """Port for the record that remembers the root archive address.

    Drivers: ``InMemoryProfileStore``, ``SQLiteProfileStore``.
    """

    async def aget(self, profile_id: int) -> Profile:
        """Return the profile, creating an empty record if it is missing."""
        ...

    async def aupdate(self, profile_id: int, address: str) -> None:
        """Persist the root archive address of a profile."""
        ...
