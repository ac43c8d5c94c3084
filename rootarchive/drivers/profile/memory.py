"""In-memory profile store."""

from __future__ import annotations

from rootarchive.kernel.domain.owner import Profile


class InMemoryProfileStore:
    """Profile records kept in a dict.

    Parameters
    ----------
    addresses : dict[int, str | None] | None
        Initial ``profile_id -> address`` records.
    """

    def __init__(self, addresses: dict[int, str | None] | None = None) -> None:
        self._addresses: dict[int, str | None] = dict(addresses or {})
        self.updates: list[tuple[int, str]] = []

    async def aget(self, profile_id: int) -> Profile:
        address = self._addresses.setdefault(profile_id, None)
        return Profile(id=profile_id, address=address)

    async def aupdate(self, profile_id: int, address: str) -> None:
        self._addresses[profile_id] = address
        self.updates.append((profile_id, address))


__all__ = ["InMemoryProfileStore"]
