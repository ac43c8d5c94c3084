"""User directory backed by an in-process list."""

from __future__ import annotations

from rootarchive.kernel.domain.owner import Owner


class StaticUserDirectory:
    """Owners held in memory; tests mutate :attr:`owners` directly."""

    def __init__(self, owners: list[Owner] | None = None) -> None:
        self.owners: list[Owner] = list(owners or [])

    async def alist_users(self) -> list[Owner]:
        return list(self.owners)


__all__ = ["StaticUserDirectory"]
