"""Trash port definition."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Trash(Protocol):
    """Opaque trash subsystem, prepared once at the start of setup."""

    async def asetup(self) -> None: ...
