"""Archive storage ports.

The archive storage engine supplies versioned, hierarchical,
content-addressed filesystems. The reconciler consumes two surfaces:

- :class:`ArchiveFilesystem`: the path operations of one archive, scoped
  to its own namespace.
- :class:`ArchiveEngine`: creating, loading and addressing archives.

Drivers
-------
- ``InMemoryArchiveEngine``: in-process tree, for tests and embedding.
- ``LocalArchiveEngine``: directory-backed archives, mounts as symlinks.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rootarchive.kernel.domain.node import NodeInfo


@runtime_checkable
class ArchiveFilesystem(Protocol):
    """Path operations on one archive.

    Paths are absolute (``/owners/alice``). Implementations must raise
    :class:`~rootarchive.kernel.exceptions.ArchiveNotFoundError` from
    :meth:`astat` for missing paths and
    :class:`~rootarchive.kernel.exceptions.ArchiveError` for every other
    failure.
    """

    @property
    @abstractmethod
    def key(self) -> str:
        """Hex key identifying this archive."""
        ...

    @property
    @abstractmethod
    def address(self) -> str:
        """Canonical address of this archive."""
        ...

    @abstractmethod
    async def astat(self, path: str) -> NodeInfo:
        """Describe the node at a path.

        Raises
        ------
        ArchiveNotFoundError
            If nothing exists at the path.
        """
        ...

    @abstractmethod
    async def amkdir(self, path: str) -> None:
        """Create a directory. The parent must exist and the path must be free."""
        ...

    @abstractmethod
    async def amount(self, path: str, key: str) -> None:
        """Bind the archive identified by ``key`` at a free path."""
        ...

    @abstractmethod
    async def aunmount(self, path: str) -> None:
        """Remove the mount at a path."""
        ...

    @abstractmethod
    async def areaddir(self, path: str) -> list[str]:
        """Names of the entries directly under a directory, sorted."""
        ...


@runtime_checkable
class ArchiveEngine(Protocol):
    """Factory and resolver for archives."""

    @abstractmethod
    async def acreate_root_archive(self) -> ArchiveFilesystem:
        """Create a new, empty, writable root archive."""
        ...

    @abstractmethod
    async def aload_archive(self, address: str) -> ArchiveFilesystem:
        """Open the archive at ``address``, loading it if needed."""
        ...

    @abstractmethod
    async def aresolve_address_to_key(self, address: str, allow_remote: bool = False) -> str:
        """Resolve an address to a hex key.

        Args
        ----
            address: A key-bearing address, or a name when ``allow_remote``.
            allow_remote: Permit name lookups that may leave the process.

        Raises
        ------
        AddressResolutionError
            If the address cannot be resolved.
        """
        ...


__all__ = ["ArchiveEngine", "ArchiveFilesystem"]
