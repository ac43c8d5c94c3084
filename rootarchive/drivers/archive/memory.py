"""In-memory archive engine for tests and embedding.

Archives are trees of directories, plain files and mounts held in process
memory. Paths that cross a mount continue inside the mounted archive, so
``/owners/alice/profile.json`` reads from alice's archive.

Features:
- Per-archive log of mutating calls (for idempotence assertions)
- Failure injection per operation and path
- Name registry for non-key addresses

Example
-------
.. code-block:: python

    engine = InMemoryArchiveEngine()
    root = await engine.acreate_root_archive()
    await root.amkdir("/owners")
    alice = await engine.acreate_archive()
    await root.amount("/owners/alice", alice.key)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Literal

from rootarchive.drivers.archive.base import (
    NameRegistry,
    check_key,
    new_archive_key,
    normalize_path,
    split_path,
)
from rootarchive.kernel.domain.address import format_archive_address
from rootarchive.kernel.domain.node import NodeInfo, NodeKind
from rootarchive.kernel.exceptions import ArchiveError, ArchiveNotFoundError
from rootarchive.kernel.logging import get_logger

logger = get_logger(__name__)

FsOperation = Literal["stat", "mkdir", "mount", "unmount", "readdir", "write"]


@dataclass(slots=True)
class _Directory:
    children: dict[str, _Node] = field(default_factory=dict)


@dataclass(slots=True)
class _File:
    data: bytes = b""


@dataclass(slots=True)
class _Mount:
    key: str


_Node = _Directory | _File | _Mount


class InMemoryArchive:
    """One archive held in memory."""

    def __init__(self, engine: InMemoryArchiveEngine, key: str) -> None:
        self._engine = engine
        self._key = key
        self._root = _Directory()
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[tuple[str, str], Exception] = {}

    @property
    def key(self) -> str:
        return self._key

    @property
    def address(self) -> str:
        return format_archive_address(self._key)

    # ------------------------------------------------------------------
    # Test hooks
    # ------------------------------------------------------------------

    def inject_failure(
        self, operation: FsOperation, path: str, error: Exception | None = None
    ) -> None:
        """Make ``operation`` on ``path`` raise until :meth:`clear_failures`."""
        self._failures[operation, normalize_path(path)] = error or ArchiveError(
            path, f"injected {operation} failure"
        )

    def clear_failures(self) -> None:
        self._failures.clear()

    def mutations(self, operation: FsOperation | None = None) -> list[tuple[str, str]]:
        """Recorded mutating calls, optionally filtered by operation."""
        if operation is not None:
            return [c for c in self.calls if c[0] == operation]
        return [c for c in self.calls if c[0] not in ("stat", "readdir")]

    # ------------------------------------------------------------------
    # ArchiveFilesystem
    # ------------------------------------------------------------------

    async def astat(self, path: str) -> NodeInfo:
        normalized = self._enter("stat", path)
        node = self._lookup(normalized)
        if isinstance(node, _Mount):
            return NodeInfo(path=normalized, kind=NodeKind.MOUNT, mount_key=node.key)
        if isinstance(node, _File):
            return NodeInfo(path=normalized, kind=NodeKind.PLAIN, size=len(node.data))
        return NodeInfo(path=normalized, kind=NodeKind.DIRECTORY)

    async def amkdir(self, path: str) -> None:
        normalized = self._enter("mkdir", path)
        parent, name = self._parent_for_create(normalized)
        parent.children[name] = _Directory()

    async def amount(self, path: str, key: str) -> None:
        normalized = self._enter("mount", path)
        check_key(normalized, key)
        parent, name = self._parent_for_create(normalized)
        self._engine.get_or_create(key)
        parent.children[name] = _Mount(key)

    async def aunmount(self, path: str) -> None:
        normalized = self._enter("unmount", path)
        parent_path, _, name = normalized.rpartition("/")
        try:
            parent = self._resolve_directory(parent_path or "/")
        except ArchiveNotFoundError as e:
            raise ArchiveError(normalized, "not a mount point") from e
        node = parent.children.get(name)
        if not isinstance(node, _Mount):
            raise ArchiveError(normalized, "not a mount point")
        del parent.children[name]

    async def areaddir(self, path: str) -> list[str]:
        normalized = self._enter("readdir", path)
        node = self._lookup(normalized)
        if isinstance(node, _Mount):
            node = self._engine.get_or_create(node.key)._root
        if not isinstance(node, _Directory):
            raise ArchiveError(normalized, "not a directory")
        return sorted(node.children)

    async def awrite_file(self, path: str, data: bytes | str) -> None:
        """Create or overwrite a plain file."""
        normalized = self._enter("write", path)
        payload = data.encode() if isinstance(data, str) else data
        parent_path, _, name = normalized.rpartition("/")
        parent = self._resolve_directory(parent_path or "/")
        existing = parent.children.get(name)
        if existing is not None and not isinstance(existing, _File):
            raise ArchiveError(normalized, "is not a plain file")
        parent.children[name] = _File(payload)

    async def aread_file(self, path: str) -> bytes:
        node = self._lookup(normalize_path(path))
        if not isinstance(node, _File):
            raise ArchiveError(path, "is not a plain file")
        return node.data

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _enter(self, operation: FsOperation, path: str) -> str:
        normalized = normalize_path(path)
        self.calls.append((operation, normalized))
        if (failure := self._failures.get((operation, normalized))) is not None:
            raise failure
        return normalized

    def _lookup(self, normalized: str) -> _Node:
        """Walk to a node, crossing mounts for intermediate segments."""
        node: _Node = self._root
        for segment in split_path(normalized):
            if isinstance(node, _Mount):
                node = self._engine.get_or_create(node.key)._root
            if not isinstance(node, _Directory) or segment not in node.children:
                raise ArchiveNotFoundError(normalized)
            node = node.children[segment]
        return node

    def _resolve_directory(self, normalized: str) -> _Directory:
        node = self._lookup(normalized)
        if isinstance(node, _Mount):
            node = self._engine.get_or_create(node.key)._root
        if not isinstance(node, _Directory):
            raise ArchiveError(normalized, "not a directory")
        return node

    def _parent_for_create(self, normalized: str) -> tuple[_Directory, str]:
        if normalized == "/":
            raise ArchiveError(normalized, "already exists")
        parent_path, _, name = normalized.rpartition("/")
        try:
            parent = self._resolve_directory(parent_path or "/")
        except ArchiveNotFoundError as e:
            raise ArchiveError(normalized, "parent directory does not exist") from e
        if name in parent.children:
            raise ArchiveError(normalized, "already exists")
        return parent, name


class InMemoryArchiveEngine:
    """Engine holding every archive of the process in a dict keyed by key."""

    def __init__(self, names: dict[str, str] | None = None, delay_seconds: float = 0.0) -> None:
        """Initialize the engine.

        Parameters
        ----------
        names : dict[str, str] | None
            Name to key table for non-key addresses.
        delay_seconds : float
            Simulated latency for engine calls. Default: 0.0.
        """
        self.names = NameRegistry(names)
        self.delay_seconds = delay_seconds
        self._archives: dict[str, InMemoryArchive] = {}

    def get_or_create(self, key: str) -> InMemoryArchive:
        archive = self._archives.get(key)
        if archive is None:
            archive = self._archives[key] = InMemoryArchive(self, key)
        return archive

    def get(self, key: str) -> InMemoryArchive | None:
        return self._archives.get(key)

    async def acreate_archive(self) -> InMemoryArchive:
        """Create an empty archive with a fresh key."""
        await self._delay()
        return self.get_or_create(new_archive_key())

    async def acreate_root_archive(self) -> InMemoryArchive:
        archive = await self.acreate_archive()
        logger.debug("Created in-memory root archive {key}", key=archive.key)
        return archive

    async def aload_archive(self, address: str) -> InMemoryArchive:
        key = await self.aresolve_address_to_key(address, allow_remote=True)
        return self.get_or_create(key)

    async def aresolve_address_to_key(self, address: str, allow_remote: bool = False) -> str:
        await self._delay()
        return self.names.resolve(address, allow_remote)

    async def _delay(self) -> None:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)


__all__ = ["InMemoryArchive", "InMemoryArchiveEngine"]
