"""Explicit context threaded through every topology operation.

Holds the loaded root archive, the engine used to resolve addresses and
the namespace layout. One reconciler owns one context; nothing here is
process-global, so tests can run any number of isolated contexts side by
side.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rootarchive.kernel.config.models import MAX_NAME_ATTEMPTS, TopologyPaths, join_path

if TYPE_CHECKING:
    from rootarchive.kernel.ports.archive import ArchiveEngine, ArchiveFilesystem


@dataclass(slots=True)
class TopologyContext:
    """Root archive handle plus the settings the ensurers need."""

    archive: ArchiveFilesystem
    engine: ArchiveEngine
    paths: TopologyPaths = field(default_factory=TopologyPaths)
    allow_remote: bool = True
    max_name_attempts: int = MAX_NAME_ATTEMPTS
    _locks: dict[str, asyncio.Lock] = field(default_factory=dict, repr=False)

    def path_lock(self, containing_path: str) -> asyncio.Lock:
        """Lock serialising name allocation under one containing directory."""
        normalized = join_path(containing_path)
        lock = self._locks.get(normalized)
        if lock is None:
            lock = self._locks[normalized] = asyncio.Lock()
        return lock


__all__ = ["TopologyContext"]
