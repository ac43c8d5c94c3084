"""Archive engine drivers."""

from rootarchive.drivers.archive.local import LocalArchive, LocalArchiveEngine
from rootarchive.drivers.archive.memory import InMemoryArchive, InMemoryArchiveEngine

__all__ = ["InMemoryArchive", "InMemoryArchiveEngine", "LocalArchive", "LocalArchiveEngine"]
