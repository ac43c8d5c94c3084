"""Profile store drivers."""

from rootarchive.drivers.profile.memory import InMemoryProfileStore
from rootarchive.drivers.profile.sqlite import SQLiteProfileStore

__all__ = ["InMemoryProfileStore", "SQLiteProfileStore"]
