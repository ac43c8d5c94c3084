"""Port interfaces consumed by the reconciler."""

from rootarchive.kernel.ports.archive import ArchiveEngine, ArchiveFilesystem
from rootarchive.kernel.ports.profile_store import ProfileStore
from rootarchive.kernel.ports.trash import Trash
from rootarchive.kernel.ports.user_directory import UserDirectory

__all__ = [
    "ArchiveEngine",
    "ArchiveFilesystem",
    "ProfileStore",
    "Trash",
    "UserDirectory",
]
