"""Directory-backed archive engine.

Every archive is a directory ``<base_dir>/archives/<key>/``. Directories and
plain files inside it are ordinary filesystem objects; a mount is a symlink
pointing at another archive's directory. Paths crossing a mount therefore
resolve into the mounted archive without extra bookkeeping.

All I/O goes through ``aiofiles.os`` so the event loop never blocks.
"""

from __future__ import annotations

import os
import stat as stat_module
from pathlib import Path

import aiofiles.os

from rootarchive.drivers.archive.base import (
    NameRegistry,
    check_key,
    new_archive_key,
    normalize_path,
    split_path,
)
from rootarchive.kernel.domain.address import format_archive_address, is_archive_key
from rootarchive.kernel.domain.node import NodeInfo, NodeKind
from rootarchive.kernel.exceptions import ArchiveError, ArchiveNotFoundError
from rootarchive.kernel.logging import get_logger

logger = get_logger(__name__)


class LocalArchive:
    """One archive stored as a directory tree."""

    def __init__(self, engine: LocalArchiveEngine, key: str) -> None:
        self._engine = engine
        self._key = key
        self.root_dir = engine.archive_dir(key)

    @property
    def key(self) -> str:
        return self._key

    @property
    def address(self) -> str:
        return format_archive_address(self._key)

    def _host_path(self, path: str) -> Path:
        return self.root_dir.joinpath(*split_path(path))

    async def astat(self, path: str) -> NodeInfo:
        normalized = normalize_path(path)
        host_path = self._host_path(normalized)
        try:
            st = await aiofiles.os.stat(host_path, follow_symlinks=False)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise ArchiveNotFoundError(normalized) from e
        except OSError as e:
            raise ArchiveError(normalized, e.strerror or str(e)) from e

        if stat_module.S_ISLNK(st.st_mode):
            key = await self._engine.amount_target_key(host_path)
            if key is not None:
                return NodeInfo(path=normalized, kind=NodeKind.MOUNT, mount_key=key)
            return NodeInfo(path=normalized, kind=NodeKind.PLAIN)
        if stat_module.S_ISDIR(st.st_mode):
            return NodeInfo(path=normalized, kind=NodeKind.DIRECTORY)
        return NodeInfo(path=normalized, kind=NodeKind.PLAIN, size=st.st_size)

    async def amkdir(self, path: str) -> None:
        normalized = normalize_path(path)
        try:
            await aiofiles.os.mkdir(self._host_path(normalized))
        except FileExistsError as e:
            raise ArchiveError(normalized, "already exists") from e
        except (FileNotFoundError, NotADirectoryError) as e:
            raise ArchiveError(normalized, "parent directory does not exist") from e
        except OSError as e:
            raise ArchiveError(normalized, e.strerror or str(e)) from e

    async def amount(self, path: str, key: str) -> None:
        normalized = normalize_path(path)
        check_key(normalized, key)
        target = await self._engine.aensure_archive_dir(key)
        try:
            await aiofiles.os.symlink(target, self._host_path(normalized), target_is_directory=True)
        except FileExistsError as e:
            raise ArchiveError(normalized, "already exists") from e
        except (FileNotFoundError, NotADirectoryError) as e:
            raise ArchiveError(normalized, "parent directory does not exist") from e
        except OSError as e:
            raise ArchiveError(normalized, e.strerror or str(e)) from e

    async def aunmount(self, path: str) -> None:
        normalized = normalize_path(path)
        try:
            info = await self.astat(normalized)
        except ArchiveNotFoundError as e:
            raise ArchiveError(normalized, "not a mount point") from e
        if not info.is_mount:
            raise ArchiveError(normalized, "not a mount point")
        try:
            await aiofiles.os.unlink(self._host_path(normalized))
        except OSError as e:
            raise ArchiveError(normalized, e.strerror or str(e)) from e

    async def areaddir(self, path: str) -> list[str]:
        normalized = normalize_path(path)
        try:
            names = await aiofiles.os.listdir(self._host_path(normalized))
        except FileNotFoundError as e:
            raise ArchiveNotFoundError(normalized) from e
        except NotADirectoryError as e:
            raise ArchiveError(normalized, "not a directory") from e
        except OSError as e:
            raise ArchiveError(normalized, e.strerror or str(e)) from e
        return sorted(names)


class LocalArchiveEngine:
    """Engine storing archives under ``<base_dir>/archives``."""

    def __init__(self, base_dir: str | Path, names: dict[str, str] | None = None) -> None:
        self.base_dir = Path(base_dir).expanduser().absolute()
        self.archives_dir = self.base_dir / "archives"
        self.names = NameRegistry(names)

    def archive_dir(self, key: str) -> Path:
        return self.archives_dir / key

    async def aensure_archive_dir(self, key: str) -> Path:
        """Create the directory of an archive if it is not present yet."""
        directory = self.archive_dir(key)
        await aiofiles.os.makedirs(directory, exist_ok=True)
        return directory

    async def amount_target_key(self, link: Path) -> str | None:
        """Key of the archive a symlink points at, or None for other links."""
        target = Path(await aiofiles.os.readlink(link))
        if not target.is_absolute():
            target = link.parent / target
        if Path(os.path.normpath(target.parent)) != Path(os.path.normpath(self.archives_dir)):
            return None
        return target.name if is_archive_key(target.name) else None

    async def acreate_root_archive(self) -> LocalArchive:
        key = new_archive_key()
        await self.aensure_archive_dir(key)
        logger.debug("Created local root archive {key} under {dir}", key=key, dir=str(self.archives_dir))
        return LocalArchive(self, key)

    async def aload_archive(self, address: str) -> LocalArchive:
        key = await self.aresolve_address_to_key(address, allow_remote=True)
        await self.aensure_archive_dir(key)
        return LocalArchive(self, key)

    async def aresolve_address_to_key(self, address: str, allow_remote: bool = False) -> str:
        return self.names.resolve(address, allow_remote)


__all__ = ["LocalArchive", "LocalArchiveEngine"]
