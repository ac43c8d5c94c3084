"""User directory backed by a YAML file.

File format::

    users:
      - label: alice
        url: hyper://<key>/
        isDefault: true
      - label: guest
        url: hyper://<key>/
        isTemporary: true

The file is read on every call, so edits made by other processes are picked
up by the next reconciliation pass. A missing file means no users.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
import yaml
from pydantic import ValidationError as PydanticValidationError

from rootarchive.kernel.domain.owner import Owner
from rootarchive.kernel.exceptions import ConfigurationError
from rootarchive.kernel.logging import get_logger

logger = get_logger(__name__)


class YamlUserDirectory:
    """Owners listed under the ``users`` key of a YAML file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    async def alist_users(self) -> list[Owner]:
        """Parse the file and return its owners.

        Raises
        ------
        ConfigurationError
            If the file is not a mapping with a ``users`` list, or an entry
            is not a valid owner, or two entries share a label.
        """
        if not await aiofiles.os.path.exists(self.path):
            logger.debug("User file {path} not found, no users", path=str(self.path))
            return []

        async with aiofiles.open(self.path, encoding="utf-8") as f:
            content = await f.read()

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError("users", f"invalid YAML in {self.path}: {e}") from e

        entries = (data.get("users") or []) if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise ConfigurationError("users", f"{self.path} must contain a 'users' list")

        owners: list[Owner] = []
        seen: set[str] = set()
        for index, entry in enumerate(entries):
            try:
                owner = Owner.model_validate(entry)
            except PydanticValidationError as e:
                raise ConfigurationError("users", f"entry {index} in {self.path}: {e}") from e
            if owner.label in seen:
                raise ConfigurationError(
                    "users", f"entry {index} in {self.path}: duplicate label {owner.label!r}"
                )
            seen.add(owner.label)
            owners.append(owner)
        return owners

    async def aadd(self, owner: Owner) -> None:
        """Add an owner, replacing any entry with the same label."""
        owners = [o for o in await self.alist_users() if o.label != owner.label]
        owners.append(owner)
        await self._awrite(owners)
        logger.info("Added user {label} to {path}", label=owner.label, path=str(self.path))

    async def aremove(self, label: str) -> Owner | None:
        """Remove the owner with ``label``; returns it, or None if unknown."""
        owners = await self.alist_users()
        removed = next((o for o in owners if o.label == label), None)
        if removed is None:
            return None
        await self._awrite([o for o in owners if o.label != label])
        logger.info("Removed user {label} from {path}", label=label, path=str(self.path))
        return removed

    async def _awrite(self, owners: list[Owner]) -> None:
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        document: dict[str, Any] = {
            "users": [o.model_dump(by_alias=True, exclude_defaults=True) for o in owners]
        }
        async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
            await f.write(yaml.safe_dump(document, sort_keys=False))


__all__ = ["YamlUserDirectory"]
