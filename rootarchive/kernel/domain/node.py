"""Domain models for nodes of an archive namespace.

A node is whatever an archive holds at a path. The reconciler only cares
about its kind and, for mounts, which archive key it is bound to.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator


class NodeKind(StrEnum):
    """Kind of a node in an archive namespace."""

    ABSENT = "absent"
    PLAIN = "plain"
    DIRECTORY = "directory"
    MOUNT = "mount"


class NodeInfo(BaseModel):
    """Result of a stat call.

    Attributes
    ----------
    path : str
        Absolute path inside the archive.
    kind : NodeKind
        What occupies the path.
    mount_key : str | None
        Hex key of the archive a mount is bound to; set only for mounts.
    size : int | None
        Byte size for plain files, when the engine knows it.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    kind: NodeKind
    mount_key: str | None = None
    size: int | None = None

    @model_validator(mode="after")
    def _mount_key_only_for_mounts(self) -> NodeInfo:
        if self.kind == NodeKind.MOUNT and not self.mount_key:
            raise ValueError("mount nodes require a mount_key")
        if self.kind != NodeKind.MOUNT and self.mount_key is not None:
            raise ValueError(f"{self.kind} nodes cannot carry a mount_key")
        return self

    @property
    def is_directory(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    @property
    def is_mount(self) -> bool:
        return self.kind == NodeKind.MOUNT


__all__ = ["NodeInfo", "NodeKind"]
