"""Owner and profile records consumed by the reconciler."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Owner(BaseModel):
    """A known user of the root archive.

    Each non-temporary owner gets a mount at ``<owners_root>/<label>``; the
    default owner is additionally mounted at the default alias path.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str
    address: str = Field(alias="url")
    is_default: bool = Field(default=False, alias="isDefault")
    is_temporary: bool = Field(default=False, alias="isTemporary")

    @field_validator("label")
    @classmethod
    def _label_is_one_path_segment(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("label cannot be empty")
        if "/" in v or v in (".", ".."):
            raise ValueError(f"label must be a single path segment, got {v!r}")
        return v

    @field_validator("address")
    @classmethod
    def _address_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("address cannot be empty")
        return v.strip()


class Profile(BaseModel):
    """Profile record holding the root archive address."""

    id: int
    address: str | None = None


__all__ = ["Owner", "Profile"]
