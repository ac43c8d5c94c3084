"""Tests for shared archive driver helpers."""

import pytest

from rootarchive.drivers.archive.base import (
    NameRegistry,
    check_key,
    new_archive_key,
    normalize_path,
    split_path,
)
from rootarchive.kernel.domain.address import is_archive_key
from rootarchive.kernel.exceptions import AddressResolutionError, ArchiveError, ValidationError

KEY = "ef" * 32


class TestPaths:
    def test_split_path(self):
        assert split_path("/data//unwalled.garden/") == ["data", "unwalled.garden"]
        assert split_path("/") == []

    def test_normalize_path(self):
        assert normalize_path("/owners/alice/") == "/owners/alice"
        assert normalize_path("/") == "/"

    @pytest.mark.parametrize("path", ["owners", "/owners/../etc", "/./data"])
    def test_rejects_bad_paths(self, path):
        with pytest.raises(ArchiveError):
            split_path(path)


def test_new_archive_key_is_valid_and_fresh():
    key = new_archive_key()
    assert is_archive_key(key)
    assert key != new_archive_key()


def test_check_key():
    assert check_key("/public", KEY) == KEY
    with pytest.raises(ArchiveError, match="invalid archive key"):
        check_key("/public", "nope")


class TestNameRegistry:
    def test_keys_resolve_without_lookup(self):
        assert NameRegistry().resolve(f"hyper://{KEY}/", allow_remote=False) == KEY

    def test_names_need_remote_resolution(self):
        registry = NameRegistry({"Blog.Example": KEY})
        with pytest.raises(AddressResolutionError, match="remote"):
            registry.resolve("hyper://blog.example/", allow_remote=False)
        assert registry.resolve("hyper://blog.example/", allow_remote=True) == KEY

    def test_unknown_name(self):
        with pytest.raises(AddressResolutionError, match="unknown name"):
            NameRegistry().resolve("hyper://nobody.example/", allow_remote=True)

    def test_not_an_address(self):
        with pytest.raises(AddressResolutionError, match="not an archive address"):
            NameRegistry().resolve("https://example.com/", allow_remote=True)

    def test_register_rejects_bad_keys(self):
        with pytest.raises(ValidationError):
            NameRegistry({"blog.example": "1234"})
