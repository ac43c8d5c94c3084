"""Tests for the in-memory profile store."""

import pytest

from rootarchive.drivers.profile.memory import InMemoryProfileStore
from rootarchive.kernel.ports.profile_store import ProfileStore


@pytest.mark.asyncio
async def test_missing_profile_has_no_address():
    store = InMemoryProfileStore()
    assert isinstance(store, ProfileStore)
    profile = await store.aget(0)
    assert profile.id == 0
    assert profile.address is None


@pytest.mark.asyncio
async def test_update_is_recorded():
    store = InMemoryProfileStore({1: None})
    await store.aupdate(1, "hyper://" + "a" * 64 + "/")

    assert (await store.aget(1)).address == "hyper://" + "a" * 64 + "/"
    assert store.updates == [(1, "hyper://" + "a" * 64 + "/")]
