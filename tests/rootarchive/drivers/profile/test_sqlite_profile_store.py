"""Tests for the SQLite profile store."""

import sqlite3

import pytest

from rootarchive.drivers.profile.sqlite import SQLiteProfileStore
from rootarchive.kernel.ports.profile_store import ProfileStore

ADDRESS = "hyper://" + "d" * 64 + "/"


class TestSQLiteProfileStore:
    @pytest.fixture
    def db_path(self, tmp_path):
        return tmp_path / "nested" / "profiles.db"

    @pytest.mark.asyncio
    async def test_creates_missing_profile_row(self, db_path):
        store = SQLiteProfileStore(db_path)
        try:
            assert isinstance(store, ProfileStore)
            profile = await store.aget(0)
        finally:
            await store.close()

        assert profile.address is None
        with sqlite3.connect(db_path) as conn:
            rows = conn.execute("SELECT id, url FROM profiles").fetchall()
        assert rows == [(0, None)]

    @pytest.mark.asyncio
    async def test_update_persists_across_connections(self, db_path):
        store = SQLiteProfileStore(db_path)
        try:
            await store.aget(0)
            await store.aupdate(0, ADDRESS)
        finally:
            await store.close()

        reopened = SQLiteProfileStore(db_path)
        try:
            assert (await reopened.aget(0)).address == ADDRESS
        finally:
            await reopened.close()

    @pytest.mark.asyncio
    async def test_update_without_existing_row(self):
        store = SQLiteProfileStore()
        try:
            await store.aupdate(3, ADDRESS)
            assert (await store.aget(3)).address == ADDRESS
            assert (await store.aget(4)).address is None
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        store = SQLiteProfileStore()
        await store.aget(0)
        await store.close()
        await store.close()
        assert store.connection is None
