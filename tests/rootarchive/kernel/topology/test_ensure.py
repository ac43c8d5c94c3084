"""Tests for the directory and mount ensurers."""

import pytest

from rootarchive.kernel.domain.node import NodeKind
from rootarchive.kernel.domain.outcome import OutcomeStatus
from rootarchive.kernel.exceptions import ArchiveError
from rootarchive.kernel.topology.context import TopologyContext
from rootarchive.kernel.topology.ensure import (
    aensure_directory,
    aensure_mount,
    aensure_unmount,
)


class TestEnsureDirectory:
    @pytest.mark.asyncio
    async def test_creates_missing_directory(self, ctx, root):
        outcome = await aensure_directory(ctx, "/data")

        assert outcome.status is OutcomeStatus.CREATED
        assert outcome.operation == "directory"
        assert (await root.astat("/data")).kind is NodeKind.DIRECTORY

    @pytest.mark.asyncio
    async def test_idempotent(self, ctx, root):
        await aensure_directory(ctx, "/data")
        before = root.mutations()

        outcome = await aensure_directory(ctx, "/data")

        assert outcome.status is OutcomeStatus.UNCHANGED
        assert root.mutations() == before

    @pytest.mark.asyncio
    async def test_plain_file_is_a_conflict_and_left_alone(self, ctx, root, log_capture):
        await root.awrite_file("/settings", b"user data")

        outcome = await aensure_directory(ctx, "/settings")

        assert outcome.status is OutcomeStatus.CONFLICT
        assert "plain" in outcome.reason
        assert await root.aread_file("/settings") == b"user data"
        assert root.mutations("mkdir") == []
        assert any(r["level"] == "WARNING" for r in log_capture)

    @pytest.mark.asyncio
    async def test_mount_is_a_conflict(self, ctx, root, engine):
        other = await engine.acreate_archive()
        await root.amount("/library", other.key)

        outcome = await aensure_directory(ctx, "/library")

        assert outcome.status is OutcomeStatus.CONFLICT
        assert (await root.astat("/library")).mount_key == other.key

    @pytest.mark.asyncio
    async def test_storage_failure_is_reported_not_raised(self, ctx, root, log_capture):
        root.inject_failure("mkdir", "/data", ArchiveError("/data", "disk full"))

        outcome = await aensure_directory(ctx, "/data")

        assert outcome.status is OutcomeStatus.FAILED
        assert "disk full" in outcome.reason
        assert any(r["level"] == "ERROR" for r in log_capture)

    @pytest.mark.asyncio
    async def test_missing_parent_fails(self, ctx):
        outcome = await aensure_directory(ctx, "/data/unwalled.garden")
        assert outcome.status is OutcomeStatus.FAILED


class TestEnsureMount:
    @pytest.fixture
    def owner_archive(self, engine):
        return engine.get_or_create("1" * 64)

    @pytest.mark.asyncio
    async def test_mounts_missing_path(self, ctx, root, owner_archive):
        await root.amkdir("/owners")

        outcome = await aensure_mount(ctx, "/owners/alice", owner_archive.address)

        assert outcome.status is OutcomeStatus.MOUNTED
        assert outcome.key == owner_archive.key
        assert outcome.address == owner_archive.address
        assert (await root.astat("/owners/alice")).mount_key == owner_archive.key

    @pytest.mark.asyncio
    async def test_same_key_is_unchanged(self, ctx, root, owner_archive):
        await root.amkdir("/owners")
        await aensure_mount(ctx, "/owners/alice", owner_archive.address)
        before = root.mutations()

        outcome = await aensure_mount(ctx, "/owners/alice", owner_archive.address)

        assert outcome.status is OutcomeStatus.UNCHANGED
        assert root.mutations() == before

    @pytest.mark.asyncio
    async def test_other_key_is_reassigned(self, ctx, root, engine, owner_archive):
        await root.amkdir("/owners")
        await aensure_mount(ctx, "/owners/alice", owner_archive.address)
        replacement = await engine.acreate_archive()

        outcome = await aensure_mount(ctx, "/owners/alice", replacement.address)

        assert outcome.status is OutcomeStatus.REASSIGNED
        assert outcome.previous_key == owner_archive.key
        assert outcome.key == replacement.key
        assert (await root.astat("/owners/alice")).mount_key == replacement.key
        assert [op for op, _ in root.mutations()][-2:] == ["unmount", "mount"]

    @pytest.mark.asyncio
    async def test_reassignment_failure_between_steps_leaves_path_unmounted(
        self, ctx, root, engine, owner_archive
    ):
        await root.amkdir("/owners")
        await aensure_mount(ctx, "/owners/alice", owner_archive.address)
        replacement = await engine.acreate_archive()
        root.inject_failure("mount", "/owners/alice")

        outcome = await aensure_mount(ctx, "/owners/alice", replacement.address)
        assert outcome.status is OutcomeStatus.FAILED

        root.clear_failures()
        outcome = await aensure_mount(ctx, "/owners/alice", replacement.address)
        assert outcome.status is OutcomeStatus.MOUNTED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", ["directory", "plain"])
    async def test_non_mount_is_a_conflict(self, ctx, root, owner_archive, kind):
        if kind == "directory":
            await root.amkdir("/public")
        else:
            await root.awrite_file("/public", "hello")

        outcome = await aensure_mount(ctx, "/public", owner_archive.address)

        assert outcome.status is OutcomeStatus.CONFLICT
        assert (await root.astat("/public")).kind == kind
        assert root.mutations("mount") == []

    @pytest.mark.asyncio
    async def test_unresolvable_address_fails(self, ctx, root):
        outcome = await aensure_mount(ctx, "/public", "hyper://unknown.example/")

        assert outcome.status is OutcomeStatus.FAILED
        assert "unknown.example" in outcome.reason
        assert root.mutations() == []

    @pytest.mark.asyncio
    async def test_names_resolve_only_when_remote_allowed(self, engine, root, owner_archive):
        engine.names.register("alice.example", owner_archive.key)
        remote = TopologyContext(archive=root, engine=engine, allow_remote=True)
        local = TopologyContext(archive=root, engine=engine, allow_remote=False)

        assert (await aensure_mount(local, "/public", "hyper://alice.example/")).status is (
            OutcomeStatus.FAILED
        )
        outcome = await aensure_mount(remote, "/public", "hyper://alice.example/")
        assert outcome.status is OutcomeStatus.MOUNTED
        assert outcome.key == owner_archive.key

    @pytest.mark.asyncio
    async def test_mount_failure_is_reported(self, ctx, root, owner_archive):
        root.inject_failure("mount", "/public")
        outcome = await aensure_mount(ctx, "/public", owner_archive.address)
        assert outcome.status is OutcomeStatus.FAILED


class TestEnsureUnmount:
    @pytest.mark.asyncio
    async def test_unmounts_mount(self, ctx, root, engine):
        other = await engine.acreate_archive()
        await root.amount("/public", other.key)

        outcome = await aensure_unmount(ctx, "/public")

        assert outcome.status is OutcomeStatus.UNMOUNTED
        assert outcome.previous_key == other.key
        assert await root.areaddir("/") == []

    @pytest.mark.asyncio
    async def test_absent_path_is_unchanged(self, ctx):
        assert (await aensure_unmount(ctx, "/public")).status is OutcomeStatus.UNCHANGED

    @pytest.mark.asyncio
    async def test_directory_is_left_alone(self, ctx, root):
        await root.amkdir("/public")
        outcome = await aensure_unmount(ctx, "/public")
        assert outcome.status is OutcomeStatus.UNCHANGED
        assert (await root.astat("/public")).is_directory

    @pytest.mark.asyncio
    async def test_unmount_failure_is_reported(self, ctx, root, engine):
        other = await engine.acreate_archive()
        await root.amount("/public", other.key)
        root.inject_failure("unmount", "/public")

        outcome = await aensure_unmount(ctx, "/public")
        assert outcome.status is OutcomeStatus.FAILED
