"""Shared fixtures for the rootarchive test suite.

- log_capture: records every loguru message emitted during a test
- engine / profiles / users / reconciler: in-memory drivers wired together
- make_owner: factory for owners backed by fresh archives
"""

from collections.abc import Callable

import pytest
from loguru import logger

from rootarchive.drivers.archive.base import new_archive_key
from rootarchive.drivers.archive.memory import InMemoryArchive, InMemoryArchiveEngine
from rootarchive.drivers.profile.memory import InMemoryProfileStore
from rootarchive.drivers.users.static import StaticUserDirectory
from rootarchive.kernel.domain.address import format_archive_address
from rootarchive.kernel.domain.owner import Owner
from rootarchive.kernel.topology.context import TopologyContext
from rootarchive.kernel.topology.reconciler import TopologyReconciler


@pytest.fixture
def log_capture():
    """Fixture to capture loguru logs."""
    captured_logs: list[dict] = []

    def sink(message):
        record = message.record
        captured_logs.append({
            "level": record["level"].name,
            "message": record["message"],
            "extra": dict(record["extra"]),
        })

    handler_id = logger.add(sink, level="TRACE", format="{message}")
    yield captured_logs
    logger.remove(handler_id)


@pytest.fixture
def engine() -> InMemoryArchiveEngine:
    return InMemoryArchiveEngine()


@pytest.fixture
def profiles() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def users() -> StaticUserDirectory:
    return StaticUserDirectory()


@pytest.fixture
def reconciler(engine, profiles, users) -> TopologyReconciler:
    return TopologyReconciler(engine, profiles, users)


@pytest.fixture
def root(engine) -> InMemoryArchive:
    """A bare root archive, not yet set up."""
    return engine.get_or_create(new_archive_key())


@pytest.fixture
def ctx(engine, root) -> TopologyContext:
    return TopologyContext(archive=root, engine=engine)


@pytest.fixture
def make_owner(engine) -> Callable[..., Owner]:
    """Factory creating an owner whose address points at a fresh archive."""

    def _make(label: str, **kwargs) -> Owner:
        archive = engine.get_or_create(new_archive_key())
        return Owner(label=label, address=format_archive_address(archive.key), **kwargs)

    return _make
