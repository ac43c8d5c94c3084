"""Idempotent ensurers for directories and mounts.

Each ensurer converges exactly one path and reports what it did as an
:class:`~rootarchive.kernel.domain.outcome.Outcome`. None of them raises:
storage failures become ``failed`` outcomes and nodes of the wrong kind
become ``conflict`` outcomes, leaving the node untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rootarchive.kernel.domain.outcome import Outcome, OutcomeStatus
from rootarchive.kernel.exceptions import TopologyConflictError
from rootarchive.kernel.logging import get_logger
from rootarchive.kernel.topology.probe import aprobe

if TYPE_CHECKING:
    from rootarchive.kernel.topology.context import TopologyContext

logger = get_logger(__name__)


async def aensure_directory(ctx: TopologyContext, path: str) -> Outcome:
    """Make sure a directory exists at ``path``."""
    try:
        st = await aprobe(ctx, path)
        if st is None:
            logger.info("Creating directory {path}", path=path)
            await ctx.archive.amkdir(path)
            return Outcome(operation="directory", path=path, status=OutcomeStatus.CREATED)

        if not st.is_directory:
            conflict = TopologyConflictError(path, "directory", st.kind)
            logger.warning(
                "Filesystem expects a folder but an unexpected {kind} exists at {path}",
                kind=str(st.kind),
                path=path,
            )
            return Outcome(
                operation="directory",
                path=path,
                status=OutcomeStatus.CONFLICT,
                reason=str(conflict),
            )

        logger.debug("Directory {path} already present", path=path)
        return Outcome(operation="directory", path=path, status=OutcomeStatus.UNCHANGED)
    except Exception as e:
        logger.error("Failed to make directory {path}: {error}", path=path, error=str(e))
        return Outcome(
            operation="directory", path=path, status=OutcomeStatus.FAILED, reason=str(e)
        )


async def aensure_mount(ctx: TopologyContext, path: str, address: str) -> Outcome:
    """Make sure ``path`` is a mount bound to the archive at ``address``.

    An existing mount bound to another key is detached and re-attached. A
    crash in between leaves the path unmounted; the next pass mounts it.
    """
    try:
        key = await ctx.engine.aresolve_address_to_key(address, allow_remote=ctx.allow_remote)
        st = await aprobe(ctx, path)

        if st is None:
            logger.info("Adding mount {path}", path=path, key=key)
            await ctx.archive.amount(path, key)
            return Outcome(
                operation="mount",
                path=path,
                status=OutcomeStatus.MOUNTED,
                address=address,
                key=key,
            )

        if st.is_mount:
            if st.mount_key == key:
                logger.debug("Mount {path} already bound", path=path, key=key)
                return Outcome(
                    operation="mount",
                    path=path,
                    status=OutcomeStatus.UNCHANGED,
                    address=address,
                    key=key,
                )

            logger.info("Reassigning mount {path}", path=path, key=key, old_key=st.mount_key)
            await ctx.archive.aunmount(path)
            await ctx.archive.amount(path, key)
            return Outcome(
                operation="mount",
                path=path,
                status=OutcomeStatus.REASSIGNED,
                address=address,
                key=key,
                previous_key=st.mount_key,
            )

        conflict = TopologyConflictError(path, "mount", st.kind)
        logger.warning(
            "Filesystem expects a mount but an unexpected {kind} exists at {path}",
            kind=str(st.kind),
            path=path,
        )
        return Outcome(
            operation="mount",
            path=path,
            status=OutcomeStatus.CONFLICT,
            address=address,
            key=key,
            reason=str(conflict),
        )
    except Exception as e:
        logger.error(
            "Failed to mount {address} at {path}: {error}", path=path, address=address, error=str(e)
        )
        return Outcome(
            operation="mount",
            path=path,
            status=OutcomeStatus.FAILED,
            address=address,
            reason=str(e),
        )


async def aensure_unmount(ctx: TopologyContext, path: str) -> Outcome:
    """Make sure ``path`` is not a mount. Non-mount nodes are left alone."""
    try:
        st = await aprobe(ctx, path)
        if st is not None and st.is_mount:
            logger.info("Removing mount {path}", path=path, key=st.mount_key)
            await ctx.archive.aunmount(path)
            return Outcome(
                operation="unmount",
                path=path,
                status=OutcomeStatus.UNMOUNTED,
                previous_key=st.mount_key,
            )
        return Outcome(operation="unmount", path=path, status=OutcomeStatus.UNCHANGED)
    except Exception as e:
        logger.error("Failed to unmount {path}: {error}", path=path, error=str(e))
        return Outcome(operation="unmount", path=path, status=OutcomeStatus.FAILED, reason=str(e))


__all__ = ["aensure_directory", "aensure_mount", "aensure_unmount"]
