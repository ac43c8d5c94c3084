"""Existence prober: stat that reports absence instead of raising."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rootarchive.kernel.exceptions import ArchiveNotFoundError
from rootarchive.kernel.logging import get_logger

if TYPE_CHECKING:
    from rootarchive.kernel.domain.node import NodeInfo
    from rootarchive.kernel.topology.context import TopologyContext

logger = get_logger(__name__)


async def aprobe(ctx: TopologyContext, path: str) -> NodeInfo | None:
    """Stat a path, returning None when it does not exist.

    Every lookup error, not just "not found", is treated as absence.
    """
    try:
        return await ctx.archive.astat(path)
    except ArchiveNotFoundError:
        logger.trace("Nothing at {path}", path=path)
        return None
    except Exception as e:
        logger.debug("Stat failed for {path}, treating as absent: {error}", path=path, error=str(e))
        return None


__all__ = ["aprobe"]
