"""Collision-free name allocation for new library entries."""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING

from rootarchive.kernel.config.models import join_path
from rootarchive.kernel.exceptions import NameAllocationError
from rootarchive.kernel.logging import get_logger
from rootarchive.kernel.topology.probe import aprobe

if TYPE_CHECKING:
    from rootarchive.kernel.topology.context import TopologyContext

logger = get_logger(__name__)

UNTITLED = "untitled"

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(title: str | None) -> str:
    """Convert a title to a lowercase, path-safe slug.

    >>> slugify("My Post!")
    'my-post'
    >>> slugify("   ")
    'untitled'
    """
    normalized = unicodedata.normalize("NFKD", (title or "").strip())
    ascii_title = normalized.encode("ascii", "ignore").decode("ascii")
    slug = _NON_SLUG_CHARS.sub("-", ascii_title.lower()).strip("-")
    return slug or UNTITLED


def candidate_name(slug: str, attempt: int) -> str:
    """Name tried on the given 1-based attempt: ``slug``, ``slug-2``, ``slug-3``..."""
    return slug if attempt == 1 else f"{slug}-{attempt}"


async def aallocate_name(
    ctx: TopologyContext,
    containing_path: str,
    title: str | None,
    max_attempts: int | None = None,
) -> str:
    """Find the first free name for ``title`` under ``containing_path``.

    This is check-then-act: the name is free when returned, not necessarily
    when used. Hold ``ctx.path_lock(containing_path)`` across allocation and
    use to serialise concurrent callers.

    Raises
    ------
    NameAllocationError
        If every candidate up to ``max_attempts`` is taken.
    """
    limit = max_attempts if max_attempts is not None else ctx.max_name_attempts
    slug = slugify(title)

    for attempt in range(1, limit + 1):
        name = candidate_name(slug, attempt)
        if await aprobe(ctx, join_path(containing_path, name)) is None:
            if attempt > 1:
                logger.debug(
                    "Allocated {name} under {path} after {attempts} attempts",
                    name=name,
                    path=containing_path,
                    attempts=attempt,
                )
            return name

    logger.critical(
        "No available name for {title!r} under {path}", title=title, path=containing_path
    )
    raise NameAllocationError(containing_path, title, limit)


__all__ = ["UNTITLED", "aallocate_name", "candidate_name", "slugify"]
