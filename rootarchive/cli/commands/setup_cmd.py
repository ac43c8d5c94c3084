"""Setup command: converge the root archive once."""

from __future__ import annotations

import asyncio

import typer

from rootarchive.cli.utils import (
    exit_on_failures,
    get_config,
    open_session,
    print_report,
)
from rootarchive.kernel.config.models import RootArchiveConfig
from rootarchive.kernel.domain.outcome import ReconciliationReport


async def _arun_setup(config: RootArchiveConfig) -> ReconciliationReport:
    async with open_session(config) as session:
        return await session.reconciler.asetup()


def setup(ctx: typer.Context) -> None:
    """Create the root archive if needed and converge its layout."""
    report = asyncio.run(_arun_setup(get_config(ctx)))
    print_report(report, ctx)
    exit_on_failures(report)
