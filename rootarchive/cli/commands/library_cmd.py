"""Library commands."""

from __future__ import annotations

import asyncio

import typer

from rootarchive.cli.utils import (
    console,
    exit_on_failures,
    get_config,
    open_session,
    print_json,
    print_report,
    report_to_dict,
    wants_json,
)
from rootarchive.kernel.config.models import RootArchiveConfig
from rootarchive.kernel.domain.outcome import ReconciliationReport
from rootarchive.kernel.exceptions import RootArchiveError

app = typer.Typer()


async def _aadd(
    config: RootArchiveConfig, address: str, title: str | None
) -> tuple[str, ReconciliationReport]:
    async with open_session(config) as session:
        await session.reconciler.asetup()
        report = ReconciliationReport()
        name = await session.reconciler.aadd_to_library(address, title, report=report)
        return name, report


@app.command("add")
def add_entry(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Archive address to mount"),
    title: str = typer.Argument("", help="Title the entry name is derived from"),
) -> None:
    """Mount an archive under the library with a fresh name."""
    config = get_config(ctx)
    try:
        name, report = asyncio.run(_aadd(config, address, title))
    except RootArchiveError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    path = config.topology.paths.library_entry(name)
    if report.failures:
        if wants_json(ctx):
            print_json({"name": name, "path": path, **report_to_dict(report)})
        else:
            print_report(report, ctx)
            console.print(f"[red]Could not mount[/red] {address} at [bold]{path}[/bold]")
        exit_on_failures(report)

    if wants_json(ctx):
        print_json({"name": name, "path": path})
    else:
        console.print(f"[green]Added[/green] {address} at [bold]{path}[/bold]")
