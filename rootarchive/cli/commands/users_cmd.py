"""Users commands: edit the owner list and apply the change."""

from __future__ import annotations

import asyncio

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.table import Table

from rootarchive.cli.utils import (
    console,
    exit_on_failures,
    get_config,
    open_session,
    print_json,
    print_report,
    wants_json,
)
from rootarchive.kernel.config.models import RootArchiveConfig
from rootarchive.kernel.domain.outcome import ReconciliationReport
from rootarchive.kernel.domain.owner import Owner
from rootarchive.kernel.exceptions import RootArchiveError

app = typer.Typer()


async def _alist(config: RootArchiveConfig) -> list[Owner]:
    async with open_session(config) as session:
        return await session.users.alist_users()


async def _aadd(config: RootArchiveConfig, owner: Owner) -> ReconciliationReport:
    async with open_session(config) as session:
        report = await session.reconciler.asetup()
        await session.users.aadd(owner)
        if session.reconciler.context is not None:
            report.extend(await session.reconciler.aadd_user(owner))
        return report


async def _aremove(config: RootArchiveConfig, label: str) -> ReconciliationReport | None:
    async with open_session(config) as session:
        report = await session.reconciler.asetup()
        owner = await session.users.aremove(label)
        if owner is None:
            return None
        if session.reconciler.context is not None:
            report.extend(await session.reconciler.aremove_user(owner))
        return report


@app.command("list")
def list_users(ctx: typer.Context) -> None:
    """List the known users."""
    try:
        owners = asyncio.run(_alist(get_config(ctx)))
    except RootArchiveError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    if wants_json(ctx):
        print_json([o.model_dump(by_alias=True) for o in owners])
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Label")
    table.add_column("Address")
    table.add_column("Default")
    table.add_column("Temporary")
    for owner in owners:
        table.add_row(
            owner.label,
            owner.address,
            "yes" if owner.is_default else "",
            "yes" if owner.is_temporary else "",
        )
    console.print(table)


@app.command("add")
def add_user(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Owner label, used as the mount name"),
    address: str = typer.Argument(..., help="Owner archive address"),
    default: bool = typer.Option(False, "--default", "-d", help="Mount at the default alias"),
    temporary: bool = typer.Option(False, "--temporary", "-t", help="Do not mount persistently"),
) -> None:
    """Add a user and mount its archive."""
    try:
        owner = Owner(label=label, address=address, is_default=default, is_temporary=temporary)
    except PydanticValidationError as e:
        console.print(f"[red]Invalid user: {e.errors()[0]['msg']}[/red]")
        raise typer.Exit(2) from e

    try:
        report = asyncio.run(_aadd(get_config(ctx), owner))
    except RootArchiveError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    print_report(report, ctx)
    exit_on_failures(report)


@app.command("remove")
def remove_user(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Label of the user to remove"),
) -> None:
    """Remove a user and unmount its archive."""
    try:
        report = asyncio.run(_aremove(get_config(ctx), label))
    except RootArchiveError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    if report is None:
        console.print(f"[red]User {label} not found[/red]")
        raise typer.Exit(1)
    print_report(report, ctx)
    exit_on_failures(report)
