"""List command: show the entries of a root archive directory."""

from __future__ import annotations

import asyncio

import typer
from rich.table import Table

from rootarchive.cli.utils import console, get_config, open_session, print_json, wants_json
from rootarchive.kernel.config.models import RootArchiveConfig, join_path
from rootarchive.kernel.domain.node import NodeInfo
from rootarchive.kernel.exceptions import RootArchiveError, RootArchiveNotLoadedError


async def _alist(config: RootArchiveConfig, path: str) -> list[NodeInfo]:
    async with open_session(config) as session:
        profile = await session.profiles.aget(config.topology.profile_id)
        if not profile.address:
            raise RootArchiveNotLoadedError("list entries")
        archive = await session.engine.aload_archive(profile.address)
        names = await archive.areaddir(path)
        return [await archive.astat(join_path(path, name)) for name in names]


def ls(
    ctx: typer.Context,
    path: str = typer.Argument("/", help="Directory inside the root archive"),
) -> None:
    """List entries of the root archive with their kinds."""
    try:
        entries = asyncio.run(_alist(get_config(ctx), path))
    except RootArchiveError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    if wants_json(ctx):
        print_json([e.model_dump(mode="json", exclude_none=True) for e in entries])
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Path")
    table.add_column("Kind")
    table.add_column("Mounted key")
    for entry in entries:
        table.add_row(entry.path, str(entry.kind), entry.mount_key or "")
    console.print(table)
