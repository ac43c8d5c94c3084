"""CLI helper utilities for rootarchive commands."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Protocol

import typer
from rich.console import Console
from rich.table import Table

from rootarchive.drivers.archive.local import LocalArchiveEngine
from rootarchive.drivers.profile.sqlite import SQLiteProfileStore
from rootarchive.drivers.users.yaml_file import YamlUserDirectory
from rootarchive.kernel.config.models import RootArchiveConfig
from rootarchive.kernel.domain.outcome import OutcomeStatus, ReconciliationReport
from rootarchive.kernel.topology.reconciler import TopologyReconciler


class ContextProtocol(Protocol):
    """Protocol for common interface between Click and Typer contexts."""

    @property
    def obj(self) -> dict[str, Any] | None: ...


console = Console()

_STATUS_STYLES = {
    OutcomeStatus.CREATED: "green",
    OutcomeStatus.MOUNTED: "green",
    OutcomeStatus.REASSIGNED: "cyan",
    OutcomeStatus.UNMOUNTED: "magenta",
    OutcomeStatus.UNCHANGED: "dim",
    OutcomeStatus.CONFLICT: "yellow",
    OutcomeStatus.FAILED: "bold red",
}


@dataclass(slots=True)
class LocalSession:
    """Local drivers wired to a reconciler for one CLI invocation."""

    engine: LocalArchiveEngine
    profiles: SQLiteProfileStore
    users: YamlUserDirectory
    reconciler: TopologyReconciler


def get_config(ctx: ContextProtocol) -> RootArchiveConfig:
    obj = ctx.obj or {}
    config = obj.get("config")
    return config if isinstance(config, RootArchiveConfig) else RootArchiveConfig()


def wants_json(ctx: ContextProtocol) -> bool:
    obj = ctx.obj or {}
    return obj.get("output_format") == "json"


@asynccontextmanager
async def open_session(config: RootArchiveConfig) -> AsyncIterator[LocalSession]:
    """Build the local drivers from ``config`` and close them afterwards."""
    storage = config.storage
    engine = LocalArchiveEngine(storage.resolved_base_dir)
    profiles = SQLiteProfileStore(storage.resolved_profile_db)
    users = YamlUserDirectory(storage.resolved_users_file)
    reconciler = TopologyReconciler(engine, profiles, users, config=config.topology)
    try:
        yield LocalSession(engine=engine, profiles=profiles, users=users, reconciler=reconciler)
    finally:
        await profiles.close()


def report_to_dict(report: ReconciliationReport) -> dict[str, Any]:
    return {
        "converged": report.converged,
        "counts": {str(status): n for status, n in report.counts().items()},
        "outcomes": [o.model_dump(mode="json", exclude_none=True) for o in report.outcomes],
    }


def print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, default=str, indent=2))


def print_report(report: ReconciliationReport, ctx: ContextProtocol) -> None:
    """Print a report as JSON or as a Rich table, following ``--json``."""
    if wants_json(ctx):
        print_json(report_to_dict(report))
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Operation")
    table.add_column("Path")
    table.add_column("Status")
    table.add_column("Detail")
    for outcome in report.outcomes:
        style = _STATUS_STYLES.get(outcome.status, "")
        detail = outcome.reason or outcome.address or ""
        table.add_row(
            outcome.operation,
            outcome.path,
            f"[{style}]{outcome.status}[/{style}]" if style else str(outcome.status),
            detail,
        )
    console.print(table)

    if report.converged:
        console.print("[green]Root archive converged[/green]")
    else:
        console.print(
            f"[yellow]{len(report.conflicts)} conflict(s), "
            f"{len(report.failures)} failure(s)[/yellow]"
        )


def exit_on_failures(report: ReconciliationReport) -> None:
    """Exit with code 1 when a step failed. Conflicts alone do not fail."""
    if report.failures:
        raise typer.Exit(1)


__all__ = [
    "ContextProtocol",
    "LocalSession",
    "console",
    "exit_on_failures",
    "get_config",
    "open_session",
    "print_json",
    "print_report",
    "report_to_dict",
    "wants_json",
]
