"""rootarchive CLI - Main entrypoint."""

from __future__ import annotations

from pathlib import Path
from typing import get_args

import typer
from rich.console import Console

from rootarchive.cli.commands import library_cmd, ls_cmd, setup_cmd, users_cmd
from rootarchive.kernel.config.loader import load_config
from rootarchive.kernel.exceptions import RootArchiveError
from rootarchive.kernel.logging import LogLevel, configure_logging

app = typer.Typer(
    name="rootarchive",
    help="rootarchive - Keep a root archive's directories and mounts converged.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()

app.command("setup", help="Create the root archive if needed and converge its layout")(
    setup_cmd.setup
)
app.command("ls", help="List entries of the root archive")(ls_cmd.ls)
app.add_typer(users_cmd.app, name="users", help="Manage the users mounted under /owners")
app.add_typer(library_cmd.app, name="library", help="Manage library entries")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a YAML or TOML configuration file"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level: trace|debug|info|warning|error|critical"
    ),
    json_out: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
) -> None:
    """rootarchive CLI.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if ctx.obj is None:
        ctx.obj = {}

    try:
        config = load_config(config_path)
    except (FileNotFoundError, RootArchiveError) as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(2) from e

    level = (log_level or config.logging.level).upper()
    if level not in get_args(LogLevel):
        raise typer.BadParameter(f"unknown log level {log_level!r}", param_hint="--log-level")

    # Rebind sinks to the current stderr on every invocation
    configure_logging(
        level=level,  # type: ignore[arg-type]
        format=config.logging.format,
        output_file=config.logging.output_file,
        use_color=config.logging.use_color,
        include_timestamp=config.logging.include_timestamp,
        enable_stdlib_bridge=config.logging.enable_stdlib_bridge,
        force_reconfigure=True,
    )

    ctx.obj.update({
        "config": config,
        "output_format": "json" if json_out else "pretty",
        "log_level": level,
    })


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
