"""
Cache management commands.

- show:    Location, entry counts and offline state
- clear:   Remove every entry
- clean:   Remove expired entries
- validate: Report corrupt entries
- repair:  Remove corrupt entries
- offline: Enable, disable or report offline mode
"""

from __future__ import annotations

from dataclasses import asdict
from enum import StrEnum
from typing import Any

import typer
from rich.markup import escape
from rich.table import Table

from projgen.cli.common import cache_manager, cli_errors, confirm_action, prepare
from projgen.cli.output import console, emit, say
from projgen.core.errors import ExitCode

cache_app = typer.Typer(
    help="Manage the local cache",
    no_args_is_help=True,
)


class OfflineState(StrEnum):
    ENABLE = "enable"
    DISABLE = "disable"
    STATUS = "status"


def _render_stats(data: dict[str, Any]) -> None:
    table = Table(title="Cache", show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Location", escape(data["location"]))
    table.add_row("Entries", str(data["entries"]))
    table.add_row("Expired", str(data["expired"]))
    table.add_row("Corrupt", str(data["corrupt"]))
    table.add_row("Size", f"{data['size_bytes']} bytes")
    table.add_row("Offline", "yes" if data["offline"] else "no")
    console.print(table)


@cache_app.command(name="show")
def show_command(ctx: typer.Context) -> None:
    """Show cache location and statistics."""
    with cli_errors():
        config = prepare(ctx, "cache show")
        emit(config, asdict(cache_manager().stats()), _render_stats)


@cache_app.command(name="clear")
def clear_command(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Remove every cache entry."""
    with cli_errors():
        config = prepare(ctx, "cache clear")
        confirm_action(config, "Remove all cache entries?", yes)
        removed = cache_manager().clear()
        say(config, f"[green]✓ Removed {removed} cache entries[/green]")


@cache_app.command(name="clean")
def clean_command(ctx: typer.Context) -> None:
    """Remove expired cache entries."""
    with cli_errors():
        config = prepare(ctx, "cache clean")
        removed = cache_manager().clean()
        say(config, f"[green]✓ Removed {removed} expired entries[/green]")


@cache_app.command(name="validate")
def validate_command(ctx: typer.Context) -> None:
    """Check cache entries for corruption."""
    with cli_errors():
        config = prepare(ctx, "cache validate")
        corrupt = cache_manager().validate()
        if config.is_structured_output:
            emit(config, {"valid": not corrupt, "corrupt": corrupt})
        elif corrupt:
            console.print(f"[yellow]{len(corrupt)} corrupt cache entries:[/yellow]")
            for name in corrupt:
                console.print(f"  {name}", markup=False)
            console.print("Run 'projgen cache repair' to remove them.")
        else:
            say(config, "[green]OK: cache is valid.[/green]")

    if corrupt:
        raise typer.Exit(code=int(ExitCode.FILESYSTEM_ERROR))


@cache_app.command(name="repair")
def repair_command(ctx: typer.Context) -> None:
    """Remove corrupt cache entries."""
    with cli_errors():
        config = prepare(ctx, "cache repair")
        removed = cache_manager().repair()
        say(config, f"[green]✓ Removed {removed} corrupt entries[/green]")


@cache_app.command(name="offline")
def offline_command(
    ctx: typer.Context,
    state: OfflineState = typer.Argument(..., help="enable, disable or status"),
) -> None:
    """Enable, disable or report offline mode (serve cached data only)."""
    with cli_errors():
        config = prepare(ctx, "cache offline")
        manager = cache_manager()
        if state == OfflineState.STATUS:
            enabled = manager.is_offline()
            if config.is_structured_output:
                emit(config, {"offline": enabled})
            else:
                console.print(f"Offline mode: {'enabled' if enabled else 'disabled'}")
            return

        enabled = state == OfflineState.ENABLE
        manager.set_offline(enabled)
        say(config, f"Offline mode {'enabled' if enabled else 'disabled'}")
