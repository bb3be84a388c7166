"""
Saved configuration commands: list, show (alias view), delete, export, import.
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any

import typer
from rich.markup import escape
from rich.table import Table

from projgen.cli.common import cli_errors, config_store, confirm_action, prepare
from projgen.cli.output import console, emit, say

config_app = typer.Typer(
    help="Manage saved project configurations",
    no_args_is_help=True,
)


def _render_list(data: dict[str, Any]) -> None:
    configs = data["configs"]
    if not configs:
        console.print("No saved configurations.")
        return
    table = Table(title="Saved configurations")
    table.add_column("Name", style="cyan")
    table.add_column("Project")
    table.add_column("Components")
    table.add_column("Saved")
    for item in configs:
        table.add_row(
            escape(item["name"]),
            escape(item["project_name"] or ""),
            ", ".join(item["components"]) or "-",
            item["saved_at"] or "",
        )
    console.print(table)


@config_app.command(name="list")
def list_command(ctx: typer.Context) -> None:
    """List saved configurations."""
    with cli_errors():
        config = prepare(ctx, "config list")
        summaries = [asdict(summary) for summary in config_store().list()]
        for summary in summaries:
            summary["components"] = list(summary["components"])
        emit(config, {"configs": summaries}, _render_list)


@config_app.command(name="show")
def show_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Configuration name"),
) -> None:
    """Show a saved configuration."""
    with cli_errors():
        config = prepare(ctx, "config show")
        project = config_store().load(name)
        emit(config, project.model_dump(exclude_none=True))


config_app.command(name="view", hidden=True)(show_command)


@config_app.command(name="delete")
def delete_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Configuration name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a saved configuration."""
    with cli_errors():
        config = prepare(ctx, "config delete")
        store = config_store()
        store.load(name)
        confirm_action(config, f"Delete saved configuration '{name}'?", yes)
        store.delete(name)
        say(config, f"[green]✓ Deleted '{escape(name)}'[/green]")


@config_app.command(name="export")
def export_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Configuration name"),
    destination: Path = typer.Argument(..., help="File to write (YAML)"),
) -> None:
    """Export a saved configuration to a file."""
    with cli_errors():
        config = prepare(ctx, "config export")
        path = config_store().export(name, destination)
        say(config, f"[green]✓ Exported '{escape(name)}' to {escape(str(path))}[/green]")


@config_app.command(name="import")
def import_command(
    ctx: typer.Context,
    source: Path = typer.Argument(..., help="Configuration file (YAML or JSON)"),
    name: str | None = typer.Option(None, "--name", help="Name to save under (default: file name)"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing configuration"),
) -> None:
    """Import a configuration file into the saved configurations."""
    with cli_errors():
        config = prepare(ctx, "config import")
        saved = config_store().import_file(source, name=name, overwrite=force)
        say(config, f"[green]✓ Imported as '{escape(saved)}'[/green]")
