"""Version reporting: the --version flag and the version command."""

from __future__ import annotations

from typing import Any

import typer

from projgen._version import get_version
from projgen.cli.common import cli_errors, prepare, version_manager
from projgen.cli.output import console, emit


def version_callback(value: bool) -> None:
    """Print the version and exit (eager --version flag)."""
    if value:
        typer.echo(f"projgen version {get_version()}")
        raise typer.Exit()


def _render_version(data: dict[str, Any]) -> None:
    console.print(f"projgen version {data['version']}")
    console.print("")
    console.print("Environment:")
    console.print(f"  Python:        {data['python_implementation']} {data['python_version']}")
    console.print(f"  Platform:      {data['platform']}")
    console.print(f"  Architecture:  {data['architecture']}")
    if "latest_version" in data:
        console.print("")
        latest = data["latest_version"]
        if latest is None:
            console.print("Latest version: unknown (check failed or offline)")
        elif data["update_available"]:
            console.print(f"[yellow]Update available: {latest}[/yellow]")
        else:
            console.print(f"[green]✓ Up to date ({latest})[/green]")


def version_command(
    ctx: typer.Context,
    short: bool = typer.Option(False, "--short", help="Print only the version number"),
    check_updates: bool = typer.Option(
        False, "--check-updates", help="Check PyPI for a newer release"
    ),
) -> None:
    """Show version and environment information."""
    with cli_errors():
        config = prepare(ctx, "version")
        manager = version_manager()
        info = manager.current()

        if short and not config.is_structured_output:
            typer.echo(info.version)
            return

        data: dict[str, Any] = info.to_dict()
        if check_updates:
            latest = manager.latest_version()
            data["latest_version"] = latest
            # A known latest version is cached, so this does not fetch again
            data["update_available"] = (
                latest is not None and manager.update_available() is not None
            )

        emit(config, data, _render_version)
