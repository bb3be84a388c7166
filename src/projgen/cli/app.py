"""
projgen CLI application.

Global options live on the root callback and are stored on the context as
RawFlags. Each command overlays its own flags and resolves them into a
ResolvedRunConfig before doing any work, so flag conflicts abort the run
before a single file is touched.
"""

from __future__ import annotations

import typer

from projgen.cli.cache import cache_app
from projgen.cli.config import config_app
from projgen.cli.project import audit_command, generate_command, validate_command
from projgen.cli.version import version_callback, version_command
from projgen.core.run_config import RawFlags

app = typer.Typer(
    help="""projgen – project generator

Commands:
  • generate: scaffold a new project (interactive, non-interactive or from a config file)
  • validate, audit: check a generated project
  • cache, config: manage local state
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print errors and data"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Debug output"),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level: debug, info, warn, error, fatal"
    ),
    log_json: bool = typer.Option(False, "--log-json", help="Emit logs as JSON lines"),
    log_caller: bool = typer.Option(False, "--log-caller", help="Include caller in logs"),
    non_interactive: bool = typer.Option(
        False, "--non-interactive", help="Never prompt for input"
    ),
    output_format: str | None = typer.Option(
        None, "--output-format", help="Output format: text, json, yaml"
    ),
) -> None:
    """projgen CLI main callback for global options."""
    ctx.obj = RawFlags(
        verbose=verbose,
        quiet=quiet,
        debug=debug,
        log_level=log_level,
        log_json=log_json,
        log_caller=log_caller,
        non_interactive=non_interactive,
        output_format=output_format,
    )


app.command(name="generate")(generate_command)
app.command(name="validate")(validate_command)
app.command(name="audit")(audit_command)
app.command(name="version")(version_command)

app.add_typer(cache_app, name="cache")
app.add_typer(config_app, name="config")


def main() -> None:
    app()
