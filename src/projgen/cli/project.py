"""
Project commands: generate, validate, audit.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import typer
from rich.markup import escape
from rich.table import Table

from projgen.cli.common import (
    cli_errors,
    config_store,
    prepare,
    project_generator,
    project_validator,
)
from projgen.cli.output import console, emit, say
from projgen.core.errors import ExitCode, ValidationError
from projgen.core.modes import GenerationMode
from projgen.core.project import LICENSES, Components, ProjectConfig, sanitize_name
from projgen.core.run_config import ResolvedRunConfig
from projgen.core.validator import ValidationReport

logger = logging.getLogger(__name__)


def _prompt_project(base: ProjectConfig | None) -> ProjectConfig:
    """Collect the project configuration interactively, seeded from ``base``."""
    default_name = base.name if base else sanitize_name(Path.cwd().name)
    name = sanitize_name(typer.prompt("Project name", default=default_name))
    organization = typer.prompt(
        "Organization", default=base.organization if base else "", show_default=False
    )
    description = typer.prompt(
        "Description", default=base.description if base else "", show_default=False
    )
    license_id = typer.prompt(
        f"License ({', '.join(LICENSES)})", default=base.license if base else "MIT"
    )

    current = base.components if base else Components()
    components = {
        component: typer.confirm(f"Include {component}?", default=getattr(current, component))
        for component in Components.model_fields
    }

    return ProjectConfig.from_data(
        {
            "name": name,
            "organization": organization,
            "description": description,
            "license": license_id,
            "output_path": base.output_path if base else None,
            "components": components,
        }
    )


def build_project_config(
    config: ResolvedRunConfig,
    config_file: Path | None,
    load_config: str | None,
) -> ProjectConfig:
    """
    Produce the ProjectConfig for the resolved generation mode.

    Raises:
        ValidationError: Missing or invalid configuration for the mode
        ConfigStoreError: --load-config names an unknown configuration
    """
    if config_file and load_config:
        raise ValidationError("Use either --config or --load-config, not both")

    base: ProjectConfig | None = None
    if load_config:
        base = config_store().load(load_config)
    elif config_file:
        base = ProjectConfig.from_file(config_file)

    if config.mode == GenerationMode.CONFIG:
        if base is None:
            raise ValidationError(
                "Config-file mode requires --config FILE or --load-config NAME"
            )
        return base

    if config.mode == GenerationMode.INTERACTIVE:
        return _prompt_project(base)

    return ProjectConfig.from_environment(
        base=base.model_dump(exclude_none=True) if base else None
    )


def _render_generation(data: dict[str, Any]) -> None:
    if data["dry_run"]:
        console.print(
            f"Dry run: would create {len(data['files'])} files in {escape(data['output_dir'])}"
        )
        for name in data["files"]:
            console.print(f"  {name}", markup=False)
    else:
        console.print(
            f"[green]✓ Generated project '{escape(data['project'])}' "
            f"in {escape(data['output_dir'])}[/green]"
        )


def generate_command(
    ctx: typer.Context,
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="Project configuration file (YAML or JSON)"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output directory (default: ./<name>)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be generated"),
    force: bool = typer.Option(False, "--force", help="Generate into a non-empty directory"),
    minimal: bool = typer.Option(False, "--minimal", help="Only generate essential files"),
    load_config: str | None = typer.Option(
        None, "--load-config", help="Use a saved configuration"
    ),
    save_config: str | None = typer.Option(
        None, "--save-config", help="Save the configuration under this name"
    ),
    interactive: bool = typer.Option(False, "--interactive", help="Prompt for configuration"),
    non_interactive: bool = typer.Option(
        False, "--non-interactive", help="Never prompt; read configuration from files/env"
    ),
    force_interactive: bool = typer.Option(
        False, "--force-interactive", help="Prompt even when automation is detected"
    ),
    force_non_interactive: bool = typer.Option(
        False, "--force-non-interactive", help="Never prompt, overriding other mode flags"
    ),
    mode: str | None = typer.Option(
        None, "--mode", help="Generation mode: interactive, non-interactive, config-file"
    ),
) -> None:
    """
    Generate a new project.

    Examples:
        projgen generate --interactive
        projgen generate --non-interactive --config project.yaml
        projgen generate --mode=config-file --load-config web-stack -o ./shop
    """
    with cli_errors():
        config = prepare(
            ctx,
            "generate",
            needs_mode=True,
            interactive=interactive,
            non_interactive=non_interactive,
            force_interactive=force_interactive,
            force_non_interactive=force_non_interactive,
            mode=mode,
        )
        logger.debug("Generation mode: %s", config.mode)

        project = build_project_config(config, config_file, load_config)
        output_dir = output or Path(project.output_path or project.name)

        result = project_generator().generate(
            project, output_dir, dry_run=dry_run, force=force, minimal=minimal
        )

        if save_config and not dry_run:
            config_store().save(save_config, project, overwrite=force)
            say(config, f"Saved configuration as '{escape(save_config)}'")

        data = {
            "project": project.name,
            "output_dir": str(result.output_dir),
            "mode": config.mode.value if config.mode else None,
            "dry_run": result.dry_run,
            "files": result.files,
        }
        if config.is_structured_output or not config.is_quiet:
            emit(config, data, _render_generation)


def _render_report(data: dict[str, Any]) -> None:
    issues = data["issues"]
    if not issues:
        console.print(f"[green]OK: {escape(data['path'])} is valid.[/green]")
        return

    table = Table(title=f"Issues in {escape(data['path'])}")
    table.add_column("Severity")
    table.add_column("Path")
    table.add_column("Message")
    for issue in issues:
        location = issue["path"] or ""
        if issue["line"]:
            location = f"{location}:{issue['line']}"
        table.add_row(issue["severity"], escape(location), escape(issue["message"]))
    console.print(table)


def _emit_report(config: ResolvedRunConfig, report: ValidationReport, ok: bool) -> None:
    data = report.to_dict()
    data["valid"] = ok
    if config.is_quiet and not config.is_structured_output:
        return
    emit(config, data, _render_report)


def validate_command(
    ctx: typer.Context,
    path: Path = typer.Argument(Path("."), help="Project directory"),
    strict: bool = typer.Option(False, "--strict", help="Treat warnings as errors"),
) -> None:
    """Validate the structure of a generated project."""
    with cli_errors():
        config = prepare(ctx, "validate")
        report = project_validator().validate(path)
        ok = report.is_valid(strict=strict)
        _emit_report(config, report, ok)

    if not ok:
        raise typer.Exit(code=int(ExitCode.CONFIG_ERROR))


def audit_command(
    ctx: typer.Context,
    path: Path = typer.Argument(Path("."), help="Project directory"),
    fail_on_high: bool = typer.Option(
        False, "--fail-on-high", help="Exit non-zero if high-severity issues are found"
    ),
) -> None:
    """Audit a project for committed secrets and oversized files."""
    with cli_errors():
        config = prepare(ctx, "audit")
        report = project_validator().audit(path)
        _emit_report(config, report, not report.has_high())

    if fail_on_high and report.has_high():
        raise typer.Exit(code=int(ExitCode.CONFIG_ERROR))
