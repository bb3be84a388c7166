"""Shared CLI helpers: run configuration, error reporting, confirmations."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager

import typer

from projgen.core.cache import LocalCacheManager
from projgen.core.collaborators import (
    CacheManager,
    ConfigStore,
    ProjectGenerator,
    ProjectValidator,
    VersionManager,
)
from projgen.core.config_store import SavedConfigStore
from projgen.core.errors import (
    ConfigurationUnavailable,
    ProjgenError,
    UserCancelled,
    ValidationError,
)
from projgen.core.generator import TemplateProjectGenerator
from projgen.core.paths import cache_dir, configs_dir
from projgen.core.run_config import RawFlags, ResolvedRunConfig, resolve_run_config
from projgen.core.validator import DirectoryValidator
from projgen.core.versioning import PyPIVersionManager


def get_flags(ctx: typer.Context) -> RawFlags:
    """Global flags stored by the root callback.

    Raises:
        ConfigurationUnavailable: The command was invoked without the root app
    """
    flags = ctx.obj
    if not isinstance(flags, RawFlags):
        raise ConfigurationUnavailable(
            "Run configuration is not initialized. Invoke commands through the projgen CLI"
        )
    return flags


def prepare(
    ctx: typer.Context,
    command: str,
    *,
    needs_mode: bool = False,
    **local: bool | str | None,
) -> ResolvedRunConfig:
    """Resolve the run configuration for ``command``, overlaying its local flags."""
    flags = get_flags(ctx).with_local(**local)
    config = resolve_run_config(flags, command, tuple(sys.argv[1:]), needs_mode=needs_mode)
    # Shown regardless of --quiet, which is what triggers the only warning rule
    for warning in config.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    return config


@contextmanager
def cli_errors() -> Iterator[None]:
    """Report ProjgenError on stderr and exit with its exit code."""
    try:
        yield
    except ProjgenError as e:
        label = "Initialization error" if isinstance(e, ConfigurationUnavailable) else "Error"
        typer.echo(f"{label}: {e}", err=True)
        raise typer.Exit(code=int(e.exit_code))


def confirm_action(config: ResolvedRunConfig, message: str, yes: bool = False) -> None:
    """
    Ask before a destructive action.

    Raises:
        ValidationError: Non-interactive run without --yes
        UserCancelled: The prompt was declined
    """
    if yes:
        return
    if config.non_interactive:
        raise ValidationError(
            f"{message} Confirmation is required: pass --yes in non-interactive mode"
        )
    if not typer.confirm(message, default=False):
        raise UserCancelled("Cancelled")


def cache_manager() -> CacheManager:
    return LocalCacheManager(cache_dir())


def config_store() -> ConfigStore:
    return SavedConfigStore(configs_dir())


def project_generator() -> ProjectGenerator:
    return TemplateProjectGenerator()


def project_validator() -> ProjectValidator:
    return DirectoryValidator()


def version_manager() -> VersionManager:
    return PyPIVersionManager(cache_manager())
