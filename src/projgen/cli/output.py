"""
Command output.

Data-returning commands hand a plain dict to ``emit``; it is rendered as
JSON, YAML or (by the command's own renderer) rich text depending on
--output-format. Chatter goes through ``say`` and is dropped in quiet or
structured runs.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import typer
import yaml
from rich.console import Console

from projgen.core.run_config import ResolvedRunConfig

console = Console(highlight=False, soft_wrap=True)


def emit(
    config: ResolvedRunConfig,
    data: dict[str, Any],
    render_text: Callable[[dict[str, Any]], None] | None = None,
) -> None:
    if config.output_format == "json":
        typer.echo(json.dumps(data, indent=2, default=str))
    elif config.output_format == "yaml":
        typer.echo(yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip())
    elif render_text is not None:
        render_text(data)
    else:
        for key, value in data.items():
            console.print(f"{key}: {value}", markup=False)


def say(config: ResolvedRunConfig, message: str) -> None:
    """Print a status line (rich markup allowed) unless quiet or structured."""
    if config.is_quiet or config.is_structured_output:
        return
    console.print(message)
