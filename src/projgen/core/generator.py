"""
Project generation.

Renders the built-in jinja2 templates for a ProjectConfig into an output
directory. The file plan is computed first so dry runs and real runs list
the same files.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError

from .._version import get_version
from .errors import GenerationError
from .paths import MANIFEST_FILENAME
from .project import ProjectConfig

logger = logging.getLogger(__name__)

# Files that may already exist in an output directory we still consider empty
ALLOWED_EXISTING = {".git", ".gitignore", "README.md", "LICENSE", ".DS_Store"}


_TEMPLATES: dict[str, str] = {
    "README.md": """# {{ config.name }}

{{ config.description or "A new project." }}
{% if config.components.selected() %}
## Components
{% for component in config.components.selected() %}
- [{{ component }}](./{{ component }}/)
{% endfor %}{% endif %}
## License

{{ config.license }}{% if config.organization %} © {{ year }} {{ config.organization }}{% endif %}
""",
    ".gitignore": """# Dependencies
node_modules/
.venv/
__pycache__/

# Build output
dist/
build/

# Environment
.env
.env.*
!.env.example

# Editors
.idea/
.vscode/
.DS_Store
""",
    "LICENSE": """{{ config.license }} License

Copyright (c) {{ year }} {{ config.organization or config.name }}

See https://spdx.org/licenses/{{ config.license }}.html for the full license text.
""",
    MANIFEST_FILENAME: """# Generated by projgen {{ version }}
name: {{ config.name }}
license: {{ config.license }}
generated_at: "{{ generated_at }}"
components:
{% for component, enabled in config.components.model_dump().items() %}  {{ component }}: {{ enabled | lower }}
{% endfor %}""",
    "frontend/README.md": """# {{ config.name }} frontend

Web client for {{ config.name }}.
""",
    "backend/README.md": """# {{ config.name }} backend

API service for {{ config.name }}.
""",
    "mobile/README.md": """# {{ config.name }} mobile

Mobile client for {{ config.name }}.
""",
    "infrastructure/docker-compose.yml": """services:
{% if config.components.backend %}  backend:
    build: ../backend
    ports:
      - "8080:8080"
{% endif %}{% if config.components.frontend %}  frontend:
    build: ../frontend
    ports:
      - "3000:3000"
{% endif %}""",
}

# Files generated even with --minimal
_ESSENTIAL = ("README.md", ".gitignore", "LICENSE", MANIFEST_FILENAME)


@dataclass
class GenerationResult:
    """Outcome of a generation run."""

    output_dir: Path
    files: list[str] = field(default_factory=list)
    dry_run: bool = False


def is_directory_empty(directory: Path) -> bool:
    """
    Check if directory is empty (or has only files we commonly allow).

    A directory counts as empty if it does not exist, has no entries, or only
    contains entries from ALLOWED_EXISTING (.git, .gitignore, README.md, ...).
    """
    if not directory.exists():
        return True
    return {item.name for item in directory.iterdir()}.issubset(ALLOWED_EXISTING)


class TemplateProjectGenerator:
    """Default ProjectGenerator rendering the built-in templates."""

    def __init__(self, templates: dict[str, str] | None = None):
        self.env = Environment(
            loader=DictLoader(templates or _TEMPLATES),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def plan(self, config: ProjectConfig, minimal: bool = False) -> list[str]:
        """Relative paths that generation would write, in write order."""
        files = list(_ESSENTIAL)
        if minimal:
            return files
        for component in config.components.selected():
            files.extend(
                name for name in self.env.list_templates() if name.startswith(f"{component}/")
            )
        return files

    def render(self, name: str, config: ProjectConfig) -> str:
        now = datetime.now(UTC)
        try:
            return self.env.get_template(name).render(
                config=config,
                year=now.year,
                generated_at=now.isoformat(timespec="seconds"),
                version=get_version(),
            )
        except TemplateError as e:
            raise GenerationError(f"Failed to render {name}: {e}") from e

    def generate(
        self,
        config: ProjectConfig,
        output_dir: Path,
        *,
        dry_run: bool = False,
        force: bool = False,
        minimal: bool = False,
    ) -> GenerationResult:
        """
        Generate the project into ``output_dir``.

        Raises:
            GenerationError: Output directory not empty (without force) or write failure
        """
        files = self.plan(config, minimal=minimal)
        result = GenerationResult(output_dir=output_dir, files=files, dry_run=dry_run)

        if not force and not is_directory_empty(output_dir):
            raise GenerationError(
                f"Output directory is not empty: {output_dir}. Use --force to overwrite"
            )

        if dry_run:
            logger.info("Dry run: %d files would be written to %s", len(files), output_dir)
            return result

        created = not output_dir.exists()
        try:
            for rel_path in files:
                target = output_dir / rel_path
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(self.render(rel_path, config), encoding="utf-8")
                logger.debug("Wrote %s", target)
        except (OSError, GenerationError) as e:
            # Only remove what we created ourselves
            if created and output_dir.exists():
                shutil.rmtree(output_dir, ignore_errors=True)
            if isinstance(e, GenerationError):
                raise
            raise GenerationError(f"Failed to write project files: {e}") from e

        logger.info("Generated %d files in %s", len(files), output_dir)
        return result
