"""
Project configuration for generation.

Holds what the generator needs to know about a new project, and the helpers
to build it from a YAML/JSON file or from PROJGEN_* environment variables.
"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .environment import parse_bool_env
from .errors import ValidationError

LICENSES = ("MIT", "Apache-2.0", "GPL-3.0", "BSD-3-Clause")

# Names that make poor project directories / package names
RESERVED_NAMES = {
    # Python keywords
    "import",
    "from",
    "def",
    "class",
    "return",
    "lambda",
    "global",
    "pass",
    # Common problematic names
    "true",
    "false",
    "null",
    "none",
    "test",
    "tests",
    "src",
    "build",
    "dist",
    "node_modules",
}


def validate_project_name(name: str) -> tuple[bool, str | None]:
    """
    Validate a project name.

    Args:
        name: Project name to validate

    Returns:
        (is_valid, error_message)

    Examples:
        validate_project_name("tests")   # -> (False, "...")
        validate_project_name("my-app")  # -> (True, None)
    """
    if not name:
        return (False, "Project name cannot be empty")

    if name[0].isdigit():
        return (
            False,
            f"Project name '{name}' cannot start with a digit. Try 'project-{name}' or '{name}-app'",
        )

    if name.lower() in RESERVED_NAMES:
        return (
            False,
            f"Project name '{name}' is a reserved name. Try '{name}-app' or 'my-{name}' instead",
        )

    if not re.match(r"^[a-zA-Z][a-zA-Z0-9_-]*$", name):
        return (
            False,
            f"Project name '{name}' must contain only letters, numbers, hyphens and underscores",
        )

    return (True, None)


def sanitize_name(name: str) -> str:
    """
    Convert a free-form name into a project name.

    Examples:
        "My Project" -> "my-project"
        "my_app"     -> "my_app"
        "42 things"  -> "project-42-things"
    """
    name = name.strip().lower()
    name = re.sub(r"[^a-z0-9_-]", "-", name)
    name = re.sub(r"-+", "-", name).strip("-_")

    if name and name[0].isdigit():
        name = f"project-{name}"

    return name or "my-project"


class Components(BaseModel):
    """Which parts of the project to scaffold."""

    frontend: bool = False
    backend: bool = False
    mobile: bool = False
    infrastructure: bool = False

    model_config = ConfigDict(frozen=True)

    def selected(self) -> list[str]:
        return [name for name, enabled in self.model_dump().items() if enabled]


class ProjectConfig(BaseModel):
    """
    Configuration of a project to generate.

    Attributes:
        name: Project name (directory and package name)
        organization: Owning organization, used in README and LICENSE
        description: One-line description
        license: SPDX identifier (MIT, Apache-2.0, GPL-3.0, BSD-3-Clause)
        output_path: Directory to generate into (defaults to ./<name>)
        components: Selected components
    """

    name: str
    organization: str = ""
    description: str = ""
    license: str = "MIT"
    output_path: str | None = None
    components: Components = Field(default_factory=Components)

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        is_valid, error = validate_project_name(value)
        if not is_valid:
            raise ValueError(error)
        return value

    @field_validator("license")
    @classmethod
    def _check_license(cls, value: str) -> str:
        if value not in LICENSES:
            raise ValueError(f"License must be one of: {', '.join(LICENSES)}")
        return value

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> ProjectConfig:
        """Build from a mapping, converting pydantic errors into ValidationError."""
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise ValidationError(f"Invalid project configuration: {problems}") from e

    @classmethod
    def from_file(cls, path: Path) -> ProjectConfig:
        """Load a YAML (.yaml/.yml) or JSON (.json) project configuration file."""
        return cls.from_data(load_config_data(path))

    @classmethod
    def from_environment(
        cls, env: Mapping[str, str] | None = None, base: Mapping[str, Any] | None = None
    ) -> ProjectConfig:
        """
        Build from PROJGEN_PROJECT_* / PROJGEN_<COMPONENT> variables.

        Values present in the environment override ``base``.
        """
        source = os.environ if env is None else env
        data: dict[str, Any] = dict(base or {})

        for field_name in ("name", "organization", "description", "license", "output_path"):
            value = source.get(f"PROJGEN_PROJECT_{field_name.upper()}")
            if value:
                data[field_name] = value

        components = dict(data.get("components") or {})
        for component in Components.model_fields:
            key = f"PROJGEN_{component.upper()}"
            if key in source:
                components[component] = parse_bool_env(key, False, env=source)
        data["components"] = components

        if not data.get("name"):
            raise ValidationError(
                "Project name is required in non-interactive mode. "
                "Pass --config FILE, --load-config NAME or set PROJGEN_PROJECT_NAME"
            )
        return cls.from_data(data)


def load_config_data(path: Path) -> dict[str, Any]:
    """Read a YAML or JSON mapping from ``path``."""
    if not path.exists():
        raise ValidationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(f"Cannot parse configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"Configuration file {path} must contain a mapping")
    return data
