"""Locations of projgen's local state (cache, saved configurations)."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

HOME_ENV_VAR = "PROJGEN_HOME"

# Project manifest written into every generated project
MANIFEST_FILENAME = ".projgen.yaml"


def projgen_home(env: Mapping[str, str] | None = None) -> Path:
    """State directory: $PROJGEN_HOME, or ~/.projgen when unset."""
    source = os.environ if env is None else env
    configured = source.get(HOME_ENV_VAR, "").strip()
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".projgen"


def cache_dir(env: Mapping[str, str] | None = None) -> Path:
    return projgen_home(env) / "cache"


def configs_dir(env: Mapping[str, str] | None = None) -> Path:
    return projgen_home(env) / "configs"
