"""
Saved project configurations.

Named configurations are stored one per YAML file under the configs
directory:

    name: web-stack
    saved_at: "2026-10-19T12:00:00+00:00"
    config:
      name: shop
      license: MIT
      components: {frontend: true, backend: true}
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigStoreError, ValidationError
from .project import ProjectConfig, load_config_data

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


@dataclass(frozen=True)
class SavedConfigSummary:
    """One entry of ``config list``."""

    name: str
    saved_at: str | None
    project_name: str | None
    components: tuple[str, ...]


def _check_name(name: str) -> str:
    if not _NAME_PATTERN.match(name):
        raise ConfigStoreError(
            f"Invalid configuration name '{name}'. Use letters, numbers, '.', '-' and '_'"
        )
    return name


class SavedConfigStore:
    """YAML-file backed ConfigStore."""

    def __init__(self, root: Path):
        self.root = root

    def _path(self, name: str) -> Path:
        return self.root / f"{_check_name(name)}.yaml"

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigStoreError(f"Cannot read saved configuration {path.name}: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("config"), dict):
            raise ConfigStoreError(f"Saved configuration {path.name} is malformed")
        return data

    def exists(self, name: str) -> bool:
        return self._path(name).exists()

    def list(self) -> list[SavedConfigSummary]:
        if not self.root.exists():
            return []
        summaries = []
        for path in sorted(self.root.glob("*.yaml")):
            try:
                data = self._read(path)
            except ConfigStoreError as e:
                logger.warning("Skipping %s", e)
                continue
            config = data["config"]
            components = config.get("components") or {}
            summaries.append(
                SavedConfigSummary(
                    name=path.stem,
                    saved_at=data.get("saved_at"),
                    project_name=config.get("name"),
                    components=tuple(sorted(key for key, on in components.items() if on)),
                )
            )
        return summaries

    def load(self, name: str) -> ProjectConfig:
        path = self._path(name)
        if not path.exists():
            raise ConfigStoreError(f"Saved configuration '{name}' not found")
        try:
            return ProjectConfig.from_data(self._read(path)["config"])
        except ValidationError as e:
            raise ConfigStoreError(f"Saved configuration '{name}' is invalid: {e}") from e

    def save(self, name: str, config: ProjectConfig, overwrite: bool = False) -> Path:
        path = self._path(name)
        if path.exists() and not overwrite:
            raise ConfigStoreError(f"Saved configuration '{name}' already exists")
        document = {
            "name": name,
            "saved_at": datetime.now(UTC).isoformat(timespec="seconds"),
            "config": config.model_dump(exclude_none=True),
        }
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")
        except OSError as e:
            raise ConfigStoreError(f"Failed to save configuration '{name}': {e}") from e
        logger.info("Saved configuration '%s' to %s", name, path)
        return path

    def delete(self, name: str) -> None:
        path = self._path(name)
        if not path.exists():
            raise ConfigStoreError(f"Saved configuration '{name}' not found")
        path.unlink()
        logger.info("Deleted configuration '%s'", name)

    def export(self, name: str, destination: Path) -> Path:
        """Write the project configuration (without store metadata) to ``destination``."""
        config = self.load(name)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(
                yaml.safe_dump(config.model_dump(exclude_none=True), sort_keys=False),
                encoding="utf-8",
            )
        except OSError as e:
            raise ConfigStoreError(f"Failed to export '{name}': {e}") from e
        return destination

    def import_file(self, source: Path, name: str | None = None, overwrite: bool = False) -> str:
        """Import a YAML/JSON project configuration; the name defaults to the file stem."""
        config = ProjectConfig.from_data(load_config_data(source))
        target = name or source.stem
        self.save(target, config, overwrite=overwrite)
        return target
