"""
Interfaces of the components commands delegate their real work to.

Commands receive a ResolvedRunConfig and talk to these collaborators; the
default implementations live in the sibling modules and are wired up by
``projgen.cli.common``.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .cache import CacheStats
    from .config_store import SavedConfigSummary
    from .generator import GenerationResult
    from .project import ProjectConfig
    from .validator import ValidationReport
    from .versioning import VersionInfo


class CacheManager(Protocol):
    def put(self, key: str, data: Any, ttl: int = ...) -> None: ...

    def get(self, key: str, allow_expired: bool = False) -> Any | None: ...

    def stats(self) -> CacheStats: ...

    def clear(self) -> int: ...

    def clean(self) -> int: ...

    def validate(self) -> list[str]: ...

    def repair(self) -> int: ...

    def is_offline(self) -> bool: ...

    def set_offline(self, enabled: bool) -> None: ...


class ConfigStore(Protocol):
    def list(self) -> list[SavedConfigSummary]: ...

    def exists(self, name: str) -> bool: ...

    def load(self, name: str) -> ProjectConfig: ...

    def save(self, name: str, config: ProjectConfig, overwrite: bool = False) -> Path: ...

    def delete(self, name: str) -> None: ...

    def export(self, name: str, destination: Path) -> Path: ...

    def import_file(self, source: Path, name: str | None = None, overwrite: bool = False) -> str: ...


class VersionManager(Protocol):
    def current(self) -> VersionInfo: ...

    def latest_version(self) -> str | None: ...

    def update_available(self) -> str | None: ...


class ProjectGenerator(Protocol):
    def plan(self, config: ProjectConfig, minimal: bool = False) -> list[str]: ...

    def generate(
        self,
        config: ProjectConfig,
        output_dir: Path,
        *,
        dry_run: bool = False,
        force: bool = False,
        minimal: bool = False,
    ) -> GenerationResult: ...


class ProjectValidator(Protocol):
    def validate(self, root: Path) -> ValidationReport: ...

    def audit(self, root: Path) -> ValidationReport: ...
