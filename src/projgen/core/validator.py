"""
Validation and security audit of generated projects.

``validate_project`` checks structure (required files, readable manifest).
``audit_project`` adds a content scan for committed secrets and oversized
files. Both return a ValidationReport; nothing here raises for findings.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

import yaml

from .errors import ValidationError
from .paths import MANIFEST_FILENAME

logger = logging.getLogger(__name__)

REQUIRED_FILES = ("README.md", ".gitignore", "LICENSE")

MAX_FILE_SIZE = 5 * 1024 * 1024

# Directories never scanned
SKIP_DIRS = {".git", "node_modules", ".venv", "venv", "__pycache__", "dist", "build"}

SECRET_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("AWS access key", re.compile(r"AKIA[0-9A-Z]{16}")),
    ("Private key", re.compile(r"-----BEGIN (?:RSA |EC |OPENSSH |DSA )?PRIVATE KEY-----")),
    ("GitHub token", re.compile(r"gh[pousr]_[A-Za-z0-9]{36,}")),
    ("Slack token", re.compile(r"xox[baprs]-[A-Za-z0-9-]{10,}")),
    (
        "Hardcoded secret",
        re.compile(r"""(?i)(?:password|secret|api[_-]?key|token)\s*[:=]\s*["'][^"'\s]{8,}["']"""),
    ),
)


class IssueSeverity(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Issue:
    """A single finding."""

    severity: IssueSeverity
    message: str
    path: str | None = None
    line: int | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "line": self.line,
        }


@dataclass
class ValidationReport:
    """Findings for one project directory."""

    path: Path
    issues: list[Issue] = field(default_factory=list)
    files_scanned: int = 0

    @property
    def errors(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == IssueSeverity.HIGH]

    @property
    def warnings(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity != IssueSeverity.HIGH]

    def is_valid(self, strict: bool = False) -> bool:
        """No high-severity issues (no issues at all with ``strict``)."""
        return not (self.issues if strict else self.errors)

    def has_high(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "files_scanned": self.files_scanned,
            "issues": [issue.to_dict() for issue in self.issues],
        }


def _check_manifest(root: Path) -> list[Issue]:
    manifest = root / MANIFEST_FILENAME
    if not manifest.exists():
        return [Issue(IssueSeverity.MEDIUM, "Missing projgen manifest", MANIFEST_FILENAME)]
    try:
        data = yaml.safe_load(manifest.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        return [Issue(IssueSeverity.HIGH, f"Manifest is not readable: {e}", MANIFEST_FILENAME)]
    if not isinstance(data, dict) or not data.get("name"):
        return [Issue(IssueSeverity.HIGH, "Manifest has no project name", MANIFEST_FILENAME)]
    return []


def _iter_files(root: Path):
    for path in sorted(root.rglob("*")):
        if any(part in SKIP_DIRS for part in path.relative_to(root).parts):
            continue
        if path.is_file():
            yield path


def validate_project(root: Path) -> ValidationReport:
    """
    Check that ``root`` looks like a generated project.

    Raises:
        ValidationError: ``root`` is not a directory
    """
    if not root.is_dir():
        raise ValidationError(f"Not a directory: {root}")

    report = ValidationReport(path=root)
    for name in REQUIRED_FILES:
        if not (root / name).exists():
            severity = IssueSeverity.HIGH if name == "README.md" else IssueSeverity.MEDIUM
            report.issues.append(Issue(severity, f"Missing {name}", name))
    report.issues.extend(_check_manifest(root))

    logger.debug("Validated %s: %d issues", root, len(report.issues))
    return report


def audit_project(root: Path) -> ValidationReport:
    """Validate ``root`` and scan its files for secrets and oversized content."""
    report = validate_project(root)

    for path in _iter_files(root):
        rel = str(path.relative_to(root))
        report.files_scanned += 1

        size = path.stat().st_size
        if size > MAX_FILE_SIZE:
            report.issues.append(
                Issue(IssueSeverity.LOW, f"Large file ({size // 1024} KiB) in repository", rel)
            )
            continue

        try:
            text = path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError):
            continue  # binary

        for lineno, line in enumerate(text.splitlines(), start=1):
            for label, pattern in SECRET_PATTERNS:
                if pattern.search(line):
                    report.issues.append(
                        Issue(IssueSeverity.HIGH, f"Possible {label} committed", rel, lineno)
                    )

        if path.name == ".env":
            report.issues.append(Issue(IssueSeverity.MEDIUM, "Environment file committed", rel))

    logger.debug("Audited %d files in %s", report.files_scanned, root)
    return report


class DirectoryValidator:
    """Default ProjectValidator."""

    def validate(self, root: Path) -> ValidationReport:
        return validate_project(root)

    def audit(self, root: Path) -> ValidationReport:
        return audit_project(root)
