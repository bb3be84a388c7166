"""
Error types for projgen flag resolution, generation and collaborators.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .conflicts import ConflictRule


class ExitCode(IntEnum):
    """Process exit codes used by the CLI."""

    SUCCESS = 0
    CONFIG_ERROR = 1
    TOOLS_MISSING = 2
    GENERATION_FAILED = 3
    FILESYSTEM_ERROR = 4
    USER_CANCELLED = 5


class ProjgenError(Exception):
    """Base exception for all projgen errors."""

    exit_code: ExitCode = ExitCode.CONFIG_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConflictError(ProjgenError):
    """
    Raised when mutually-exclusive flags are active at the same time.

    Carries every triggered rule so the user sees all conflicts at once.
    """

    def __init__(self, rules: Sequence[ConflictRule]):
        from .conflicts import format_conflict_report

        self.rules = tuple(rules)
        super().__init__(format_conflict_report(self.rules))


class ValidationError(ProjgenError):
    """
    Raised when a value is well-formed but not acceptable.

    Examples:
    - Unknown log level or output format
    - Unrecognized --mode value
    - Project configuration missing a name
    """

    def __init__(self, message: str, value: str | None = None, accepted: Iterable[str] = ()):
        self.value = value
        self.accepted = tuple(accepted)
        super().__init__(message)


class ConfigurationUnavailable(ProjgenError):
    """Raised when the run configuration or logger was never initialized."""

    pass


class GenerationError(ProjgenError):
    """
    Raised when a project cannot be generated.

    Examples:
    - Output directory not empty and --force not given
    - Template rendering errors
    - Files cannot be written
    """

    exit_code = ExitCode.GENERATION_FAILED


class CacheError(ProjgenError):
    """Raised when the local cache cannot be read or written."""

    exit_code = ExitCode.FILESYSTEM_ERROR


class ConfigStoreError(ProjgenError):
    """Raised when a saved configuration is missing, duplicated or unreadable."""

    pass


class UserCancelled(ProjgenError):
    """Raised when the user declines a confirmation prompt."""

    exit_code = ExitCode.USER_CANCELLED


def invalid_choice(kind: str, value: str, accepted: Sequence[str]) -> ValidationError:
    """
    Helper to create a ValidationError for a value outside an accepted set.

    Args:
        kind: What was being validated (e.g. "log level")
        value: The rejected value
        accepted: Values that would have been accepted

    Returns:
        ValidationError naming the value and listing the accepted set
    """
    return ValidationError(
        f"'{value}' isn't a valid {kind}. Available options: {', '.join(accepted)}",
        value=value,
        accepted=accepted,
    )
