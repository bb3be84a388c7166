"""
Generation mode resolution.

Combines the mode flags of a generation command with auto-detection into a
single GenerationMode. Precedence, each step short-circuiting:

    1. Conflict detection over the mode signals (fatal, except the
       recoverable two-signal force-flag case)
    2. --mode=<value>
    3. --force-non-interactive / --non-interactive
    4. --force-interactive / --interactive
    5. Auto-detection (env var, CI, TTY)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from .conflicts import CONFLICT_RULES, detect_conflicts
from .environment import NonInteractiveDetector
from .errors import ConflictError, ValidationError
from .flags import FlagState

logger = logging.getLogger(__name__)


class GenerationMode(StrEnum):
    """How the generation workflow collects project configuration."""

    AUTO = "auto"
    INTERACTIVE = "interactive"
    NON_INTERACTIVE = "non-interactive"
    CONFIG = "config"


# Canonical mode names shown to users
ACCEPTED_MODES = ("interactive", "non-interactive", "config-file")

MODE_ALIASES: dict[str, GenerationMode] = {
    "interactive": GenerationMode.INTERACTIVE,
    "i": GenerationMode.INTERACTIVE,
    "non-interactive": GenerationMode.NON_INTERACTIVE,
    "noninteractive": GenerationMode.NON_INTERACTIVE,
    "ni": GenerationMode.NON_INTERACTIVE,
    "auto": GenerationMode.NON_INTERACTIVE,
    "config-file": GenerationMode.CONFIG,
    "config": GenerationMode.CONFIG,
    "file": GenerationMode.CONFIG,
    "cf": GenerationMode.CONFIG,
}


def parse_mode(value: str) -> GenerationMode:
    """
    Normalize an explicit --mode value.

    Raises:
        ValidationError: If the value is not a known mode or alias
    """
    mode = MODE_ALIASES.get(value.strip().lower())
    if mode is None:
        raise ValidationError(
            f"'{value}' is not a valid mode. Available modes: {', '.join(ACCEPTED_MODES)}"
            " (example: --mode=interactive)",
            value=value,
            accepted=ACCEPTED_MODES,
        )
    return mode


@dataclass(frozen=True)
class ModeFlags:
    """The five mode-determining signals of a generation command."""

    non_interactive: bool = False
    interactive: bool = False
    force_interactive: bool = False
    force_non_interactive: bool = False
    mode: str | None = None

    @property
    def active_count(self) -> int:
        return sum(
            [
                self.non_interactive,
                self.interactive,
                self.force_interactive,
                self.force_non_interactive,
                bool(self.mode),
            ]
        )

    def flag_state(self) -> FlagState:
        return FlagState.from_flags(
            {
                "non-interactive": self.non_interactive,
                "interactive": self.interactive,
                "force-interactive": self.force_interactive,
                "force-non-interactive": self.force_non_interactive,
            },
            {"mode": self.mode},
        )


def is_recoverable(flags: ModeFlags) -> bool:
    """Exactly two signals are active and exactly one of them is a force flag.

    Two force flags together stay fatal: both ask to override everything.
    """
    return flags.active_count == 2 and flags.force_interactive != flags.force_non_interactive


@dataclass(frozen=True)
class ModeResolution:
    """Resolved mode plus how it was reached.

    Attributes:
        mode: The single resolved mode
        source: mode, flag, force or detected
        overridden: Flag suppressed by a force flag, if any
        reason: Detection check that fired when source is "detected"
    """

    mode: GenerationMode
    source: str
    overridden: str | None = None
    reason: str | None = None


def _resolve_recoverable(flags: ModeFlags) -> ModeResolution:
    explicit = parse_mode(flags.mode) if flags.mode else None

    if flags.force_interactive:
        mode = GenerationMode.INTERACTIVE
        if flags.non_interactive:
            overridden = "--non-interactive"
        elif explicit is not None and explicit != mode:
            overridden = f"--mode={flags.mode}"
        else:
            overridden = None
    else:
        mode = GenerationMode.NON_INTERACTIVE
        if flags.interactive:
            overridden = "--interactive"
        elif explicit is not None and explicit != mode:
            overridden = f"--mode={flags.mode}"
        else:
            overridden = None

    if overridden:
        logger.debug("Resolved mode conflict: using %s mode (overriding %s)", mode.value, overridden)
    return ModeResolution(mode=mode, source="force", overridden=overridden)


def resolve_generation_mode(
    flags: ModeFlags, detector: NonInteractiveDetector | None = None
) -> ModeResolution:
    """
    Resolve the generation mode for one invocation.

    Args:
        flags: Mode signals of the command
        detector: Auto-detection fallback (defaults to the process environment)

    Returns:
        ModeResolution with exactly one mode

    Raises:
        ConflictError: Fatal combination of mode flags
        ValidationError: Unrecognized --mode value
    """
    report = detect_conflicts(flags.flag_state(), CONFLICT_RULES)
    if report.has_errors:
        if not is_recoverable(flags):
            raise ConflictError(report.errors)
        return _resolve_recoverable(flags)

    if flags.mode:
        return ModeResolution(mode=parse_mode(flags.mode), source="mode")
    if flags.force_non_interactive or flags.non_interactive:
        return ModeResolution(mode=GenerationMode.NON_INTERACTIVE, source="flag")
    if flags.force_interactive or flags.interactive:
        return ModeResolution(mode=GenerationMode.INTERACTIVE, source="flag")

    detection = (detector or NonInteractiveDetector()).detect()
    if detection.non_interactive:
        return ModeResolution(
            mode=GenerationMode.NON_INTERACTIVE, source="detected", reason=detection.reason
        )
    return ModeResolution(mode=GenerationMode.INTERACTIVE, source="detected")
