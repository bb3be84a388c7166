"""
Per-invocation run configuration.

``resolve_run_config`` performs the whole resolution pass for one command:

    flag collection -> conflict detection -> output level + logging
    -> environment detection -> generation mode (if requested)

and returns an immutable ``ResolvedRunConfig``. Commands and collaborators
read everything they need from it and never look at raw flags again.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from pydantic import BaseModel, ConfigDict, Field

from .conflicts import CONFLICT_RULES, detect_conflicts
from .environment import NonInteractiveDetector
from .errors import ConflictError
from .flags import FlagState
from .logging import configure_logging, log_with_context
from .modes import GenerationMode, ModeFlags, is_recoverable, resolve_generation_mode
from .output import OutputLevel, resolve_output_level, validate_output_format

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawFlags:
    """
    Flag values as collected from the command line.

    Global flags come from the root callback; a command overlays its local
    flags with ``with_local``. ``None`` means "not given".
    """

    verbose: bool = False
    quiet: bool = False
    debug: bool = False
    log_level: str | None = None
    log_json: bool = False
    log_caller: bool = False
    non_interactive: bool = False
    output_format: str | None = None
    interactive: bool = False
    force_interactive: bool = False
    force_non_interactive: bool = False
    mode: str | None = None

    def with_local(self, **local: bool | str | None) -> RawFlags:
        """Overlay local flag values; ``None`` and ``False`` leave the global value."""
        overrides = {
            name: value for name, value in local.items() if value is not None and value is not False
        }
        return replace(self, **overrides)

    def flag_state(self) -> FlagState:
        return FlagState.from_flags(
            {
                "verbose": self.verbose,
                "quiet": self.quiet,
                "debug": self.debug,
                "log-json": self.log_json,
                "log-caller": self.log_caller,
                "non-interactive": self.non_interactive,
                "interactive": self.interactive,
                "force-interactive": self.force_interactive,
                "force-non-interactive": self.force_non_interactive,
            },
            {
                "log-level": self.log_level,
                "output-format": self.output_format,
                "mode": self.mode,
            },
        )

    def mode_flags(self) -> ModeFlags:
        return ModeFlags(
            non_interactive=self.non_interactive,
            interactive=self.interactive,
            force_interactive=self.force_interactive,
            force_non_interactive=self.force_non_interactive,
            mode=self.mode,
        )


class ResolvedRunConfig(BaseModel):
    """
    Everything a command needs to know about how it should run.

    Attributes:
        command: Invoked command name (e.g. "generate", "cache clear")
        args: Raw command-line arguments
        output_level: Resolved verbosity
        log_level: Effective log level (debug, info, warn, error, fatal)
        log_json: JSON-lines logging
        log_caller: Caller info in log records
        output_format: text, json or yaml
        non_interactive: Prompts are not allowed
        non_interactive_reason: Check that decided non_interactive (flag, env, ci, tty)
        ci_provider: Detected CI provider, if any
        mode: Generation mode (None for commands that don't generate)
        mode_overridden: Flag suppressed by a force flag, if any
        warnings: Descriptions of non-fatal flag conflicts
    """

    command: str
    args: tuple[str, ...] = ()
    output_level: OutputLevel = OutputLevel.NORMAL
    log_level: str = "info"
    log_json: bool = False
    log_caller: bool = False
    output_format: str = "text"
    non_interactive: bool = False
    non_interactive_reason: str | None = None
    ci_provider: str | None = None
    mode: GenerationMode | None = None
    mode_overridden: str | None = None
    warnings: tuple[str, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @property
    def is_quiet(self) -> bool:
        return self.output_level == OutputLevel.QUIET

    @property
    def is_verbose(self) -> bool:
        return self.output_level in (OutputLevel.VERBOSE, OutputLevel.DEBUG)

    @property
    def is_debug(self) -> bool:
        return self.output_level == OutputLevel.DEBUG

    @property
    def is_structured_output(self) -> bool:
        return self.output_format in ("json", "yaml")


def resolve_run_config(
    flags: RawFlags,
    command: str,
    args: Sequence[str] = (),
    *,
    detector: NonInteractiveDetector | None = None,
    needs_mode: bool = False,
    setup_logging: bool = True,
) -> ResolvedRunConfig:
    """
    Run the resolution pass for one command invocation.

    Args:
        flags: Global flags overlaid with the command's local flags
        command: Command name, for logging
        args: Raw arguments, for logging
        detector: Non-interactive detector (defaults to the process environment)
        needs_mode: Resolve a GenerationMode (generation-style commands)
        setup_logging: Configure the projgen logger from the resolved level

    Returns:
        Immutable ResolvedRunConfig

    Raises:
        ConflictError: Fatal flag combination; nothing else is resolved
        ValidationError: Invalid --log-level, --output-format or --mode
    """
    detector = detector or NonInteractiveDetector()
    mode_flags = flags.mode_flags()

    report = detect_conflicts(flags.flag_state(), CONFLICT_RULES)
    # Mode-rule conflicts of the recoverable kind are settled by the mode resolver
    deferred = needs_mode and is_recoverable(mode_flags)
    fatal = [rule for rule in report.errors if not (rule.is_mode_rule and deferred)]
    if fatal:
        raise ConflictError(fatal)

    output_format = validate_output_format(flags.output_format or "text")
    output_level, log_level = resolve_output_level(
        debug=flags.debug,
        verbose=flags.verbose,
        quiet=flags.quiet,
        log_level=flags.log_level,
    )

    if setup_logging:
        configure_logging(log_level, json_output=flags.log_json, caller=flags.log_caller)

    for rule in report.warnings:
        logger.debug("Non-fatal conflict: %s (%s)", rule.description, ", ".join(rule.tokens))

    detection = detector.detect(explicit=flags.non_interactive)
    if detection.non_interactive and detection.reason != "flag":
        logger.debug("Auto-detected non-interactive mode (%s)", detection.reason)

    non_interactive, reason = detection.non_interactive, detection.reason
    resolution = resolve_generation_mode(mode_flags, detector) if needs_mode else None
    if resolution is not None and resolution.source != "detected":
        # An explicit mode decides whether prompting is allowed
        non_interactive = resolution.mode != GenerationMode.INTERACTIVE
        reason = resolution.source if non_interactive else None

    config = ResolvedRunConfig(
        command=command,
        args=tuple(args),
        output_level=output_level,
        log_level=log_level,
        log_json=flags.log_json,
        log_caller=flags.log_caller,
        output_format=output_format,
        non_interactive=non_interactive,
        non_interactive_reason=reason,
        ci_provider=detection.ci.provider if detection.ci else None,
        mode=resolution.mode if resolution else None,
        mode_overridden=resolution.overridden if resolution else None,
        warnings=tuple(rule.description for rule in report.warnings),
    )

    if config.is_debug:
        log_with_context(
            logger,
            logging.DEBUG,
            "CLI configuration",
            command=command,
            output_level=output_level.value,
            log_level=log_level,
            log_json=flags.log_json,
            log_caller=flags.log_caller,
            non_interactive=config.non_interactive,
            output_format=output_format,
            mode=config.mode.value if config.mode else None,
        )
    if config.is_verbose:
        log_with_context(logger, logging.INFO, "Starting command", command=command, args=list(args))

    return config
