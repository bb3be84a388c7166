"""
Output level resolution.

Verbosity flags collapse into a single OutputLevel with fixed precedence
debug > verbose > quiet > normal, independent of the generation mode.
"""

from __future__ import annotations

from enum import StrEnum

from .errors import invalid_choice
from .logging import LOG_LEVELS

OUTPUT_FORMATS = ("text", "json", "yaml")

DEFAULT_LOG_LEVEL = "info"


class OutputLevel(StrEnum):
    """How much the CLI prints."""

    DEBUG = "debug"
    VERBOSE = "verbose"
    QUIET = "quiet"
    NORMAL = "normal"


def validate_log_level(log_level: str) -> str:
    """Return ``log_level`` if it is one of debug, info, warn, error, fatal."""
    if log_level not in LOG_LEVELS:
        raise invalid_choice("log level", log_level, list(LOG_LEVELS))
    return log_level


def validate_output_format(output_format: str) -> str:
    """Return ``output_format`` if it is one of text, json, yaml."""
    if output_format not in OUTPUT_FORMATS:
        raise invalid_choice("output format", output_format, OUTPUT_FORMATS)
    return output_format


def resolve_output_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    log_level: str | None = None,
) -> tuple[OutputLevel, str]:
    """
    Resolve verbosity flags into an output level and effective log level.

    The explicit log level is always validated, even when a verbosity flag
    takes precedence over it. An unset log level means "info".

    Returns:
        (output_level, log_level)

    Examples:
        resolve_output_level(debug=True, quiet=True)   # -> (DEBUG, "debug")
        resolve_output_level(log_level="warn")         # -> (NORMAL, "warn")
    """
    explicit = validate_log_level(log_level or DEFAULT_LOG_LEVEL)

    if debug:
        return OutputLevel.DEBUG, "debug"
    if verbose:
        return OutputLevel.VERBOSE, "debug"
    if quiet:
        return OutputLevel.QUIET, "error"
    return OutputLevel.NORMAL, explicit
