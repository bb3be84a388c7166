"""Core projgen functionality: flag conflicts, mode and output resolution, collaborators."""

from .conflicts import CONFLICT_RULES, ConflictReport, ConflictRule, detect_conflicts
from .environment import NonInteractiveDetector, detect_ci_environment
from .errors import (
    ConfigurationUnavailable,
    ConflictError,
    ExitCode,
    ProjgenError,
    ValidationError,
)
from .flags import Bare, FlagState, FlagToken, ValueEquals
from .modes import GenerationMode, resolve_generation_mode
from .output import OutputLevel, resolve_output_level
from .run_config import RawFlags, ResolvedRunConfig, resolve_run_config

__all__ = [
    "CONFLICT_RULES",
    "ConflictReport",
    "ConflictRule",
    "detect_conflicts",
    "NonInteractiveDetector",
    "detect_ci_environment",
    "ConfigurationUnavailable",
    "ConflictError",
    "ExitCode",
    "ProjgenError",
    "ValidationError",
    "Bare",
    "FlagState",
    "FlagToken",
    "ValueEquals",
    "GenerationMode",
    "resolve_generation_mode",
    "OutputLevel",
    "resolve_output_level",
    "RawFlags",
    "ResolvedRunConfig",
    "resolve_run_config",
]
