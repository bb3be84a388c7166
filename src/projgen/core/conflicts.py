"""
Flag conflict rules and detection.

The rule table is plain data: adding a new mutually-exclusive combination
means appending a ``ConflictRule`` to ``CONFLICT_RULES``. Detection evaluates
every rule against a ``FlagState`` and reports all violations in table order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from .flags import Bare, FlagState, FlagToken, ValueEquals


class Severity(StrEnum):
    """How a triggered rule is treated. Only ERROR aborts a command."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ConflictRule:
    """
    A group of flag tokens that must not be active together.

    Attributes:
        flags: Mutually exclusive tokens (at least two)
        description: Why the combination conflicts
        suggestion: How to fix the invocation
        examples: Illustrative invocations
        severity: error | warning | info
        is_mode_rule: Rule concerns generation-mode signals
    """

    flags: tuple[FlagToken, ...]
    description: str
    suggestion: str
    examples: tuple[str, ...] = ()
    severity: Severity = Severity.ERROR
    is_mode_rule: bool = False

    def __post_init__(self) -> None:
        if len(self.flags) < 2:
            raise ValueError(f"Conflict rule needs at least two flags: {self.description}")

    @property
    def tokens(self) -> list[str]:
        """Literal flag tokens as shown to users."""
        return [str(flag) for flag in self.flags]

    def is_triggered(self, state: FlagState) -> bool:
        """More than one member token is active."""
        return sum(1 for flag in self.flags if state.is_active(flag)) > 1


class ConflictReport(tuple[ConflictRule, ...]):
    """Ordered triggered rules for one resolution pass. Empty means no conflict."""

    __slots__ = ()

    @property
    def errors(self) -> tuple[ConflictRule, ...]:
        return tuple(rule for rule in self if rule.severity == Severity.ERROR)

    @property
    def warnings(self) -> tuple[ConflictRule, ...]:
        return tuple(rule for rule in self if rule.severity != Severity.ERROR)

    @property
    def has_errors(self) -> bool:
        return any(rule.severity == Severity.ERROR for rule in self)


# =============================================================================
# Rule Table
# =============================================================================

VERBOSE = Bare("verbose")
QUIET = Bare("quiet")
DEBUG = Bare("debug")
INTERACTIVE = Bare("interactive")
NON_INTERACTIVE = Bare("non-interactive")
FORCE_INTERACTIVE = Bare("force-interactive")
FORCE_NON_INTERACTIVE = Bare("force-non-interactive")
MODE = Bare("mode")
OUTPUT_FORMAT_JSON = ValueEquals("output-format", "json")

CONFLICT_RULES: tuple[ConflictRule, ...] = (
    # Output mode conflicts
    ConflictRule(
        flags=(VERBOSE, QUIET),
        description="Verbose and quiet modes are mutually exclusive",
        suggestion=(
            "Choose either verbose output for detailed information "
            "OR quiet mode for minimal output"
        ),
        examples=("--verbose", "--quiet", "--debug (implies verbose)"),
    ),
    ConflictRule(
        flags=(DEBUG, QUIET),
        description="Debug and quiet modes are mutually exclusive",
        suggestion="Choose either debug mode for detailed debugging OR quiet mode for minimal output",
        examples=("--debug", "--quiet"),
    ),
    # Generation mode conflicts
    ConflictRule(
        flags=(INTERACTIVE, NON_INTERACTIVE),
        description="Interactive and non-interactive modes cannot be used together",
        suggestion=(
            "Choose either interactive mode for guided setup "
            "OR non-interactive for automated generation"
        ),
        examples=("--interactive", "--non-interactive", "--mode=interactive"),
        is_mode_rule=True,
    ),
    ConflictRule(
        flags=(FORCE_INTERACTIVE, FORCE_NON_INTERACTIVE),
        description="Force interactive and force non-interactive modes are mutually exclusive",
        suggestion=(
            "Choose either force-interactive to override detection "
            "OR force-non-interactive for automation"
        ),
        examples=("--force-interactive", "--force-non-interactive"),
        is_mode_rule=True,
    ),
    ConflictRule(
        flags=(INTERACTIVE, FORCE_NON_INTERACTIVE),
        description="Interactive mode conflicts with forced non-interactive mode",
        suggestion="Use either --interactive for guided setup OR --force-non-interactive for automation",
        examples=("--interactive", "--force-non-interactive"),
        is_mode_rule=True,
    ),
    ConflictRule(
        flags=(NON_INTERACTIVE, FORCE_INTERACTIVE),
        description="Non-interactive mode conflicts with forced interactive mode",
        suggestion="Use either --non-interactive for automation OR --force-interactive for guided setup",
        examples=("--non-interactive", "--force-interactive"),
        is_mode_rule=True,
    ),
    # Mode flag with explicit mode
    ConflictRule(
        flags=(INTERACTIVE, MODE),
        description="Interactive flag conflicts with explicit mode specification",
        suggestion="Use either --interactive flag OR --mode=interactive, not both",
        examples=("--interactive", "--mode=interactive", "--mode=non-interactive"),
        is_mode_rule=True,
    ),
    ConflictRule(
        flags=(NON_INTERACTIVE, MODE),
        description="Non-interactive flag conflicts with explicit mode specification",
        suggestion="Use either --non-interactive flag OR --mode=non-interactive, not both",
        examples=("--non-interactive", "--mode=non-interactive", "--mode=interactive"),
        is_mode_rule=True,
    ),
    ConflictRule(
        flags=(FORCE_INTERACTIVE, MODE),
        description="Force-interactive flag conflicts with explicit mode specification",
        suggestion="Use either --force-interactive flag OR --mode=interactive, not both",
        examples=("--force-interactive", "--mode=interactive"),
        is_mode_rule=True,
    ),
    ConflictRule(
        flags=(FORCE_NON_INTERACTIVE, MODE),
        description="Force-non-interactive flag conflicts with explicit mode specification",
        suggestion="Use either --force-non-interactive flag OR --mode=non-interactive, not both",
        examples=("--force-non-interactive", "--mode=non-interactive"),
        is_mode_rule=True,
    ),
    # Output format
    ConflictRule(
        flags=(OUTPUT_FORMAT_JSON, QUIET),
        description="JSON output format may conflict with quiet mode for readability",
        suggestion="Consider using JSON format without quiet mode for better structured output",
        examples=("--output-format=json", "--output-format=yaml --verbose"),
        severity=Severity.WARNING,
    ),
)


# =============================================================================
# Detection
# =============================================================================


def detect_conflicts(
    state: FlagState, rules: Iterable[ConflictRule] = CONFLICT_RULES
) -> ConflictReport:
    """
    Evaluate every rule against ``state``.

    No early exit: all violations are reported, in rule-table order.

    Args:
        state: Active flags for this invocation
        rules: Rule table (defaults to CONFLICT_RULES)

    Returns:
        ConflictReport of triggered rules (possibly empty)
    """
    return ConflictReport(rule for rule in rules if rule.is_triggered(state))


def format_conflict_report(rules: Sequence[ConflictRule]) -> str:
    """
    Build the single diagnostic message for a set of triggered rules.

    Example output:

        Flag conflicts detected

        Conflict #1: Verbose and quiet modes are mutually exclusive
        Conflicting flags: --verbose, --quiet
        Suggestion: Choose either verbose output ...
        Examples: --verbose, --quiet, --debug (implies verbose)
    """
    lines = ["Flag conflicts detected", ""]
    for number, rule in enumerate(rules, start=1):
        if number > 1:
            lines.append("")
        lines.append(f"Conflict #{number}: {rule.description}")
        lines.append(f"Conflicting flags: {', '.join(rule.tokens)}")
        lines.append(f"Suggestion: {rule.suggestion}")
        if rule.examples:
            lines.append(f"Examples: {', '.join(rule.examples)}")
    return "\n".join(lines)
