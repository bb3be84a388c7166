"""
Runtime environment detection for projgen.

Answers "should this run non-interactively?" when no explicit mode flag
decides it. The answer comes from an ordered list of independent checks;
the first one that fires wins:

    1. flag  - explicit --non-interactive
    2. env   - PROJGEN_NON_INTERACTIVE (true/1/yes/on)
    3. ci    - a CI/CD provider is detected
    4. tty   - standard input is not a terminal (piped input)

Usage:
    from projgen.core.environment import NonInteractiveDetector

    detector = NonInteractiveDetector()
    if detector.is_non_interactive():
        ...

Each check reads from an injectable environment mapping and TTY probe, so
tests can substitute fakes without touching the real process state.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Environment variable forcing non-interactive mode
NON_INTERACTIVE_ENV_VAR = "PROJGEN_NON_INTERACTIVE"

_TRUTHY = {"true", "1", "yes", "on"}
_FALSY = {"false", "0", "no", "off"}


def parse_bool_env(
    key: str, default: bool = False, env: Mapping[str, str] | None = None
) -> bool:
    """Parse a boolean environment variable.

    Recognizes true/1/yes/on and false/0/no/off (case-insensitive). Unset,
    empty or unrecognized values yield ``default``.

    Examples:
        >>> parse_bool_env("X", env={"X": "Yes"})
        True
        >>> parse_bool_env("X", default=True, env={"X": "maybe"})
        True
    """
    source = os.environ if env is None else env
    value = source.get(key, "").strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return default


# =============================================================================
# CI Detection
# =============================================================================


@dataclass(frozen=True)
class CIEnvironment:
    """Detected CI/CD environment information."""

    is_ci: bool = False
    provider: str | None = None
    build_id: str | None = None
    build_number: str | None = None
    branch: str | None = None
    commit: str | None = None
    repository: str | None = None
    pull_request: str | None = None


# provider -> (predicate, field -> env var)
_CI_PROVIDERS: list[tuple[str, Callable[[Mapping[str, str]], bool], dict[str, str]]] = [
    (
        "github-actions",
        lambda env: env.get("GITHUB_ACTIONS") == "true",
        {
            "build_id": "GITHUB_RUN_ID",
            "build_number": "GITHUB_RUN_NUMBER",
            "branch": "GITHUB_REF_NAME",
            "commit": "GITHUB_SHA",
            "repository": "GITHUB_REPOSITORY",
            "pull_request": "GITHUB_EVENT_NUMBER",
        },
    ),
    (
        "gitlab-ci",
        lambda env: env.get("GITLAB_CI") == "true",
        {
            "build_id": "CI_PIPELINE_ID",
            "build_number": "CI_PIPELINE_IID",
            "branch": "CI_COMMIT_REF_NAME",
            "commit": "CI_COMMIT_SHA",
            "repository": "CI_PROJECT_PATH",
            "pull_request": "CI_MERGE_REQUEST_IID",
        },
    ),
    (
        "jenkins",
        lambda env: bool(env.get("JENKINS_URL")),
        {
            "build_id": "BUILD_ID",
            "build_number": "BUILD_NUMBER",
            "branch": "GIT_BRANCH",
            "commit": "GIT_COMMIT",
            "repository": "GIT_URL",
        },
    ),
    (
        "travis-ci",
        lambda env: env.get("TRAVIS") == "true",
        {
            "build_id": "TRAVIS_BUILD_ID",
            "build_number": "TRAVIS_BUILD_NUMBER",
            "branch": "TRAVIS_BRANCH",
            "commit": "TRAVIS_COMMIT",
            "repository": "TRAVIS_REPO_SLUG",
            "pull_request": "TRAVIS_PULL_REQUEST",
        },
    ),
    (
        "circleci",
        lambda env: env.get("CIRCLECI") == "true",
        {
            "build_id": "CIRCLE_BUILD_NUM",
            "build_number": "CIRCLE_BUILD_NUM",
            "branch": "CIRCLE_BRANCH",
            "commit": "CIRCLE_SHA1",
            "repository": "CIRCLE_PROJECT_REPONAME",
            "pull_request": "CIRCLE_PR_NUMBER",
        },
    ),
    (
        "azure-devops",
        # Azure sets TF_BUILD to "True" (capitalized)
        lambda env: env.get("TF_BUILD") == "True",
        {
            "build_id": "BUILD_BUILDID",
            "build_number": "BUILD_BUILDNUMBER",
            "branch": "BUILD_SOURCEBRANCH",
            "commit": "BUILD_SOURCEVERSION",
            "repository": "BUILD_REPOSITORY_NAME",
            "pull_request": "SYSTEM_PULLREQUEST_PULLREQUESTID",
        },
    ),
    (
        "bitbucket-pipelines",
        lambda env: bool(env.get("BITBUCKET_BUILD_NUMBER")),
        {
            "build_number": "BITBUCKET_BUILD_NUMBER",
            "branch": "BITBUCKET_BRANCH",
            "commit": "BITBUCKET_COMMIT",
            "repository": "BITBUCKET_REPO_FULL_NAME",
            "pull_request": "BITBUCKET_PR_ID",
        },
    ),
    (
        "aws-codebuild",
        lambda env: bool(env.get("CODEBUILD_BUILD_ID")),
        {
            "build_id": "CODEBUILD_BUILD_ID",
            "branch": "CODEBUILD_WEBHOOK_HEAD_REF",
            "commit": "CODEBUILD_RESOLVED_SOURCE_VERSION",
        },
    ),
]


def detect_ci_environment(env: Mapping[str, str] | None = None) -> CIEnvironment:
    """Detect whether we run under CI and, if possible, which provider.

    A generic ``CI=true`` or ``CONTINUOUS_INTEGRATION=true`` marks CI without
    a provider. The first matching provider fills in build details.
    """
    source = os.environ if env is None else env

    for provider, matches, fields in _CI_PROVIDERS:
        if matches(source):
            details = {attr: source.get(var) or None for attr, var in fields.items()}
            return CIEnvironment(is_ci=True, provider=provider, **details)

    if source.get("CI") == "true" or source.get("CONTINUOUS_INTEGRATION") == "true":
        return CIEnvironment(is_ci=True)

    return CIEnvironment()


def stdin_is_terminal() -> bool:
    """Check whether standard input is attached to an interactive terminal."""
    try:
        return sys.stdin is not None and sys.stdin.isatty()
    except (AttributeError, ValueError):
        # Closed or replaced stdin
        return False


# =============================================================================
# Non-Interactive Detection
# =============================================================================


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of non-interactive detection.

    Attributes:
        non_interactive: Whether to run without prompts
        reason: Name of the check that fired (flag, env, ci, tty), or None
        ci: CI details when the ci check ran
    """

    non_interactive: bool
    reason: str | None = None
    ci: CIEnvironment | None = None


class NonInteractiveDetector:
    """Ordered, short-circuiting non-interactive checks.

    Args:
        env: Environment mapping (defaults to os.environ)
        is_terminal: Probe for stdin terminal-ness (defaults to stdin_is_terminal)
    """

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        is_terminal: Callable[[], bool] | None = None,
    ):
        self.env = os.environ if env is None else env
        self.is_terminal = is_terminal or stdin_is_terminal

    def check_flag(self, explicit: bool) -> bool:
        return explicit

    def check_env(self) -> bool:
        return parse_bool_env(NON_INTERACTIVE_ENV_VAR, False, env=self.env)

    def check_ci(self) -> bool:
        return detect_ci_environment(self.env).is_ci

    def check_tty(self) -> bool:
        return not self.is_terminal()

    def detect(self, explicit: bool = False) -> DetectionResult:
        """Run the checks in order; the first that fires decides."""
        checks: list[tuple[str, Callable[[], bool]]] = [
            ("flag", lambda: self.check_flag(explicit)),
            ("env", self.check_env),
            ("ci", self.check_ci),
            ("tty", self.check_tty),
        ]
        for name, check in checks:
            if check():
                ci = detect_ci_environment(self.env) if name == "ci" else None
                logger.debug("Non-interactive mode detected (%s)", name)
                return DetectionResult(non_interactive=True, reason=name, ci=ci)
        return DetectionResult(non_interactive=False)

    def is_non_interactive(self, explicit: bool = False) -> bool:
        return self.detect(explicit).non_interactive
