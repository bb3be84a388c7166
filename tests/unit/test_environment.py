"""Tests for environment and CI detection."""

from __future__ import annotations

import pytest

from projgen.core.environment import (
    NonInteractiveDetector,
    detect_ci_environment,
    parse_bool_env,
)


class TestParseBoolEnv:
    @pytest.mark.parametrize("value", ["true", "1", "YES", "On"])
    def test_truthy(self, value: str):
        assert parse_bool_env("X", env={"X": value}) is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "OFF"])
    def test_falsy(self, value: str):
        assert parse_bool_env("X", default=True, env={"X": value}) is False

    def test_unrecognized_uses_default(self):
        assert parse_bool_env("X", default=True, env={"X": "maybe"}) is True
        assert parse_bool_env("X", env={}) is False


class TestCIDetection:
    def test_no_ci(self):
        assert not detect_ci_environment({}).is_ci

    def test_generic_ci(self):
        ci = detect_ci_environment({"CI": "true"})
        assert ci.is_ci
        assert ci.provider is None

    def test_github_actions_details(self):
        ci = detect_ci_environment(
            {
                "GITHUB_ACTIONS": "true",
                "GITHUB_RUN_ID": "42",
                "GITHUB_REF_NAME": "main",
                "GITHUB_SHA": "abc123",
                "GITHUB_REPOSITORY": "acme/shop",
            }
        )
        assert ci.provider == "github-actions"
        assert ci.build_id == "42"
        assert ci.branch == "main"
        assert ci.commit == "abc123"
        assert ci.repository == "acme/shop"
        assert ci.pull_request is None

    def test_azure_requires_capitalized_true(self):
        assert detect_ci_environment({"TF_BUILD": "True"}).provider == "azure-devops"
        assert not detect_ci_environment({"TF_BUILD": "true"}).is_ci

    @pytest.mark.parametrize(
        "env,provider",
        [
            ({"GITLAB_CI": "true"}, "gitlab-ci"),
            ({"JENKINS_URL": "http://ci"}, "jenkins"),
            ({"TRAVIS": "true"}, "travis-ci"),
            ({"CIRCLECI": "true"}, "circleci"),
            ({"BITBUCKET_BUILD_NUMBER": "7"}, "bitbucket-pipelines"),
            ({"CODEBUILD_BUILD_ID": "b:1"}, "aws-codebuild"),
        ],
    )
    def test_providers(self, env: dict[str, str], provider: str):
        assert detect_ci_environment(env).provider == provider


class TestNonInteractiveDetector:
    def test_terminal_without_signals_is_interactive(self):
        detector = NonInteractiveDetector(env={}, is_terminal=lambda: True)
        result = detector.detect()
        assert not result.non_interactive
        assert result.reason is None

    def test_explicit_flag_wins(self):
        detector = NonInteractiveDetector(env={"CI": "true"}, is_terminal=lambda: False)
        assert detector.detect(explicit=True).reason == "flag"

    def test_env_var_before_ci(self):
        detector = NonInteractiveDetector(
            env={"PROJGEN_NON_INTERACTIVE": "yes", "CI": "true"}, is_terminal=lambda: True
        )
        assert detector.detect().reason == "env"

    def test_ci_detection_carries_provider(self):
        detector = NonInteractiveDetector(env={"GITLAB_CI": "true"}, is_terminal=lambda: True)
        result = detector.detect()
        assert result.reason == "ci"
        assert result.ci is not None
        assert result.ci.provider == "gitlab-ci"

    def test_piped_stdin(self):
        detector = NonInteractiveDetector(env={}, is_terminal=lambda: False)
        assert detector.detect().reason == "tty"
        assert detector.is_non_interactive()

    def test_checks_stop_at_first_hit(self):
        calls = []

        def probe() -> bool:
            calls.append("tty")
            return True

        detector = NonInteractiveDetector(env={"PROJGEN_NON_INTERACTIVE": "1"}, is_terminal=probe)
        detector.detect()
        assert calls == []
