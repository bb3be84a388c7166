"""Tests for the per-invocation resolution pass."""

from __future__ import annotations

import logging

import pydantic
import pytest

from projgen.core import run_config
from projgen.core.environment import NonInteractiveDetector
from projgen.core.errors import ConflictError, ValidationError
from projgen.core.modes import GenerationMode
from projgen.core.output import OutputLevel
from projgen.core.run_config import RawFlags, resolve_run_config


def _detector(env: dict[str, str] | None = None, terminal: bool = True) -> NonInteractiveDetector:
    return NonInteractiveDetector(env=env or {}, is_terminal=lambda: terminal)


def _resolve(flags: RawFlags, **kwargs):
    kwargs.setdefault("detector", _detector())
    kwargs.setdefault("setup_logging", False)
    return resolve_run_config(flags, "test", **kwargs)


class TestRawFlags:
    def test_with_local_ignores_unset_values(self):
        flags = RawFlags(non_interactive=True, mode=None)
        merged = flags.with_local(non_interactive=False, interactive=True, mode=None)
        assert merged.non_interactive is True
        assert merged.interactive is True
        assert merged.mode is None

    def test_flag_state_covers_value_flags(self):
        state = RawFlags(output_format="json", mode="ni").flag_state()
        assert state.active == frozenset({"output-format", "mode"})


class TestResolveRunConfig:
    def test_defaults(self):
        config = _resolve(RawFlags())
        assert config.output_level == OutputLevel.NORMAL
        assert config.log_level == "info"
        assert config.output_format == "text"
        assert config.non_interactive is False
        assert config.mode is None
        assert config.warnings == ()

    def test_conflict_short_circuits_output_resolution(self, monkeypatch: pytest.MonkeyPatch):
        calls = []
        monkeypatch.setattr(
            run_config, "resolve_output_level", lambda **kwargs: calls.append(kwargs)
        )
        with pytest.raises(ConflictError):
            _resolve(RawFlags(verbose=True, quiet=True, log_level="bogus"))
        assert calls == []

    def test_all_fatal_conflicts_reported(self):
        with pytest.raises(ConflictError) as exc_info:
            _resolve(RawFlags(debug=True, verbose=True, quiet=True))
        assert len(exc_info.value.rules) == 2

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="isn't a valid log level"):
            _resolve(RawFlags(log_level="loud"))

    def test_invalid_output_format(self):
        with pytest.raises(ValidationError, match="isn't a valid output format"):
            _resolve(RawFlags(output_format="xml"))

    def test_warning_rule_does_not_abort(self):
        config = _resolve(RawFlags(quiet=True, output_format="json"))
        assert config.output_level == OutputLevel.QUIET
        assert config.is_structured_output
        assert config.warnings == (
            "JSON output format may conflict with quiet mode for readability",
        )

    def test_recoverable_conflict_resolved_for_generation(self):
        flags = RawFlags(non_interactive=True, force_interactive=True)
        config = _resolve(flags, needs_mode=True, detector=_detector(terminal=False))
        assert config.mode == GenerationMode.INTERACTIVE
        assert config.mode_overridden == "--non-interactive"
        assert config.non_interactive is False

    def test_recoverable_conflict_fatal_without_mode_resolution(self):
        with pytest.raises(ConflictError):
            _resolve(RawFlags(non_interactive=True, force_interactive=True))

    def test_force_flags_together_fatal_for_generation(self):
        with pytest.raises(ConflictError):
            _resolve(RawFlags(force_interactive=True, force_non_interactive=True), needs_mode=True)

    def test_piped_generation_is_non_interactive(self):
        config = _resolve(RawFlags(), needs_mode=True, detector=_detector(terminal=False))
        assert config.mode == GenerationMode.NON_INTERACTIVE
        assert config.non_interactive is True
        assert config.non_interactive_reason == "tty"

    def test_explicit_interactive_mode_allows_prompts_when_piped(self):
        config = _resolve(
            RawFlags(mode="interactive"), needs_mode=True, detector=_detector(terminal=False)
        )
        assert config.mode == GenerationMode.INTERACTIVE
        assert config.non_interactive is False

    def test_ci_provider_recorded(self):
        config = _resolve(RawFlags(), detector=_detector({"CIRCLECI": "true"}))
        assert config.non_interactive is True
        assert config.non_interactive_reason == "ci"
        assert config.ci_provider == "circleci"

    def test_bad_mode_is_validation_error(self):
        with pytest.raises(ValidationError, match="'bogus' is not a valid mode"):
            _resolve(RawFlags(mode="bogus"), needs_mode=True)

    def test_result_is_immutable(self):
        config = _resolve(RawFlags())
        with pytest.raises(pydantic.ValidationError):
            config.log_level = "debug"  # type: ignore[misc]

    def test_debug_logs_configuration(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.DEBUG, logger="projgen.core.run_config"):
            config = _resolve(RawFlags(debug=True))
        assert config.is_debug
        records = [r for r in caplog.records if r.getMessage() == "CLI configuration"]
        assert records
        assert records[0].context["output_level"] == "debug"

    def test_configures_logging(self):
        resolve_run_config(RawFlags(log_level="warn"), "test", detector=_detector())
        assert logging.getLogger("projgen").level == logging.WARNING
