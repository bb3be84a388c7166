"""Tests for projgen logging formatters and setup."""

from __future__ import annotations

import json
import logging

import pytest

from projgen.core.logging import (
    ConsoleFormatter,
    JSONLFormatter,
    configure_logging,
    log_with_context,
)


def _record(context: dict | None = None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="projgen.test",
        level=logging.INFO,
        pathname="/src/projgen/cli/project.py",
        lineno=42,
        msg="Generated %d files",
        args=(3,),
        exc_info=None,
        func="generate_command",
    )
    if context is not None:
        record.context = context
    return record


class TestJSONLFormatter:
    def test_basic_fields(self):
        entry = json.loads(JSONLFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "projgen.test"
        assert entry["message"] == "Generated 3 files"
        assert entry["timestamp"].endswith("Z")
        assert "source" not in entry
        assert "context" not in entry

    def test_context_and_caller(self):
        entry = json.loads(
            JSONLFormatter(include_caller=True).format(_record({"command": "generate"}))
        )
        assert entry["context"] == {"command": "generate"}
        assert entry["source"] == {
            "file": "/src/projgen/cli/project.py",
            "line": 42,
            "function": "generate_command",
        }


class TestConsoleFormatter:
    def test_plain(self):
        line = ConsoleFormatter(color=False).format(_record())
        assert line == "INFO: Generated 3 files"

    def test_caller_and_context(self):
        line = ConsoleFormatter(include_caller=True, color=False).format(
            _record({"command": "generate"})
        )
        assert line == "INFO: project.py:42 Generated 3 files (command=generate)"

    def test_color(self):
        line = ConsoleFormatter(color=True).format(_record())
        assert "\033[" in line


class TestConfigureLogging:
    def test_replaces_previous_handler(self):
        configure_logging("info")
        logger = configure_logging("debug", json_output=True)
        handlers = [h for h in logger.handlers if getattr(h, "_projgen_handler", False)]
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JSONLFormatter)
        assert logger.level == logging.DEBUG

    def test_fatal_maps_to_critical(self):
        assert configure_logging("fatal").level == logging.CRITICAL

    def test_writes_to_stderr(self, capsys: pytest.CaptureFixture[str]):
        configure_logging("info")
        logging.getLogger("projgen.test").info("hello")
        captured = capsys.readouterr()
        assert "INFO: hello" in captured.err
        assert captured.out == ""


class TestLogWithContext:
    def test_merges_context(self, caplog: pytest.LogCaptureFixture):
        logger = logging.getLogger("projgen.test")
        with caplog.at_level(logging.INFO, logger="projgen.test"):
            log_with_context(logger, logging.INFO, "Starting", {"a": 1}, b=2)
        assert caplog.records[-1].context == {"a": 1, "b": 2}

    def test_no_context(self, caplog: pytest.LogCaptureFixture):
        logger = logging.getLogger("projgen.test")
        with caplog.at_level(logging.INFO, logger="projgen.test"):
            log_with_context(logger, logging.INFO, "Plain")
        assert not hasattr(caplog.records[-1], "context")
