"""Shared pytest fixtures for projgen tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

# Variables that would make the host environment leak into detection
_DETECTION_VARS = (
    "CI",
    "CONTINUOUS_INTEGRATION",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "JENKINS_URL",
    "TRAVIS",
    "CIRCLECI",
    "TF_BUILD",
    "BITBUCKET_BUILD_NUMBER",
    "CODEBUILD_BUILD_ID",
    "PROJGEN_NON_INTERACTIVE",
    "PROJGEN_PROJECT_NAME",
    "PROJGEN_PROJECT_ORGANIZATION",
    "PROJGEN_PROJECT_DESCRIPTION",
    "PROJGEN_PROJECT_LICENSE",
    "PROJGEN_PROJECT_OUTPUT_PATH",
    "PROJGEN_FRONTEND",
    "PROJGEN_BACKEND",
    "PROJGEN_MOBILE",
    "PROJGEN_INFRASTRUCTURE",
    "NO_COLOR",
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Clean detection variables and point PROJGEN_HOME at a temp directory."""
    for name in _DETECTION_VARS:
        monkeypatch.delenv(name, raising=False)
    home = tmp_path / "projgen-home"
    monkeypatch.setenv("PROJGEN_HOME", str(home))
    yield home
    logger = logging.getLogger("projgen")
    for handler in list(logger.handlers):
        if getattr(handler, "_projgen_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def project_home(isolated_environment: Path) -> Path:
    """The PROJGEN_HOME used by the current test."""
    return isolated_environment
