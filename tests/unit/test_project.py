"""Tests for project configuration."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from projgen.core.errors import ValidationError
from projgen.core.project import (
    ProjectConfig,
    load_config_data,
    sanitize_name,
    validate_project_name,
)


class TestProjectName:
    @pytest.mark.parametrize("name", ["my-app", "shop", "api_v2"])
    def test_valid(self, name: str):
        assert validate_project_name(name) == (True, None)

    @pytest.mark.parametrize(
        "name,fragment",
        [
            ("", "cannot be empty"),
            ("2fast", "cannot start with a digit"),
            ("tests", "reserved name"),
            ("my app", "only letters"),
        ],
    )
    def test_invalid(self, name: str, fragment: str):
        is_valid, error = validate_project_name(name)
        assert not is_valid
        assert fragment in error

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("My Project", "my-project"),
            ("my_app", "my_app"),
            ("42 things", "project-42-things"),
            ("!!!", "my-project"),
        ],
    )
    def test_sanitize(self, raw: str, expected: str):
        assert sanitize_name(raw) == expected


class TestProjectConfig:
    def test_defaults(self):
        config = ProjectConfig.from_data({"name": "shop"})
        assert config.license == "MIT"
        assert config.components.selected() == []

    def test_invalid_license(self):
        with pytest.raises(ValidationError, match="license"):
            ProjectConfig.from_data({"name": "shop", "license": "WTFPL"})

    def test_invalid_name(self):
        with pytest.raises(ValidationError, match="reserved name"):
            ProjectConfig.from_data({"name": "src"})

    def test_from_environment(self):
        env = {
            "PROJGEN_PROJECT_NAME": "shop",
            "PROJGEN_PROJECT_ORGANIZATION": "Acme",
            "PROJGEN_BACKEND": "true",
            "PROJGEN_FRONTEND": "no",
        }
        config = ProjectConfig.from_environment(env)
        assert config.name == "shop"
        assert config.organization == "Acme"
        assert config.components.selected() == ["backend"]

    def test_environment_overrides_base(self):
        base = {"name": "shop", "license": "MIT", "components": {"frontend": True}}
        config = ProjectConfig.from_environment({"PROJGEN_PROJECT_LICENSE": "Apache-2.0"}, base)
        assert config.license == "Apache-2.0"
        assert config.components.frontend

    def test_environment_requires_name(self):
        with pytest.raises(ValidationError, match="Project name is required"):
            ProjectConfig.from_environment({})


class TestLoadConfigData:
    def test_yaml(self, tmp_path: Path):
        path = tmp_path / "project.yaml"
        path.write_text("name: shop\ncomponents:\n  mobile: true\n")
        config = ProjectConfig.from_file(path)
        assert config.components.selected() == ["mobile"]

    def test_json(self, tmp_path: Path):
        path = tmp_path / "project.json"
        path.write_text(json.dumps({"name": "shop", "license": "GPL-3.0"}))
        assert ProjectConfig.from_file(path).license == "GPL-3.0"

    def test_missing(self, tmp_path: Path):
        with pytest.raises(ValidationError, match="not found"):
            load_config_data(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValidationError, match="must contain a mapping"):
            load_config_data(path)

    def test_unparseable(self, tmp_path: Path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValidationError, match="Cannot parse"):
            load_config_data(path)
