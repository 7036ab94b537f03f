"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from jacocogen.config.loader import PROJECT_CONFIG_NAME, _deep_merge, _load_yaml, load_config
from jacocogen.core.errors import ConfigError


@pytest.fixture(autouse=True)
def _no_global_config(tmp_path: Path):
    with patch("jacocogen.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "missing-global.yaml"):
        yield


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("report:\n  file: out.xml\n")
        assert _load_yaml(yaml_file) == {"report": {"file": "out.xml"}}

    def test_returns_empty_for_yaml_null(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "null.yaml"
        yaml_file.write_text("null\n")
        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("report:\n  file:\n    - invalid: [unclosed")
        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_dicts_merge(self) -> None:
        base = {"report": {"file": "a.xml", "sync": True}}
        override = {"report": {"file": "b.xml"}}
        assert _deep_merge(base, override) == {"report": {"file": "b.xml", "sync": True}}

    def test_base_not_mutated(self) -> None:
        base = {"report": {"file": "a.xml"}}
        _deep_merge(base, {"report": {"file": "b.xml"}})
        assert base == {"report": {"file": "a.xml"}}


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults_point_at_project_root(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.report.dir == tmp_path.resolve()
        assert config.report.project_root == str(tmp_path.resolve())
        assert config.report.file == "jacoco-coverage.xml"
        assert config.logging.level == "INFO"

    def test_project_yaml_overrides_defaults(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text(
            "report:\n  file: custom.xml\n  sync: false\nlogging:\n  level: DEBUG\n"
        )
        config = load_config(tmp_path)
        assert config.report.file == "custom.xml"
        assert config.report.sync is False
        assert config.report.project_root == str(tmp_path.resolve())
        assert config.logging.level == "DEBUG"

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("report:\n  file: custom.xml\n")
        monkeypatch.setenv("JACOCOGEN__REPORT__FILE", "from-env.xml")
        config = load_config(tmp_path)
        assert config.report.file == "from-env.xml"

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JACOCOGEN__REPORT__FILE", "from-env.xml")
        config = load_config(tmp_path, report={"file": "from-kwargs.xml"})
        assert config.report.file == "from-kwargs.xml"

    def test_global_yaml_below_project_yaml(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("report:\n  file: global.xml\n  host_id: ci-runner\n")
        project = tmp_path / "project"
        project.mkdir()
        (project / PROJECT_CONFIG_NAME).write_text("report:\n  file: project.xml\n")
        with patch("jacocogen.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(project)
        assert config.report.file == "project.xml"
        assert config.report.host_id == "ci-runner"

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("logging:\n  level: LOUD\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.details["field"].startswith("logging")
