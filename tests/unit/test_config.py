"""Tests for scan configuration models and loading."""

import json
from pathlib import Path

import pytest

from slop_detector.config import (
    CONFIG_FILE,
    ConfigError,
    DocRatioConfig,
    ScanConfig,
    load_config,
)


class TestScanConfig:
    """Test ScanConfig defaults and validation."""

    def test_defaults(self):
        """Test default values."""
        config = ScanConfig()

        assert config.languages is None
        assert config.severities is None
        assert config.disabled_rules == []
        assert config.thoroughness == "normal"
        assert config.is_quick is False
        assert config.max_workers == 1
        assert config.cache.pattern_capacity == 50
        assert config.cache.result_capacity == 200

    def test_thoroughness_is_normalized(self):
        """Test thoroughness is case-insensitive."""
        assert ScanConfig(thoroughness="QUICK").is_quick is True

    def test_invalid_thoroughness(self):
        """Test unknown thoroughness levels are rejected."""
        with pytest.raises(ValueError):
            ScanConfig(thoroughness="deep")

    def test_severities_are_lowercased(self):
        """Test severity filters are normalized."""
        assert ScanConfig(severities=["HIGH", "Critical"]).severities == ["high", "critical"]

    def test_unknown_severity(self):
        """Test unknown severities are rejected."""
        with pytest.raises(ValueError):
            ScanConfig(severities=["urgent"])

    def test_is_rule_enabled(self):
        """Test disabled rules."""
        config = ScanConfig(disabled_rules=["magic_numbers"])
        assert config.is_rule_enabled("magic_numbers") is False
        assert config.is_rule_enabled("console_debugging") is True

    def test_thresholds_for(self):
        """Test explicit fields override rule defaults, None keeps them."""
        config = ScanConfig(doc_ratio=DocRatioConfig(max_ratio=5.0))
        defaults = {"min_function_lines": 3, "max_ratio": 3.0}

        assert config.thresholds_for("doc_ratio", defaults) == {
            "min_function_lines": 3,
            "max_ratio": 5.0,
        }
        assert config.thresholds_for("missing", defaults) == defaults

    def test_extra_fields_allowed(self):
        """Test unknown keys are kept for forward compatibility."""
        config = ScanConfig(output_format="sarif")
        assert config.output_format == "sarif"


class TestLoadConfig:
    """Test configuration loading precedence and errors."""

    def test_defaults_without_files(self, tmp_path):
        """Test defaults when the project has no config file."""
        assert load_config(project_path=tmp_path) == ScanConfig()

    def test_project_file(self, tmp_path):
        """Test the project config file is picked up."""
        (tmp_path / CONFIG_FILE).write_text(
            json.dumps({"disabled_rules": ["magic_numbers"], "verbosity": {"max_comment_ratio": 4}})
        )
        config = load_config(project_path=tmp_path)

        assert config.disabled_rules == ["magic_numbers"]
        assert config.verbosity.max_comment_ratio == 4

    def test_explicit_path_wins_over_project_file(self, tmp_path):
        """Test an explicit path replaces the project file."""
        (tmp_path / CONFIG_FILE).write_text(json.dumps({"max_workers": 2}))
        explicit = tmp_path / "custom.json"
        explicit.write_text(json.dumps({"max_workers": 8}))

        assert load_config(path=explicit, project_path=tmp_path).max_workers == 8

    def test_overrides(self, tmp_path):
        """Test keyword overrides beat files and None overrides are ignored."""
        (tmp_path / CONFIG_FILE).write_text(
            json.dumps({"thoroughness": "quick", "max_workers": 2})
        )
        config = load_config(project_path=tmp_path, thoroughness=None, max_workers=6)

        assert config.thoroughness == "quick"
        assert config.max_workers == 6

    def test_missing_explicit_path(self, tmp_path):
        """Test a missing explicit file is an error."""
        with pytest.raises(ConfigError) as exc_info:
            load_config(path=tmp_path / "missing.json")
        assert exc_info.value.config_path == tmp_path / "missing.json"

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON is an error."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(path=path)

    def test_non_object(self, tmp_path):
        """Test a JSON array is rejected."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_config(path=path)

    def test_validation_error(self, tmp_path):
        """Test schema violations become ConfigError."""
        path = Path(tmp_path) / "invalid.json"
        path.write_text(json.dumps({"max_workers": 500}))
        with pytest.raises(ConfigError):
            load_config(path=path)

    def test_config_error_is_value_error(self):
        """Test ConfigError can be caught as ValueError."""
        with pytest.raises(ValueError):
            load_config(thoroughness="deep")
