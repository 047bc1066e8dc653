"""Unit tests for configuration management module."""

import json
from pathlib import Path
from typing import Any

import pytest
import yaml
from pydantic import ValidationError

from routegraph.config import (
    ConfigManager,
    GeodesicConfig,
    RouteGraphConfig,
    ValidationConfig,
    get_config,
    load_config,
    reset_config,
)

ENV_VARS = [
    "ROUTEGRAPH_EARTH_RADIUS_KM",
    "ROUTEGRAPH_ALLOW_NEGATIVE_WEIGHTS",
    "ROUTEGRAPH_CHECK_TWO_WAY_REVERSE",
    "ROUTEGRAPH_REPORT_CYCLES",
    "ROUTEGRAPH_MAX_REPORTED_CYCLES",
    "ROUTEGRAPH_LOGGING_LEVEL",
    "ROUTEGRAPH_JSON_LOGS",
]


@pytest.fixture
def valid_config_dict() -> dict[str, Any]:
    """Fixture providing valid configuration dictionary."""
    return {
        "geodesic": {"earth_radius_km": 6378.1},
        "validation": {
            "allow_negative_weights": False,
            "check_two_way_reverse": True,
            "report_cycles": True,
            "max_reported_cycles": 5,
        },
        "logging_level": "DEBUG",
        "json_logs": False,
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, valid_config_dict: dict[str, Any]) -> Path:
    """Fixture providing temporary YAML config file."""
    config_path = tmp_path / "routegraph.yaml"
    with config_path.open("w") as f:
        yaml.dump(valid_config_dict, f)
    return config_path


@pytest.fixture
def temp_json_config_file(tmp_path: Path, valid_config_dict: dict[str, Any]) -> Path:
    """Fixture providing temporary JSON config file."""
    config_path = tmp_path / "routegraph.json"
    with config_path.open("w") as f:
        json.dump(valid_config_dict, f)
    return config_path


@pytest.fixture(autouse=True)
def reset_config_singleton():
    """Reset configuration singleton before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def clean_env_vars(monkeypatch):
    """Clean environment variables before each test."""
    for key in ENV_VARS:
        monkeypatch.delenv(key, raising=False)


class TestGeodesicConfig:
    """Tests for GeodesicConfig model."""

    def test_default_radius(self):
        """Test the default earth radius is the mean radius."""
        assert GeodesicConfig().earth_radius_km == 6371.0

    def test_radius_must_be_positive(self):
        """Test non-positive radii are rejected."""
        with pytest.raises(ValidationError):
            GeodesicConfig(earth_radius_km=0)

        with pytest.raises(ValidationError):
            GeodesicConfig(earth_radius_km=-1.0)


class TestValidationConfig:
    """Tests for ValidationConfig model."""

    def test_defaults(self):
        """Test creating ValidationConfig with defaults."""
        config = ValidationConfig()
        assert config.allow_negative_weights is False
        assert config.check_two_way_reverse is True
        assert config.report_cycles is False
        assert config.max_reported_cycles == 10

    def test_max_reported_cycles_bounds(self):
        """Test max_reported_cycles must be between 1 and 1000."""
        with pytest.raises(ValidationError):
            ValidationConfig(max_reported_cycles=0)

        with pytest.raises(ValidationError):
            ValidationConfig(max_reported_cycles=1001)

        assert ValidationConfig(max_reported_cycles=1).max_reported_cycles == 1
        assert ValidationConfig(max_reported_cycles=1000).max_reported_cycles == 1000


class TestRouteGraphConfig:
    """Tests for RouteGraphConfig model."""

    def test_valid_config(self, valid_config_dict):
        """Test creating a valid RouteGraphConfig."""
        config = RouteGraphConfig(**valid_config_dict)
        assert config.geodesic.earth_radius_km == 6378.1
        assert config.validation.report_cycles is True
        assert config.validation.max_reported_cycles == 5
        assert config.logging_level == "DEBUG"
        assert config.json_logs is False

    def test_all_sections_default(self):
        """Test every section has defaults."""
        config = RouteGraphConfig()
        assert config.geodesic.earth_radius_km == 6371.0
        assert config.validation.report_cycles is False
        assert config.logging_level == "INFO"
        assert config.json_logs is True

    def test_logging_level_validation(self, valid_config_dict):
        """Test logging_level validation."""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            config_dict = valid_config_dict.copy()
            config_dict["logging_level"] = level
            assert RouteGraphConfig(**config_dict).logging_level == level

        config_dict = valid_config_dict.copy()
        config_dict["logging_level"] = "VERBOSE"
        with pytest.raises(ValidationError):
            RouteGraphConfig(**config_dict)

    def test_from_yaml(self, temp_config_file):
        """Test loading configuration from YAML file."""
        config = RouteGraphConfig.from_yaml(temp_config_file)
        assert config.geodesic.earth_radius_km == 6378.1
        assert config.validation.max_reported_cycles == 5

    def test_from_json(self, temp_json_config_file):
        """Test loading configuration from a JSON file (YAML superset)."""
        config = RouteGraphConfig.from_yaml(temp_json_config_file)
        assert config.logging_level == "DEBUG"

    def test_from_yaml_missing_file(self, tmp_path):
        """Test loading from a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            RouteGraphConfig.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_empty_file_uses_defaults(self, tmp_path):
        """Test an empty file yields the default configuration."""
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")

        config = RouteGraphConfig.from_yaml(config_path)

        assert config == RouteGraphConfig()

    def test_from_yaml_invalid_yaml(self, tmp_path):
        """Test malformed YAML raises ValueError."""
        config_path = tmp_path / "broken.yaml"
        config_path.write_text("geodesic: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            RouteGraphConfig.from_yaml(config_path)

    def test_from_yaml_not_a_mapping(self, tmp_path):
        """Test a YAML list is rejected."""
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- one\n- two\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            RouteGraphConfig.from_yaml(config_path)

    def test_from_yaml_invalid_values(self, tmp_path):
        """Test invalid values raise a validation error."""
        config_path = tmp_path / "invalid.yaml"
        config_path.write_text("geodesic:\n  earth_radius_km: -5\n")

        with pytest.raises(ValidationError):
            RouteGraphConfig.from_yaml(config_path)


class TestEnvironmentOverrides:
    """Tests for environment variable overrides."""

    def test_numeric_overrides(self, temp_config_file, monkeypatch):
        """Test float and int overrides are converted."""
        monkeypatch.setenv("ROUTEGRAPH_EARTH_RADIUS_KM", "6356.8")
        monkeypatch.setenv("ROUTEGRAPH_MAX_REPORTED_CYCLES", "3")

        config = RouteGraphConfig.from_yaml(temp_config_file)

        assert config.geodesic.earth_radius_km == 6356.8
        assert config.validation.max_reported_cycles == 3

    def test_boolean_overrides(self, temp_config_file, monkeypatch):
        """Test boolean overrides accept true/1/yes."""
        monkeypatch.setenv("ROUTEGRAPH_ALLOW_NEGATIVE_WEIGHTS", "yes")
        monkeypatch.setenv("ROUTEGRAPH_REPORT_CYCLES", "false")
        monkeypatch.setenv("ROUTEGRAPH_JSON_LOGS", "1")

        config = RouteGraphConfig.from_yaml(temp_config_file)

        assert config.validation.allow_negative_weights is True
        assert config.validation.report_cycles is False
        assert config.json_logs is True

    def test_logging_level_override(self, temp_config_file, monkeypatch):
        """Test the logging level override is upper-cased."""
        monkeypatch.setenv("ROUTEGRAPH_LOGGING_LEVEL", "warning")

        config = RouteGraphConfig.from_yaml(temp_config_file)

        assert config.logging_level == "WARNING"

    def test_override_creates_missing_section(self, tmp_path, monkeypatch):
        """Test overrides work when the file omits the section."""
        config_path = tmp_path / "partial.yaml"
        config_path.write_text("logging_level: ERROR\n")
        monkeypatch.setenv("ROUTEGRAPH_REPORT_CYCLES", "true")

        config = RouteGraphConfig.from_yaml(config_path)

        assert config.validation.report_cycles is True
        assert config.logging_level == "ERROR"


class TestValidateConfig:
    """Tests for configuration warnings."""

    def test_defaults_have_no_warnings(self):
        """Test the default configuration is warning-free."""
        assert RouteGraphConfig().validate_config() == []

    def test_unusual_radius_warns(self):
        """Test a radius far from the mean radius is flagged."""
        config = RouteGraphConfig(geodesic=GeodesicConfig(earth_radius_km=1.0))
        warnings = config.validate_config()
        assert any("Earth radius" in warning for warning in warnings)

    def test_equatorial_radius_does_not_warn(self):
        """Test a realistic alternative radius is accepted silently."""
        config = RouteGraphConfig(geodesic=GeodesicConfig(earth_radius_km=6378.1))
        assert config.validate_config() == []

    def test_negative_weights_warn(self):
        """Test allowing negative weights is flagged."""
        config = RouteGraphConfig(validation=ValidationConfig(allow_negative_weights=True))
        assert any("Negative edge weights" in warning for warning in config.validate_config())

    def test_debug_logging_warns(self):
        """Test DEBUG logging is flagged."""
        config = RouteGraphConfig(logging_level="DEBUG")
        assert any("DEBUG" in warning for warning in config.validate_config())


class TestConfigManager:
    """Tests for configuration loading and the singleton."""

    def test_load_config_explicit_path(self, temp_config_file):
        """Test loading from an explicit path."""
        config = load_config(temp_config_file)
        assert config.validation.max_reported_cycles == 5

    def test_load_config_missing_explicit_path(self, tmp_path):
        """Test a missing explicit path raises."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_load_config_default_file(self, temp_config_file, monkeypatch):
        """Test routegraph.yaml in the working directory is picked up."""
        monkeypatch.chdir(temp_config_file.parent)
        config = load_config()
        assert config.geodesic.earth_radius_km == 6378.1

    def test_load_config_without_file_uses_defaults(self, tmp_path, monkeypatch):
        """Test defaults (plus environment) are used when no file exists."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ROUTEGRAPH_EARTH_RADIUS_KM", "6000")

        config = load_config()

        assert config.geodesic.earth_radius_km == 6000.0
        assert config.logging_level == "INFO"

    def test_get_config_singleton(self, temp_config_file):
        """Test get_config returns the same instance."""
        config1 = get_config(temp_config_file)
        config2 = get_config()
        assert config1 is config2

    def test_get_config_reload(self, temp_config_file):
        """Test reload forces a new instance."""
        config1 = get_config(temp_config_file)
        config2 = get_config(temp_config_file, reload=True)
        assert config1 is not config2
        assert config1 == config2

    def test_reset_config(self, temp_config_file):
        """Test reset clears the singleton."""
        get_config(temp_config_file)
        reset_config()
        assert ConfigManager._instance is None
