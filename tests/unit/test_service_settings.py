"""Unit tests for service settings loading."""

import pytest
from pydantic import ValidationError

from src.config.parameters import ServiceSettings, load_settings, load_settings_file


pytestmark = pytest.mark.unit


def test_defaults():
    """Test default settings."""
    settings = load_settings()

    assert settings.seed_default_indicators is True
    assert settings.strict_parameter_mapping is False
    assert settings.log_level == "INFO"
    assert settings.default_parameters == {}


def test_log_level_normalised():
    """Test log level names are upper-cased."""
    assert ServiceSettings(log_level="debug").log_level == "DEBUG"


def test_invalid_log_level_rejected():
    """Test unknown levels fail validation."""
    with pytest.raises(ValidationError, match="log_level"):
        load_settings({"log_level": "verbose"})


def test_load_yaml_file(tmp_path):
    """Test loading settings from YAML."""
    path = tmp_path / "settings.yaml"
    path.write_text(
        "seed_default_indicators: false\n"
        "strict_parameter_mapping: true\n"
        "default_parameters:\n"
        "  month: Jan\n",
        encoding="utf-8",
    )

    settings = load_settings_file(path)

    assert settings.seed_default_indicators is False
    assert settings.strict_parameter_mapping is True
    assert settings.default_parameters == {"month": "Jan"}


def test_load_empty_yaml_file(tmp_path):
    """Test an empty file yields defaults."""
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_settings_file(path) == ServiceSettings()


def test_load_non_mapping_yaml_rejected(tmp_path):
    """Test a YAML list is rejected."""
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a mapping"):
        load_settings_file(path)
