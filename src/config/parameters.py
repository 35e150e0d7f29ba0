"""
Service configuration using Pydantic.

This module provides type-safe settings for the indicator service and
helpers to load them from a dictionary or a YAML file.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ServiceSettings(BaseModel):
    """
    Configuration for the indicator service.

    Attributes:
        seed_default_indicators: Register DQI1-DQI4 when the service is
            created (default: True).
        strict_parameter_mapping: Reject mapped evaluations that bind
            parameters the indicator does not declare (default: False).
        log_level: Logging level name (default: "INFO").
        default_parameters: Parameters placed in every root evaluation
            context built by the CLI (default: empty).
    """

    seed_default_indicators: bool = Field(default=True)
    strict_parameter_mapping: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    default_parameters: dict[str, Any] = Field(default_factory=dict)

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v):
        """Validate and normalise the logging level name."""
        level = str(v).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


def load_settings(config_dict: dict | None = None) -> ServiceSettings:
    """
    Load and validate service settings from a configuration dictionary.

    Args:
        config_dict: Optional dictionary of setting overrides. If None,
            default values are used.

    Returns:
        Validated ServiceSettings instance.

    Raises:
        ValidationError: If any setting value is invalid.

    Examples:
        >>> load_settings().seed_default_indicators
        True
        >>> load_settings({"log_level": "debug"}).log_level
        'DEBUG'
    """
    if config_dict is None:
        config_dict = {}
    return ServiceSettings(**config_dict)


def load_settings_file(path: Path) -> ServiceSettings:
    """
    Load service settings from a YAML file.

    An empty file yields default settings.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated ServiceSettings instance.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not contain a mapping.
    """
    with open(path, encoding="utf-8") as handle:
        data = yaml.safe_load(handle)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")
    return load_settings(data)
