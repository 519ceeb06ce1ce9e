"""Configuration module for fitps.

This module provides:
- Pydantic models for configuration validation
- YAML config file loading and discovery
- Default configuration values
- Environment variable expansion
"""

from fitps.config.defaults import DEFAULT_CONFIG
from fitps.config.loader import (
    Config,
    ConfigError,
    ConfigSyntaxError,
    ConfigValidationError,
    LoggingConfig,
    get_config_path,
    load_config,
)

__all__ = [
    "Config",
    "ConfigError",
    "ConfigSyntaxError",
    "ConfigValidationError",
    "LoggingConfig",
    "DEFAULT_CONFIG",
    "get_config_path",
    "load_config",
]
