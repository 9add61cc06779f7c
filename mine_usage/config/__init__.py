"""Configuration for the mine usage tracker."""

from mine_usage.config.config import (
    Config,
    ConfigurationError,
    LoggingConfig,
    StorageConfig,
    load_site_limits,
)
from mine_usage.config.validation import validate_configuration

__all__ = [
    "Config",
    "ConfigurationError",
    "LoggingConfig",
    "StorageConfig",
    "load_site_limits",
    "validate_configuration",
]
