"""
Configuration validation for startup checks.

Runs before the registry is opened so a bad data path or log setting is
reported up front instead of on the first save.
"""

import logging
import os
from mine_usage.config.config import Config, ConfigurationError

logger = logging.getLogger(__name__)

__all__ = ['ConfigurationError', 'validate_configuration']


def validate_configuration(config: Config) -> None:
    """
    Validate all configuration at startup.

    Args:
        config: Configuration to validate

    Raises:
        ConfigurationError: If any validation fails
    """
    errors = config.validate()

    _validate_storage_access(config, errors)
    _validate_logging_setup(config, errors)

    if errors:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        error_summary = "\n".join(f"  - {error}" for error in errors)
        raise ConfigurationError(
            f"{len(errors)} configuration error(s):\n{error_summary}"
        )

    logger.debug("Configuration validated successfully")


def _validate_storage_access(config: Config, errors: list) -> None:
    """Validate the usage file location can be written."""
    data_file = config.storage.data_file

    if data_file.is_dir():
        errors.append(f"Usage file path is a directory: {data_file}")
        return

    parent = data_file.parent
    if parent.exists() and not os.access(parent, os.W_OK):
        errors.append(f"Usage file directory is not writable: {parent}")


def _validate_logging_setup(config: Config, errors: list) -> None:
    """Validate the log file directory, if a log file is configured."""
    if config.logging.log_file:
        log_parent = config.logging.log_file.parent
        if log_parent.exists() and not os.access(log_parent, os.W_OK):
            errors.append(f"Log directory is not writable: {log_parent}")
