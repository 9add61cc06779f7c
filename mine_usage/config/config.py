"""
Configuration management for the mine usage tracker.

Runtime settings come from environment variables (optionally via a .env
file). The site table is packaged with the code in sites.yaml and is not
meant to be edited by users.
"""

import os
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SITES_FILE = Path(__file__).parent / "sites.yaml"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


def load_site_limits(path: Path = SITES_FILE) -> Dict[str, Decimal]:
    """
    Load the site name -> annual water limit table.

    Args:
        path: YAML file with a top-level `sites` mapping

    Returns:
        Ordered dict of site name to limit in acre-feet

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.error(f"Site table not found: {path}")
        raise ConfigurationError(f"Site table not found: {path}") from None
    except yaml.YAMLError as e:
        logger.error(f"Error parsing site table: {e}")
        raise ConfigurationError(f"Error parsing site table {path}: {e}") from e

    sites = data.get('sites') if isinstance(data, dict) else None
    if not isinstance(sites, dict) or not sites:
        raise ConfigurationError(f"{path} must contain a non-empty 'sites' mapping")

    limits: Dict[str, Decimal] = {}
    for name, limit in sites.items():
        if isinstance(limit, bool) or not isinstance(limit, (int, float)):
            raise ConfigurationError(f"Water limit for {name!r} must be a number, got {limit!r}")
        limits[str(name)] = Decimal(str(limit))
    return limits


@dataclass(frozen=True)
class StorageConfig:
    """Where usage records are persisted."""

    data_file: Path = Path("mine_usage.txt")


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "%(asctime)s - [%(session_id)s] - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[Path] = None
    console_output: bool = True


@dataclass(frozen=True)
class Config:
    """Main configuration container."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sites: Dict[str, Decimal] = field(default_factory=load_site_limits)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'Config':
        """
        Load configuration from environment variables.

        Args:
            env_file: Optional path to .env file. Defaults to .env in the
                current directory, if present.

        Returns:
            Config instance with all settings loaded.
        """
        if env_file:
            load_dotenv(env_file)
        else:
            env_path = Path.cwd() / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        storage = StorageConfig(
            data_file=Path(os.getenv("MINE_USAGE_FILE", "mine_usage.txt")),
        )

        log_file = os.getenv("LOG_FILE")
        logging_config = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "WARNING").upper(),
            log_file=Path(log_file) if log_file else None,
            console_output=os.getenv("LOG_CONSOLE", "true").lower() == "true",
        )

        return cls(
            storage=storage,
            logging=logging_config,
            sites=load_site_limits(),
        )

    def validate(self) -> List[str]:
        """
        Check basic consistency.

        Returns:
            List of problems (empty if the configuration is usable)
        """
        errors = []

        if not self.sites:
            errors.append("No sites configured")
        for name, limit in self.sites.items():
            if not name or "," in name:
                errors.append(f"Invalid site name: {name!r}")
            if limit < 0:
                errors.append(f"Water limit for {name} must not be negative: {limit}")

        if self.logging.level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid log level: {self.logging.level}. Must be one of {VALID_LOG_LEVELS}"
            )

        return errors
