"""
Logging configuration for the mine usage tracker.

Console output goes to stderr so it never mixes with menu prompts and
reports on stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from mine_usage.utils.tracing import SessionIdFilter

DEFAULT_FORMAT = "%(asctime)s - [%(session_id)s] - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[Path] = None,
    console_output: bool = True,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
        console_output: Whether to log to the console (stderr)
        log_format: Optional custom log format
    """
    if log_format is None:
        log_format = DEFAULT_FORMAT

    formatter = logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S")
    session_filter = SessionIdFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    root_logger.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(session_filter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.addFilter(session_filter)
        root_logger.addHandler(file_handler)

    root_logger.debug(f"Logging initialized: level={level}")
