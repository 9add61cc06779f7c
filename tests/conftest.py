"""
Pytest configuration and fixtures for mine usage tracker tests.
"""

import logging
from decimal import Decimal
from typing import List, Sequence

import pytest

from mine_usage.application.registry import Registry
from mine_usage.infrastructure.usage_file import UsageFileStore

ENV_VARS = ("MINE_USAGE_FILE", "LOG_LEVEL", "LOG_FILE", "LOG_CONSOLE")


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove tracker settings from the environment for the duration of a test."""
    for name in ENV_VARS:
        # setenv first so monkeypatch records the original state for undo
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def site_limits():
    """The standard three mines."""
    return {
        "Rosemont": Decimal("6000"),
        "Sierrita": Decimal("27180"),
        "Mission": Decimal("12590"),
    }


@pytest.fixture
def data_file(tmp_path):
    """Location for a usage file that does not exist yet."""
    return tmp_path / "mine_usage.txt"


@pytest.fixture
def store(data_file):
    return UsageFileStore(data_file)


@pytest.fixture
def registry(store, site_limits):
    """Fresh registry over an empty usage file."""
    return Registry(store, site_limits)


class MemoryStore:
    """In-memory UsageStore that can be told to fail on write."""

    def __init__(self, lines: Sequence[str] = ()):
        self.lines: List[str] = list(lines)
        self.writes = 0
        self.fail_writes = False

    def read_lines(self) -> List[str]:
        return list(self.lines)

    def write_lines(self, lines: Sequence[str]) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.lines = list(lines)


@pytest.fixture
def memory_store():
    return MemoryStore()
