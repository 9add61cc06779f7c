"""Application services for the mine usage tracker."""

from mine_usage.application.registry import Registry

__all__ = ["Registry"]
