"""Storage backends for the mine usage tracker."""

from .usage_file import UsageFileStore

__all__ = ['UsageFileStore']
