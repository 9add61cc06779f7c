"""Mine water and land usage tracker."""

__version__ = "1.0.0"
