"""Domain model for the mine usage tracker."""
