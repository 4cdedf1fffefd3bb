"""Filtered, sorted and paginated task/category views over a remote REST store."""

__version__ = "0.1.0"
