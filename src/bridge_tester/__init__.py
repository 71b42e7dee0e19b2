"""Automated conference bridge test calls."""

__version__ = "1.0.0"
