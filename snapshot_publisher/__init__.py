"""Publish snapshot artifacts to a git-backed snapshot branch."""

__version__ = "0.1.0"
