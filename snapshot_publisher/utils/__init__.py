"""Utilities package for snapshot_publisher."""

from .progress import print_summary

__all__ = [
    'print_summary',
]
