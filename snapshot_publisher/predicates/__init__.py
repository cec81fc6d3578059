"""Predicates package for composable skip logic."""

from .base import (
    Predicate,
    AllOf,
    Not,
    not_,
)

from .core import (
    IsSnapshotVersion,
    HasGitDirectory,
    CommitCreated,
)

__all__ = [
    # Base
    'Predicate',
    'AllOf',
    'Not',
    'not_',
    # Core predicates
    'IsSnapshotVersion',
    'HasGitDirectory',
    'CommitCreated',
]
