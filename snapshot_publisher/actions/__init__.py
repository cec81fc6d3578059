"""Actions package for single-responsibility execution units."""

from .base import Action

from .git import (
    CloneAction,
    VerifyWorkingCopyAction,
    ResetAction,
    GitAddAction,
    GitCommitAction,
    GitPushAction,
)

from .files import SyncArtifactsAction

from .samples import (
    UpdateSampleVersionsAction,
    substitute_versions,
    update_sample,
    pom_matcher,
    properties_matcher,
)

__all__ = [
    # Base
    'Action',
    # Git actions
    'CloneAction',
    'VerifyWorkingCopyAction',
    'ResetAction',
    'GitAddAction',
    'GitCommitAction',
    'GitPushAction',
    # Filesystem actions
    'SyncArtifactsAction',
    # Sample version substitution
    'UpdateSampleVersionsAction',
    'substitute_versions',
    'update_sample',
    'pom_matcher',
    'properties_matcher',
]
