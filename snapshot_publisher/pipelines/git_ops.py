"""Snapshot publishing pipeline."""

from .base import Pipeline
from ..config import SnapshotPublishConfig
from ..predicates import IsSnapshotVersion, HasGitDirectory, CommitCreated, not_
from ..actions.git import (
    CloneAction,
    VerifyWorkingCopyAction,
    ResetAction,
    GitAddAction,
    GitCommitAction,
    GitPushAction,
)
from ..actions.files import SyncArtifactsAction


class SnapshotPublishPipeline(Pipeline):
    """Publish built artifacts to a git-backed snapshot branch.

    This pipeline:
    1. Skips entirely unless the version is a snapshot
    2. Clones the snapshot branch (or verifies an existing working copy)
    3. Hard resets it to the pinned ref
    4. Copies the artifact subtree over it
    5. Stages the configured pattern
    6. Commits (or applies the on-empty policy)
    7. Force-pushes, only if a commit was created

    The remote branch has no locking: two concurrent runs both force-push
    and the last one wins, unless the push uses a lease.
    """

    name = "publish-snapshots"
    description = "Publish snapshot artifacts to the snapshot git branch"
    safe_parallel = False

    def __init__(self, config: SnapshotPublishConfig):
        """Initialize the publishing pipeline from its configuration."""
        super().__init__()
        self.config = config

        self.when(IsSnapshotVersion(config.version, config.snapshot_suffix))

        self.branch(
            when=not_(HasGitDirectory()),
            then=CloneAction(),
            else_=VerifyWorkingCopyAction()
        )

        self.then(ResetAction(config.pinned_ref))
        self.then(SyncArtifactsAction(config.artifact_root, config.artifact_subtree))
        self.then(GitAddAction(config.stage_pattern))
        self.then(GitCommitAction(config.commit, on_empty=config.on_empty))
        self.then_if(CommitCreated(), GitPushAction(config.push))
