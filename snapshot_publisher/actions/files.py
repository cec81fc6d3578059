"""Filesystem actions (artifact sync)."""

import shutil
import logging
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from .base import Action
from ..core.artifacts import ArtifactSet
from ..core.types import ActionResult, Status

if TYPE_CHECKING:
    from ..core.types import PipelineContext

logger = logging.getLogger('snapshot_publisher')


class SyncArtifactsAction(Action):
    """Overlay the built artifacts onto the reset working copy.

    Files are copied to the same relative path under the working copy,
    overwriting what is there. Anything outside the artifact subtree is left
    untouched.
    """

    name = "sync"
    description = "Copy built artifacts into the working copy"

    def __init__(
        self,
        root: Optional[Path] = None,
        subtree: str = "org",
        artifacts: Optional[ArtifactSet] = None
    ):
        """Initialize sync action.

        Args:
            root: Build output directory scanned when the action runs
            subtree: Top-level directory collected from root
            artifacts: Explicit artifact set (takes precedence over root)
        """
        if root is None and artifacts is None:
            raise ValueError("SyncArtifactsAction needs an artifact root or an artifact set")
        self.root = Path(root) if root is not None else None
        self.subtree = artifacts.subtree if artifacts is not None else subtree
        self.artifacts = artifacts

    def collect(self) -> ArtifactSet:
        """Get the artifact set, scanning the artifact root if needed."""
        if self.artifacts is not None:
            return self.artifacts
        return ArtifactSet.from_directory(self.root, self.subtree)

    def execute(self, ctx: 'PipelineContext') -> ActionResult:
        handle = ctx.require_handle()

        try:
            artifacts = self.collect()
        except ValueError as e:
            return ActionResult(
                status=Status.FAILED,
                message=f"{self.name} failed: {e}",
                action_name=self.name,
                metadata={'error': str(e)}
            )

        if ctx.dry_run:
            return self.dry_run_result(ctx, files=len(artifacts))

        copied = 0
        try:
            for source, destination in artifacts:
                target = handle.local_path.joinpath(*destination.parts)
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source, target)
                logger.debug(f"Copied {source} -> {destination}")
                copied += 1
        except OSError as e:
            return ActionResult(
                status=Status.FAILED,
                message=f"{self.name} failed after {copied} file(s): {e}",
                action_name=self.name,
                metadata={'copied': copied, 'error': str(e)}
            )

        return ActionResult(
            status=Status.SUCCESS,
            message=f"Copied {copied} file(s) into {self.subtree}/",
            action_name=self.name,
            metadata={'copied': copied, 'subtree': self.subtree}
        )

    def dry_run_message(self, ctx: 'PipelineContext') -> str:
        source = self.root if self.root is not None else "artifact set"
        return f"Would copy {self.subtree}/ from {source} into {ctx.require_handle().local_path}"
