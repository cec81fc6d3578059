"""Predicates used by the publishing pipelines."""

from typing import Tuple, TYPE_CHECKING

from .base import Predicate

if TYPE_CHECKING:
    from ..core.types import PipelineContext


class IsSnapshotVersion(Predicate):
    """Check that the artifact version denotes a snapshot build."""

    def __init__(self, version: str, suffix: str = "-SNAPSHOT"):
        """Initialize with the version under test.

        Args:
            version: Artifact version string
            suffix: Suffix that marks a snapshot version
        """
        self.version = version
        self.suffix = suffix

    def check(self, ctx: 'PipelineContext') -> Tuple[bool, str]:
        if self.version.endswith(self.suffix):
            return True, f"Version {self.version} is a snapshot"
        return False, f"Version {self.version} is not a snapshot (no {self.suffix} suffix)"


class HasGitDirectory(Predicate):
    """Check if the working copy already holds a git repository."""

    def check(self, ctx: 'PipelineContext') -> Tuple[bool, str]:
        handle = ctx.require_handle()
        if handle.is_cloned():
            return True, f"{handle.local_path} is a git repository"
        return False, f"{handle.local_path} is not a git repository"


class CommitCreated(Predicate):
    """Check that the commit step produced a commit to publish."""

    def check(self, ctx: 'PipelineContext') -> Tuple[bool, str]:
        if ctx.get_variable('committed', False):
            return True, "A new commit is ready to publish"
        return False, "No new commit to publish"
