"""Core package for snapshot_publisher."""

from .types import (
    Status,
    ActionResult,
    RepositoryHandle,
    PipelineContext,
)

from .errors import (
    PublishError,
    CommandFailed,
    CommandTimedOut,
    WorkingDirectoryMissing,
    ResolutionFailure,
    PreconditionUnmet,
)

from .artifacts import ArtifactSet
from .runner import GitRunner, GitOutput, SubprocessGitRunner, GIT_SSH_COMMAND
from .logger import setup_logging

__all__ = [
    # Types
    'Status',
    'ActionResult',
    'RepositoryHandle',
    'PipelineContext',
    # Errors
    'PublishError',
    'CommandFailed',
    'CommandTimedOut',
    'WorkingDirectoryMissing',
    'ResolutionFailure',
    'PreconditionUnmet',
    # Artifacts
    'ArtifactSet',
    # Runner
    'GitRunner',
    'GitOutput',
    'SubprocessGitRunner',
    'GIT_SSH_COMMAND',
    # Logging
    'setup_logging',
]
