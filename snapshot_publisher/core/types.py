"""Core types for the publishing pipeline."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional, TYPE_CHECKING
from enum import Enum

if TYPE_CHECKING:
    from ..config import SnapshotPublishConfig, SamplesUpdateConfig
    from .runner import GitRunner


class Status(Enum):
    """Status of an action execution."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ActionResult:
    """Result of a single action execution with rich metadata."""
    status: Status
    message: str
    action_name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        """Check if action was successful."""
        return self.status == Status.SUCCESS

    @property
    def skipped(self) -> bool:
        """Check if action was skipped."""
        return self.status == Status.SKIPPED

    @property
    def failed(self) -> bool:
        """Check if action failed."""
        return self.status == Status.FAILED


@dataclass(frozen=True)
class RepositoryHandle:
    """Local working copy of one branch of a remote git repository."""
    local_path: Path
    remote_uri: str
    branch: str

    @property
    def git_dir(self) -> Path:
        return self.local_path / '.git'

    def is_cloned(self) -> bool:
        """Check if the working copy already holds a git repository."""
        return self.git_dir.is_dir()


@dataclass
class PipelineContext:
    """Execution context passed through a pipeline.

    Accumulates the results of each action and gives actions access to the
    command runner, the configuration and the working copy.
    """
    runner: 'GitRunner'
    dry_run: bool = False
    handle: Optional[RepositoryHandle] = None
    publish_config: Optional['SnapshotPublishConfig'] = None
    samples_config: Optional['SamplesUpdateConfig'] = None
    variables: Dict[str, Any] = field(default_factory=dict)
    results: List[ActionResult] = field(default_factory=list)

    def get_variable(self, name: str, default: Any = None) -> Any:
        """Get a variable from the context."""
        return self.variables.get(name, default)

    def set_variable(self, name: str, value: Any) -> None:
        """Set a variable in the context."""
        self.variables[name] = value

    def add_result(self, result: ActionResult) -> None:
        """Add an action result to the context."""
        self.results.append(result)

    @property
    def last_result(self) -> Optional[ActionResult]:
        """Get the most recent action result."""
        return self.results[-1] if self.results else None

    def require_handle(self) -> RepositoryHandle:
        """Get the repository handle, failing if the pipeline has none."""
        if self.handle is None:
            raise RuntimeError("Pipeline context has no repository handle")
        return self.handle
