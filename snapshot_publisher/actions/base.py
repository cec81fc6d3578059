"""Base class for actions."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..core.types import ActionResult, Status

if TYPE_CHECKING:
    from ..core.types import PipelineContext
    from ..core.errors import CommandFailed, ResolutionFailure


class Action(ABC):
    """Base class for actions that perform one publishing step.

    Actions are single-responsibility units of work that can be composed
    into pipelines. Each action should do one thing well.
    """

    # Name used for logging and identification
    name: str = "base"
    # Description of what this action does
    description: str = "Base action"

    @abstractmethod
    def execute(self, ctx: 'PipelineContext') -> ActionResult:
        """Execute the action.

        Args:
            ctx: Pipeline context with all necessary data

        Returns:
            ActionResult indicating success/failure/skip
        """
        pass

    def dry_run_message(self, ctx: 'PipelineContext') -> str:
        """Get the message to display in dry-run mode.

        Override this to provide a more specific message.
        """
        return f"Would execute {self.name}"

    def dry_run_result(self, ctx: 'PipelineContext', **metadata) -> ActionResult:
        """Build the result returned instead of executing in dry-run mode."""
        metadata['dry_run'] = True
        return ActionResult(
            status=Status.SUCCESS,
            message=self.dry_run_message(ctx),
            action_name=self.name,
            metadata=metadata
        )

    def command_failure(self, error: 'CommandFailed', **metadata) -> ActionResult:
        """Build a FAILED result naming this step, the command and its exit code."""
        metadata.update({
            'command': error.command_line,
            'returncode': error.exit_code,
            'stderr': error.stderr,
        })
        return ActionResult(
            status=Status.FAILED,
            message=f"{self.name} failed: {error}",
            action_name=self.name,
            metadata=metadata
        )

    def resolution_failure(self, error: 'ResolutionFailure', **metadata) -> ActionResult:
        """Build a FAILED result for a ref or remote that could not be resolved."""
        metadata.update({'ref': error.ref, 'resolution_failure': True})
        return ActionResult(
            status=Status.FAILED,
            message=f"{self.name} failed: {error}",
            action_name=self.name,
            metadata=metadata
        )
