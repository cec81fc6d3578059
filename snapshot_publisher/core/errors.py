"""Error types raised while publishing snapshots."""

from typing import List, Optional


class PublishError(Exception):
    """Base class for all publishing errors."""


class CommandFailed(PublishError):
    """An external git command returned a nonzero exit code."""

    def __init__(self, exit_code: Optional[int], command: List[str], stderr: str = ""):
        self.exit_code = exit_code
        self.command = list(command)
        self.stderr = stderr
        super().__init__(
            f"`{self.command_line}` exited with return code {exit_code}"
        )

    @property
    def command_line(self) -> str:
        return ' '.join(self.command)


class CommandTimedOut(CommandFailed):
    """An external git command did not finish within its timeout."""

    def __init__(self, command: List[str], timeout: float):
        self.timeout = timeout
        super().__init__(None, command)
        self.args = (f"`{self.command_line}` timed out after {timeout}s",)


class WorkingDirectoryMissing(CommandFailed):
    """A git command was asked to run in a directory that does not exist."""

    def __init__(self, command: List[str], work_dir: str):
        self.work_dir = work_dir
        super().__init__(None, command, f"Working directory does not exist: {work_dir}")
        self.args = (f"Cannot run `{self.command_line}`: {work_dir} does not exist",)


class ResolutionFailure(PublishError):
    """A ref, branch or remote could not be resolved in the working copy."""

    def __init__(self, ref: str, reason: str):
        self.ref = ref
        self.reason = reason
        super().__init__(f"Cannot resolve '{ref}': {reason}")


class PreconditionUnmet(PublishError):
    """The pipeline refused to run because a precondition does not hold."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
