"""Git command execution."""

import os
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from .errors import CommandFailed, CommandTimedOut, WorkingDirectoryMissing

logger = logging.getLogger('snapshot_publisher')

# Non-interactive, key-based transport for clone and push
GIT_SSH_COMMAND = (
    "ssh "
    "-o StrictHostKeyChecking=no "
    "-o PreferredAuthentications=publickey "
    "-o IdentitiesOnly=yes"
)

DEFAULT_GIT_ENV: Dict[str, str] = {
    'GIT_SSH_COMMAND': GIT_SSH_COMMAND,
    'GIT_TERMINAL_PROMPT': '0',
    # Untranslated messages; the clone step matches git's stderr
    'LC_ALL': 'C',
}

DEFAULT_TIMEOUT = 300


@dataclass
class GitOutput:
    """Output of a successful git invocation."""
    command: List[str]
    stdout: str = ""
    stderr: str = ""

    @property
    def command_line(self) -> str:
        return ' '.join(self.command)


class GitRunner(Protocol):
    """Runs one git command in a working directory."""

    def run(
        self,
        work_dir: Union[str, Path],
        args: List[str],
        env: Optional[Dict[str, str]] = None
    ) -> GitOutput:
        ...


class SubprocessGitRunner:
    """Run git as a synchronous child process.

    Raises CommandFailed on any nonzero exit. Nothing is retried.
    """

    def __init__(
        self,
        executable: str = "git",
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        base_env: Optional[Dict[str, str]] = None
    ):
        """Initialize the runner.

        Args:
            executable: Git executable name or path
            timeout: Per-command timeout in seconds (None disables it)
            base_env: Environment merged over os.environ for every command
                (defaults to the non-interactive SSH settings)
        """
        self.executable = executable
        self.timeout = timeout
        self.base_env = dict(DEFAULT_GIT_ENV if base_env is None else base_env)

    def build_env(self, overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Merge the inherited environment with the runner and call overrides."""
        env = os.environ.copy()
        env.update(self.base_env)
        if overrides:
            env.update(overrides)
        return env

    def run(
        self,
        work_dir: Union[str, Path],
        args: List[str],
        env: Optional[Dict[str, str]] = None
    ) -> GitOutput:
        """Execute `git <args>` in work_dir.

        Args:
            work_dir: Directory the command runs in (must exist)
            args: Arguments after the git executable
            env: Extra environment variables for this command

        Returns:
            GitOutput with captured stdout/stderr

        Raises:
            CommandFailed: If git exits nonzero or cannot be started
            CommandTimedOut: If git does not finish within the timeout
            WorkingDirectoryMissing: If work_dir does not exist
        """
        command = [self.executable] + list(args)
        logger.info(f"Running git with `{' '.join(command)}`")

        if not os.path.isdir(work_dir):
            raise WorkingDirectoryMissing(command, str(work_dir))

        try:
            result = subprocess.run(
                command,
                cwd=work_dir,
                env=self.build_env(env),
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            raise CommandTimedOut(command, self.timeout)
        except FileNotFoundError as e:
            raise CommandFailed(127, command, str(e))

        if result.returncode != 0:
            logger.debug(f"git stderr: {result.stderr.strip()}")
            raise CommandFailed(result.returncode, command, result.stderr)

        return GitOutput(command=command, stdout=result.stdout, stderr=result.stderr)
