"""Git-related actions (clone, verify, reset, add, commit, push)."""

import logging
from typing import TYPE_CHECKING

from .base import Action
from ..config import OnEmptyChanges, CommitSpec, PushSpec
from ..core.errors import CommandFailed, ResolutionFailure
from ..core.types import ActionResult, Status

if TYPE_CHECKING:
    from ..core.types import PipelineContext

logger = logging.getLogger('snapshot_publisher')

# git clone stderr when --branch names a branch the remote lacks
_MISSING_BRANCH = "not found in upstream origin"


class CloneAction(Action):
    """Clone the snapshot branch into the working copy."""

    name = "clone"
    description = "Clone the snapshot branch from the remote"

    def execute(self, ctx: 'PipelineContext') -> ActionResult:
        """Clone remote_uri restricted to branch into the working copy path."""
        handle = ctx.require_handle()

        if ctx.dry_run:
            return self.dry_run_result(ctx, remote_uri=handle.remote_uri)

        logger.info(f"Cloning {handle.remote_uri} ({handle.branch})...")
        try:
            ctx.runner.run(
                handle.local_path.parent,
                ["clone", "--branch", handle.branch, handle.remote_uri, str(handle.local_path)]
            )
        except CommandFailed as e:
            if _MISSING_BRANCH in e.stderr:
                return self.resolution_failure(
                    ResolutionFailure(
                        handle.branch, f"branch does not exist in {handle.remote_uri}"
                    ),
                    command=e.command_line,
                    returncode=e.exit_code,
                    stderr=e.stderr
                )
            return self.command_failure(e, remote_uri=handle.remote_uri)

        return ActionResult(
            status=Status.SUCCESS,
            message=f"Cloned {handle.branch} into {handle.local_path}",
            action_name=self.name,
            metadata={'remote_uri': handle.remote_uri, 'cloned': True}
        )

    def dry_run_message(self, ctx: 'PipelineContext') -> str:
        handle = ctx.require_handle()
        return f"Would clone {handle.remote_uri} ({handle.branch}) into {handle.local_path}"


class VerifyWorkingCopyAction(Action):
    """Check that an existing working copy tracks the configured remote and branch.

    Runs instead of a clone when the working copy already exists. Only local
    git state is read, no network access happens.
    """

    name = "verify-working-copy"
    description = "Verify existing working copy matches remote and branch"

    def execute(self, ctx: 'PipelineContext') -> ActionResult:
        handle = ctx.require_handle()

        if ctx.dry_run:
            return self.dry_run_result(ctx)

        try:
            origin = ctx.runner.run(
                handle.local_path, ["config", "--get", "remote.origin.url"]
            ).stdout.strip()
            branch = ctx.runner.run(
                handle.local_path, ["rev-parse", "--abbrev-ref", "HEAD"]
            ).stdout.strip()
        except CommandFailed as e:
            return self.command_failure(e)

        if origin != handle.remote_uri:
            return self.resolution_failure(
                ResolutionFailure(
                    'remote.origin.url',
                    f"working copy {handle.local_path} points at {origin or 'no remote'}, "
                    f"expected {handle.remote_uri}"
                ),
                origin=origin
            )
        if branch != handle.branch:
            return self.resolution_failure(
                ResolutionFailure(
                    'HEAD',
                    f"working copy {handle.local_path} is on branch {branch}, "
                    f"expected {handle.branch}"
                ),
                branch=branch
            )

        return ActionResult(
            status=Status.SUCCESS,
            message="Working copy already cloned",
            action_name=self.name,
            metadata={'cloned': False}
        )

    def dry_run_message(self, ctx: 'PipelineContext') -> str:
        return f"Would reuse existing working copy {ctx.require_handle().local_path}"


class ResetAction(Action):
    """Force the working copy onto a pinned commit.

    After the hard reset, untracked and ignored files are removed as well, so
    leftovers of an earlier run in a reused working copy are never staged.
    """

    name = "reset"
    description = "Hard reset the working copy to the pinned ref"

    def __init__(self, ref: str, mode: str = "hard"):
        """Initialize reset action.

        Args:
            ref: Commit hash or symbolic ref to reset to
            mode: git reset mode (default: "hard")
        """
        self.ref = ref
        self.mode = mode

    def execute(self, ctx: 'PipelineContext') -> ActionResult:
        handle = ctx.require_handle()

        if ctx.dry_run:
            return self.dry_run_result(ctx, ref=self.ref)

        try:
            resolved = ctx.runner.run(
                handle.local_path,
                ["rev-parse", "--verify", "--quiet", f"{self.ref}^{{commit}}"]
            ).stdout.strip()
        except CommandFailed as e:
            return self.resolution_failure(
                ResolutionFailure(self.ref, f"not a commit in {handle.branch}"),
                command=e.command_line,
                returncode=e.exit_code
            )

        try:
            ctx.runner.run(handle.local_path, ["reset", f"--{self.mode}", self.ref])
            ctx.runner.run(handle.local_path, ["clean", "-fdx"])
        except CommandFailed as e:
            return self.command_failure(e, ref=self.ref)

        ctx.set_variable('base_commit', resolved)
        return ActionResult(
            status=Status.SUCCESS,
            message=f"Reset to {self.ref}",
            action_name=self.name,
            metadata={'ref': self.ref, 'commit': resolved}
        )

    def dry_run_message(self, ctx: 'PipelineContext') -> str:
        return f"Would reset --{self.mode} to {self.ref}"


class GitAddAction(Action):
    """Stage files for commit."""

    name = "git-add"
    description = "Stage files for commit"

    def __init__(self, pattern: str = "*"):
        """Initialize git add action.

        Args:
            pattern: Pathspec to stage (default: "*" for everything)
        """
        self.pattern = pattern

    def execute(self, ctx: 'PipelineContext') -> ActionResult:
        """Stage files for commit."""
        handle = ctx.require_handle()

        if ctx.dry_run:
            return self.dry_run_result(ctx, pattern=self.pattern)

        try:
            ctx.runner.run(handle.local_path, ["add", self.pattern])
        except CommandFailed as e:
            return self.command_failure(e, pattern=self.pattern)

        return ActionResult(
            status=Status.SUCCESS,
            message=f"Staged files: {self.pattern}",
            action_name=self.name,
            metadata={'pattern': self.pattern}
        )

    def dry_run_message(self, ctx: 'PipelineContext') -> str:
        return f"Would stage files: {self.pattern}"


class GitCommitAction(Action):
    """Commit staged changes.

    When nothing is staged the on_empty policy decides the outcome: SKIP
    reports the step as skipped so the push never happens, FAIL aborts the
    pipeline.
    """

    name = "git-commit"
    description = "Commit staged changes"

    def __init__(self, spec: CommitSpec, on_empty: OnEmptyChanges = OnEmptyChanges.SKIP):
        self.spec = spec
        self.on_empty = on_empty

    def execute(self, ctx: 'PipelineContext') -> ActionResult:
        """Commit staged changes."""
        handle = ctx.require_handle()
        metadata = {'message': self.spec.message, 'amend': self.spec.amend}

        if ctx.dry_run:
            ctx.set_variable('committed', True)
            return self.dry_run_result(ctx, **metadata)

        try:
            staged = ctx.runner.run(
                handle.local_path, ["diff", "--cached", "--name-only"]
            ).stdout.splitlines()
        except CommandFailed as e:
            return self.command_failure(e, **metadata)

        if not staged:
            if self.on_empty is OnEmptyChanges.SKIP:
                return ActionResult(
                    status=Status.SKIPPED,
                    message="Nothing to commit, snapshot is up to date",
                    action_name=self.name,
                    metadata=metadata
                )
            return ActionResult(
                status=Status.FAILED,
                message="Nothing to commit: the sync step produced no changes",
                action_name=self.name,
                metadata=metadata
            )

        args = ["commit"]
        if self.spec.amend:
            args.append("--amend")
        args.extend(["-m", self.spec.message])

        try:
            ctx.runner.run(handle.local_path, args)
            commit = ctx.runner.run(handle.local_path, ["rev-parse", "HEAD"]).stdout.strip()
        except CommandFailed as e:
            return self.command_failure(e, **metadata)

        ctx.set_variable('committed', True)
        ctx.set_variable('new_commit', commit)
        metadata.update({'commit': commit, 'files': len(staged)})
        return ActionResult(
            status=Status.SUCCESS,
            message=f"Committed {len(staged)} file(s) as {commit[:12]}",
            action_name=self.name,
            metadata=metadata
        )

    def dry_run_message(self, ctx: 'PipelineContext') -> str:
        amend = " (amend)" if self.spec.amend else ""
        return f"Would commit{amend} with message: {self.spec.message}"


class GitPushAction(Action):
    """Force-push the rebuilt snapshot branch to the remote."""

    name = "git-push"
    description = "Force-push the snapshot branch"

    def __init__(self, spec: PushSpec):
        self.spec = spec

    def execute(self, ctx: 'PipelineContext') -> ActionResult:
        """Push the branch tip, overwriting the remote branch."""
        handle = ctx.require_handle()

        if ctx.dry_run:
            return self.dry_run_result(ctx, force=self.spec.force, lease=self.spec.lease)

        try:
            args = self._push_args(ctx)
            ctx.runner.run(handle.local_path, args)
        except CommandFailed as e:
            return self.command_failure(e, force=self.spec.force, lease=self.spec.lease)

        return ActionResult(
            status=Status.SUCCESS,
            message=f"Pushed {handle.branch} to {handle.remote_uri}",
            action_name=self.name,
            metadata={'command': ' '.join(['git'] + args), 'commit': ctx.get_variable('new_commit')}
        )

    def _push_args(self, ctx: 'PipelineContext') -> list:
        """Build push arguments; a lease pins the remote tip seen at clone time."""
        handle = ctx.require_handle()
        if self.spec.lease:
            expected = ctx.runner.run(
                handle.local_path, ["rev-parse", f"refs/remotes/origin/{handle.branch}"]
            ).stdout.strip()
            ctx.set_variable('lease_expected', expected)
            return [
                "push",
                f"--force-with-lease={handle.branch}:{expected}",
                "origin",
                handle.branch,
            ]
        if self.spec.force:
            return ["push", "--force"]
        return ["push"]

    def dry_run_message(self, ctx: 'PipelineContext') -> str:
        mode = "with lease" if self.spec.lease else "--force" if self.spec.force else ""
        return f"Would push {ctx.require_handle().branch} {mode}".rstrip()
