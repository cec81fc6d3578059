"""Tests for the publishing error types."""

from snapshot_publisher.core.errors import (
    CommandFailed,
    CommandTimedOut,
    PreconditionUnmet,
    PublishError,
    ResolutionFailure,
    WorkingDirectoryMissing,
)


def test_command_failed_names_command_and_exit_code() -> None:
    error = CommandFailed(1, ["git", "push", "--force"], "rejected")

    assert str(error) == "`git push --force` exited with return code 1"
    assert error.command_line == "git push --force"
    assert isinstance(error, PublishError)


def test_timeout_is_a_command_failure_without_exit_code() -> None:
    error = CommandTimedOut(["git", "clone"], 300)

    assert isinstance(error, CommandFailed)
    assert error.exit_code is None
    assert str(error) == "`git clone` timed out after 300s"


def test_resolution_failure() -> None:
    error = ResolutionFailure("abc123", "not a commit in snapshots")

    assert error.ref == "abc123"
    assert str(error) == "Cannot resolve 'abc123': not a commit in snapshots"


def test_precondition_unmet_keeps_reason() -> None:
    error = PreconditionUnmet("publishing must not run in parallel")

    assert error.reason == "publishing must not run in parallel"
    assert isinstance(error, PublishError)


def test_missing_work_dir_message_has_no_exit_code() -> None:
    error = WorkingDirectoryMissing(["git", "status"], "/tmp/gone")

    assert isinstance(error, CommandFailed)
    assert error.exit_code is None
    assert str(error) == "Cannot run `git status`: /tmp/gone does not exist"
    assert error.stderr == "Working directory does not exist: /tmp/gone"
