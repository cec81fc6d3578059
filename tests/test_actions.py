"""Tests for the individual publishing steps."""

from pathlib import Path

import pytest

from snapshot_publisher.actions.files import SyncArtifactsAction
from snapshot_publisher.actions.git import (
    CloneAction,
    GitAddAction,
    GitCommitAction,
    GitPushAction,
    ResetAction,
    VerifyWorkingCopyAction,
)
from snapshot_publisher.config import CommitSpec, OnEmptyChanges, PushSpec
from snapshot_publisher.core.artifacts import ArtifactSet
from snapshot_publisher.core.types import RepositoryHandle, Status

from .conftest import BRANCH, JAR, NEW_COMMIT, PINNED, REMOTE_URI


class TestCloneAction:
    def test_clones_branch_into_working_copy(self, make_context, fake_runner, tmp_path: Path) -> None:
        target = tmp_path / "fresh"
        ctx = make_context(handle=RepositoryHandle(target, REMOTE_URI, BRANCH))

        result = CloneAction().execute(ctx)

        assert result.success
        assert fake_runner.calls[0][0] == tmp_path
        assert fake_runner.commands == [["clone", "--branch", BRANCH, REMOTE_URI, str(target)]]

    def test_failure_reports_command_and_exit_code(self, make_context, fake_runner, tmp_path: Path) -> None:
        fake_runner.fail("clone", exit_code=128, stderr="Permission denied (publickey)")
        ctx = make_context(handle=RepositoryHandle(tmp_path / "fresh", REMOTE_URI, BRANCH))

        result = CloneAction().execute(ctx)

        assert result.failed
        assert result.metadata["returncode"] == 128
        assert result.metadata["command"].startswith("git clone --branch snapshots")
        assert "clone failed" in result.message
        assert "128" in result.message

    def test_missing_branch_is_a_resolution_failure(
        self, make_context, fake_runner, tmp_path: Path
    ) -> None:
        fake_runner.fail(
            "clone", exit_code=128,
            stderr="fatal: Remote branch snapshots not found in upstream origin\n"
        )
        ctx = make_context(handle=RepositoryHandle(tmp_path / "fresh", REMOTE_URI, BRANCH))

        result = CloneAction().execute(ctx)

        assert result.failed
        assert result.metadata["resolution_failure"] is True
        assert result.metadata["ref"] == BRANCH
        assert result.metadata["returncode"] == 128
        assert result.metadata["command"].startswith("git clone --branch snapshots")
        assert "Cannot resolve 'snapshots'" in result.message

    def test_dry_run_spawns_nothing(self, make_context, fake_runner) -> None:
        result = CloneAction().execute(make_context(dry_run=True))

        assert result.success
        assert result.metadata["dry_run"] is True
        assert fake_runner.calls == []


class TestVerifyWorkingCopyAction:
    def test_matching_working_copy(self, make_context, fake_runner) -> None:
        result = VerifyWorkingCopyAction().execute(make_context())

        assert result.success
        assert result.metadata["cloned"] is False
        assert "clone" not in fake_runner.subcommands

    def test_foreign_remote_is_a_resolution_failure(self, make_context, fake_runner) -> None:
        fake_runner.respond("config", "--get", "remote.origin.url", stdout="git@example.com:x/y.git\n")

        result = VerifyWorkingCopyAction().execute(make_context())

        assert result.failed
        assert result.metadata["resolution_failure"] is True

    def test_other_branch_is_a_resolution_failure(self, make_context, fake_runner) -> None:
        fake_runner.respond("rev-parse", "--abbrev-ref", "HEAD", stdout="master\n")

        result = VerifyWorkingCopyAction().execute(make_context())

        assert result.failed
        assert "master" in result.message


class TestResetAction:
    def test_verifies_then_hard_resets(self, make_context, fake_runner) -> None:
        ctx = make_context()

        result = ResetAction(PINNED).execute(ctx)

        assert result.success
        assert fake_runner.commands == [
            ["rev-parse", "--verify", "--quiet", f"{PINNED}^{{commit}}"],
            ["reset", "--hard", PINNED],
            ["clean", "-fdx"],
        ]
        assert ctx.get_variable("base_commit") == PINNED

    def test_unknown_ref_is_a_resolution_failure(self, make_context, fake_runner) -> None:
        fake_runner.fail("rev-parse", "--verify", exit_code=1)

        result = ResetAction("missing").execute(make_context())

        assert result.failed
        assert result.metadata["resolution_failure"] is True
        assert result.metadata["ref"] == "missing"
        assert "Cannot resolve 'missing'" in result.message
        assert "reset" not in fake_runner.subcommands


class TestGitAddAction:
    def test_stages_pattern(self, make_context, fake_runner) -> None:
        result = GitAddAction("*").execute(make_context())

        assert result.success
        assert fake_runner.commands == [["add", "*"]]


class TestGitCommitAction:
    def test_commits_staged_changes(self, make_context, fake_runner) -> None:
        ctx = make_context()

        result = GitCommitAction(CommitSpec()).execute(ctx)

        assert result.success
        assert ["commit", "-m", "Publishing new snapshot"] in fake_runner.commands
        assert ctx.get_variable("committed") is True
        assert ctx.get_variable("new_commit") == NEW_COMMIT
        assert result.metadata["files"] == 1

    def test_counts_staged_paths_with_spaces(self, make_context, fake_runner) -> None:
        fake_runner.respond(
            "diff", "--cached", "--name-only",
            stdout="org/lib/1.0-SNAPSHOT/my lib.jar\norg/lib/1.0-SNAPSHOT/my lib.pom\n"
        )

        result = GitCommitAction(CommitSpec()).execute(make_context())

        assert result.metadata["files"] == 2

    def test_amend(self, make_context, fake_runner) -> None:
        GitCommitAction(CommitSpec(message="msg", amend=True)).execute(make_context())

        assert ["commit", "--amend", "-m", "msg"] in fake_runner.commands

    def test_nothing_staged_skip_policy(self, make_context, fake_runner) -> None:
        fake_runner.respond("diff", "--cached", "--name-only", stdout="")
        ctx = make_context()

        result = GitCommitAction(CommitSpec(), on_empty=OnEmptyChanges.SKIP).execute(ctx)

        assert result.status is Status.SKIPPED
        assert "commit" not in fake_runner.subcommands
        assert ctx.get_variable("committed") is None

    def test_nothing_staged_fail_policy(self, make_context, fake_runner) -> None:
        fake_runner.respond("diff", "--cached", "--name-only", stdout="")

        result = GitCommitAction(CommitSpec(), on_empty=OnEmptyChanges.FAIL).execute(make_context())

        assert result.failed
        assert "commit" not in fake_runner.subcommands


class TestGitPushAction:
    def test_force_push(self, make_context, fake_runner) -> None:
        result = GitPushAction(PushSpec()).execute(make_context())

        assert result.success
        assert fake_runner.commands == [["push", "--force"]]

    def test_lease_pins_remote_tip_from_clone(self, make_context, fake_runner) -> None:
        ctx = make_context()

        result = GitPushAction(PushSpec(lease=True)).execute(ctx)

        assert result.success
        assert fake_runner.commands[-1] == [
            "push", f"--force-with-lease={BRANCH}:{PINNED}", "origin", BRANCH,
        ]
        assert ctx.get_variable("lease_expected") == PINNED

    def test_rejected_push_fails(self, make_context, fake_runner) -> None:
        fake_runner.fail("push", exit_code=1, stderr="! [rejected] (stale info)")

        result = GitPushAction(PushSpec(lease=True)).execute(make_context())

        assert result.failed
        assert "stale info" in result.metadata["stderr"]


class TestSyncArtifactsAction:
    def test_copies_subtree_and_leaves_other_files(
        self, make_context, artifact_root: Path, working_copy: Path
    ) -> None:
        unrelated = working_copy / "README.md"
        unrelated.write_text("keep me")
        stale = working_copy / JAR
        stale.parent.mkdir(parents=True)
        stale.write_bytes(b"old")

        result = SyncArtifactsAction(artifact_root, "org").execute(make_context())

        assert result.success
        assert result.metadata["copied"] == 1
        assert (working_copy / JAR).read_bytes() == b"jar-content"
        assert unrelated.read_text() == "keep me"
        assert not (working_copy / "com").exists()

    def test_explicit_artifact_set(self, make_context, tmp_path: Path, working_copy: Path) -> None:
        source = tmp_path / "built.pom"
        source.write_text("<project/>")
        artifacts = ArtifactSet(subtree="org")
        artifacts.add(source, "org/lib/1.0-SNAPSHOT/lib.pom")

        result = SyncArtifactsAction(artifacts=artifacts).execute(make_context())

        assert result.success
        assert (working_copy / "org/lib/1.0-SNAPSHOT/lib.pom").read_text() == "<project/>"

    def test_missing_artifact_root_fails(self, make_context, tmp_path: Path) -> None:
        result = SyncArtifactsAction(tmp_path / "missing", "org").execute(make_context())

        assert result.failed
        assert "does not exist" in result.message

    def test_requires_root_or_artifacts(self) -> None:
        with pytest.raises(ValueError):
            SyncArtifactsAction()

    def test_dry_run_copies_nothing(self, make_context, artifact_root: Path, working_copy: Path) -> None:
        result = SyncArtifactsAction(artifact_root, "org").execute(make_context(dry_run=True))

        assert result.success
        assert result.metadata["files"] == 1
        assert not (working_copy / "org").exists()
