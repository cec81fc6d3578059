"""Shared fixtures for tests."""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from snapshot_publisher.config import SnapshotPublishConfig
from snapshot_publisher.core.errors import CommandFailed
from snapshot_publisher.core.runner import GitOutput
from snapshot_publisher.core.types import PipelineContext, RepositoryHandle

REMOTE_URI = "git@example.com:org/tools.git"
BRANCH = "snapshots"
PINNED = "a" * 40
NEW_COMMIT = "b" * 40
JAR = "org/lib/1.0-SNAPSHOT/lib.jar"

_SNAPSHOT_ENV_VARS = (
    "SNAPSHOT_REMOTE_URI",
    "SNAPSHOT_BRANCH",
    "SNAPSHOT_PINNED_REF",
    "SNAPSHOT_ARTIFACT_ROOT",
    "SNAPSHOT_VERSION",
    "SNAPSHOT_WORK_DIR",
    "SNAPSHOT_ON_EMPTY",
)


class FakeGitRunner:
    """Records git invocations and answers them from scripted outputs.

    Responses and failures are keyed by argument prefixes; the longest
    matching prefix wins. A successful `clone` creates the target's .git
    directory so later steps see a cloned working copy.
    """

    def __init__(self):
        self.calls: List[Tuple[Path, List[str], Optional[Dict[str, str]]]] = []
        self._outputs: Dict[Tuple[str, ...], str] = {}
        self._failures: Dict[Tuple[str, ...], Tuple[int, str]] = {}

    def respond(self, *prefix: str, stdout: str = "") -> 'FakeGitRunner':
        self._outputs[prefix] = stdout
        return self

    def fail(self, *prefix: str, exit_code: int = 1, stderr: str = "") -> 'FakeGitRunner':
        self._failures[prefix] = (exit_code, stderr)
        return self

    @staticmethod
    def _lookup(table: dict, args: List[str]):
        matches = [p for p in table if tuple(args[:len(p)]) == p]
        if not matches:
            return None
        return table[max(matches, key=len)]

    def run(self, work_dir, args, env=None) -> GitOutput:
        args = list(args)
        self.calls.append((Path(work_dir), args, env))
        command = ["git"] + args

        failure = self._lookup(self._failures, args)
        if failure is not None:
            raise CommandFailed(failure[0], command, failure[1])

        if args and args[0] == "clone":
            (Path(args[-1]) / ".git").mkdir(parents=True, exist_ok=True)

        stdout = self._lookup(self._outputs, args)
        return GitOutput(command=command, stdout=stdout or "")

    @property
    def commands(self) -> List[List[str]]:
        return [args for _, args, _ in self.calls]

    @property
    def subcommands(self) -> List[str]:
        return [args[0] for args in self.commands]


@pytest.fixture(autouse=True)
def _clean_snapshot_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove SNAPSHOT_* env vars so tests don't leak host config."""
    for var in _SNAPSHOT_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def fake_runner() -> FakeGitRunner:
    """Runner scripted for a successful publish of one staged file."""
    runner = FakeGitRunner()
    runner.respond("rev-parse", "--verify", stdout=f"{PINNED}\n")
    runner.respond("diff", "--cached", "--name-only", stdout=f"{JAR}\n")
    runner.respond("rev-parse", "HEAD", stdout=f"{NEW_COMMIT}\n")
    runner.respond("rev-parse", f"refs/remotes/origin/{BRANCH}", stdout=f"{PINNED}\n")
    runner.respond("config", "--get", "remote.origin.url", stdout=f"{REMOTE_URI}\n")
    runner.respond("rev-parse", "--abbrev-ref", "HEAD", stdout=f"{BRANCH}\n")
    return runner


@pytest.fixture
def artifact_root(tmp_path: Path) -> Path:
    """Build output with one snapshot jar under org/ and unrelated files beside it."""
    root = tmp_path / "build" / "snapshots"
    jar = root / JAR
    jar.parent.mkdir(parents=True)
    jar.write_bytes(b"jar-content")
    (root / "com" / "other").mkdir(parents=True)
    (root / "com" / "other" / "ignored.txt").write_text("not published")
    return root


@pytest.fixture
def make_config(tmp_path: Path, artifact_root: Path) -> Callable[..., SnapshotPublishConfig]:
    """Factory fixture: publishing config pointing at the test artifact root."""

    def _make(**overrides) -> SnapshotPublishConfig:
        values = dict(
            remote_uri=REMOTE_URI,
            pinned_ref=PINNED,
            artifact_root=artifact_root,
            version="1.0-SNAPSHOT",
            branch=BRANCH,
            work_dir=tmp_path / "work",
        )
        values.update(overrides)
        return SnapshotPublishConfig(**values)

    return _make


@pytest.fixture
def working_copy(tmp_path: Path) -> Path:
    path = tmp_path / "wc"
    (path / ".git").mkdir(parents=True)
    return path


@pytest.fixture
def make_context(fake_runner: FakeGitRunner, working_copy: Path) -> Callable[..., PipelineContext]:
    """Factory fixture: context on an already-cloned fake working copy."""

    def _make(**overrides) -> PipelineContext:
        values = dict(
            runner=fake_runner,
            handle=RepositoryHandle(local_path=working_copy, remote_uri=REMOTE_URI, branch=BRANCH),
        )
        values.update(overrides)
        return PipelineContext(**values)

    return _make
