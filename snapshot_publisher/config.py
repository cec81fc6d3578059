"""Configuration management for the snapshot publisher."""

import os
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional
from dataclasses import dataclass, field


class OnEmptyChanges(Enum):
    """What to do when the sync step produced nothing to commit."""
    SKIP = "skip"
    FAIL = "fail"


DEFAULT_BRANCH = "snapshots"
DEFAULT_ARTIFACT_SUBTREE = "org"
DEFAULT_STAGE_PATTERN = "*"
DEFAULT_COMMIT_MESSAGE = "Publishing new snapshot"
SNAPSHOT_SUFFIX = "-SNAPSHOT"

# Version keys substituted by --tools-version
TOOLS_VERSION_KEYS = (
    "native.gradle.plugin.version",
    "native.maven.plugin.version",
    "junit.platform.native.version",
)


@dataclass(frozen=True)
class CommitSpec:
    """How the publishing commit is created."""
    message: str = DEFAULT_COMMIT_MESSAGE
    amend: bool = False


@dataclass(frozen=True)
class PushSpec:
    """How the snapshot branch is published.

    The branch is rebuilt from the pinned ref on every run, so it is always
    force-pushed. With lease=True the push only succeeds if the remote tip is
    still the one observed when the working copy was cloned.
    """
    force: bool = True
    lease: bool = False


@dataclass
class SnapshotPublishConfig:
    """Configuration for one snapshot publishing run.

    Merges environment variables with CLI arguments.
    CLI arguments take precedence over environment variables.
    """

    remote_uri: str
    pinned_ref: str
    artifact_root: Path
    version: str
    branch: str = DEFAULT_BRANCH
    artifact_subtree: str = DEFAULT_ARTIFACT_SUBTREE
    stage_pattern: str = DEFAULT_STAGE_PATTERN
    commit: CommitSpec = field(default_factory=CommitSpec)
    push: PushSpec = field(default_factory=PushSpec)
    on_empty: OnEmptyChanges = OnEmptyChanges.SKIP
    work_dir: Optional[Path] = None
    keep_working_copy: bool = False
    snapshot_suffix: str = SNAPSHOT_SUFFIX
    parallel: bool = False

    @classmethod
    def from_env_and_args(
        cls,
        remote_uri: Optional[str] = None,
        branch: Optional[str] = None,
        pinned_ref: Optional[str] = None,
        artifact_root: Optional[str] = None,
        version: Optional[str] = None,
        work_dir: Optional[str] = None,
        on_empty: Optional[str] = None,
        amend: bool = False,
        lease: bool = False,
        keep_working_copy: bool = False,
        parallel: bool = False
    ) -> 'SnapshotPublishConfig':
        """Create config from environment variables and CLI arguments.

        CLI arguments override environment variables.

        Args:
            remote_uri: Remote repository URI (overrides SNAPSHOT_REMOTE_URI)
            branch: Snapshot branch (overrides SNAPSHOT_BRANCH)
            pinned_ref: Commit the branch is reset to (overrides SNAPSHOT_PINNED_REF)
            artifact_root: Directory holding built artifacts (overrides SNAPSHOT_ARTIFACT_ROOT)
            version: Version of the artifacts (overrides SNAPSHOT_VERSION)
            work_dir: Working copy location (overrides SNAPSHOT_WORK_DIR)
            on_empty: 'skip' or 'fail' (overrides SNAPSHOT_ON_EMPTY)
            amend: Amend the previous commit instead of adding one
            lease: Use --force-with-lease instead of a plain force push
            keep_working_copy: Never delete the temporary working copy
            parallel: Whether the caller requested parallel execution

        Returns:
            SnapshotPublishConfig instance

        Raises:
            ValueError: If required config is missing or invalid
        """
        final_remote = remote_uri or os.getenv('SNAPSHOT_REMOTE_URI')
        final_branch = branch or os.getenv('SNAPSHOT_BRANCH') or DEFAULT_BRANCH
        final_ref = pinned_ref or os.getenv('SNAPSHOT_PINNED_REF')
        final_root = artifact_root or os.getenv('SNAPSHOT_ARTIFACT_ROOT')
        final_version = version or os.getenv('SNAPSHOT_VERSION')
        final_work_dir = work_dir or os.getenv('SNAPSHOT_WORK_DIR')
        final_on_empty = on_empty or os.getenv('SNAPSHOT_ON_EMPTY') or OnEmptyChanges.SKIP.value

        required = [
            (final_remote, "Remote URI", "SNAPSHOT_REMOTE_URI", "--remote-uri"),
            (final_ref, "Pinned ref", "SNAPSHOT_PINNED_REF", "--pinned-ref"),
            (final_root, "Artifact root", "SNAPSHOT_ARTIFACT_ROOT", "--artifact-root"),
            (final_version, "Artifact version", "SNAPSHOT_VERSION", "--version"),
        ]
        for value, label, env_var, flag in required:
            if not value:
                raise ValueError(
                    f"{label} is required. Set {env_var} in .env or use {flag}"
                )

        try:
            policy = OnEmptyChanges(final_on_empty.lower())
        except ValueError:
            raise ValueError(
                f"Invalid on-empty policy '{final_on_empty}'. Use 'skip' or 'fail'"
            )

        return cls(
            remote_uri=final_remote,
            pinned_ref=final_ref,
            artifact_root=Path(final_root),
            version=final_version,
            branch=final_branch,
            commit=CommitSpec(amend=amend),
            push=PushSpec(force=True, lease=lease),
            on_empty=policy,
            work_dir=Path(final_work_dir) if final_work_dir else None,
            keep_working_copy=keep_working_copy,
            parallel=parallel
        )

    @property
    def is_snapshot(self) -> bool:
        """Check if the configured version denotes a snapshot build."""
        return self.version.endswith(self.snapshot_suffix)


@dataclass
class SamplesUpdateConfig:
    """Which sample directories to rewrite and with which versions."""

    directories: List[Path]
    versions: Dict[str, str]

    @classmethod
    def from_args(
        cls,
        directories: List[str],
        tools_version: Optional[str] = None,
        assignments: Optional[List[str]] = None
    ) -> 'SamplesUpdateConfig':
        """Create config from CLI arguments.

        Args:
            directories: Directories whose children are sample projects
            tools_version: Version applied to every key in TOOLS_VERSION_KEYS
            assignments: Extra KEY=VALUE pairs

        Returns:
            SamplesUpdateConfig instance

        Raises:
            ValueError: If no version is given or an assignment is malformed
        """
        versions: Dict[str, str] = {}
        if tools_version:
            for key in TOOLS_VERSION_KEYS:
                versions[key] = tools_version

        for assignment in assignments or []:
            key, sep, value = assignment.partition('=')
            if not sep or not key.strip() or not value.strip():
                raise ValueError(f"Expected KEY=VALUE, got '{assignment}'")
            versions[key.strip()] = value.strip()

        if not versions:
            raise ValueError("No versions to apply. Use --tools-version or --set KEY=VALUE")

        return cls(directories=[Path(d) for d in directories], versions=versions)
