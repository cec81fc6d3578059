"""Pipeline executor: prepares the working copy and runs pipelines."""

import shutil
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .base import Pipeline
from .git_ops import SnapshotPublishPipeline
from .samples_ops import SamplesUpdatePipeline
from ..config import SnapshotPublishConfig, SamplesUpdateConfig
from ..core.errors import PreconditionUnmet
from ..core.runner import GitRunner, SubprocessGitRunner
from ..core.types import PipelineContext, RepositoryHandle, ActionResult, Status

logger = logging.getLogger('snapshot_publisher')

WORKING_COPY_PREFIX = "snapshot-repo"


@dataclass
class PipelineRun:
    """Outcome of one pipeline invocation."""
    pipeline: str
    result: ActionResult
    context: PipelineContext

    @property
    def success(self) -> bool:
        return self.result.success

    @property
    def skipped(self) -> bool:
        return self.result.skipped

    @property
    def failed(self) -> bool:
        return self.result.failed

    @property
    def failed_step(self) -> Optional[str]:
        """Name of the step that aborted the run, if any."""
        return self.result.action_name if self.result.failed else None


class PipelineExecutor:
    """Executor for the publishing and samples pipelines.

    Each publish run owns its working copy exclusively: unless a work
    directory is configured, a fresh temporary directory is created per run.
    """

    def __init__(self, runner: Optional[GitRunner] = None, dry_run: bool = False):
        """Initialize pipeline executor.

        Args:
            runner: Git command runner (defaults to SubprocessGitRunner)
            dry_run: If True, preview without executing
        """
        self.runner = runner if runner is not None else SubprocessGitRunner()
        self.dry_run = dry_run

    def publish_snapshots(
        self,
        config: SnapshotPublishConfig,
        pipeline: Optional[Pipeline] = None
    ) -> PipelineRun:
        """Run the snapshot publishing pipeline.

        When the version is not a snapshot the run is skipped before any
        directory is created or any process is spawned.

        Args:
            config: Publishing configuration
            pipeline: Pipeline to run (defaults to SnapshotPublishPipeline)

        Returns:
            PipelineRun holding the final result and every step result

        Raises:
            PreconditionUnmet: If parallel execution was requested
        """
        pipeline = pipeline or SnapshotPublishPipeline(config)

        if config.parallel and not pipeline.safe_parallel:
            raise PreconditionUnmet(
                f"Pipeline '{pipeline.name}' must not run in parallel mode; "
                "publishing should be done without --parallel"
            )

        ctx = PipelineContext(
            runner=self.runner,
            dry_run=self.dry_run,
            publish_config=config
        )

        skip_reason = pipeline.should_skip(ctx)
        if skip_reason:
            logger.info(f"⊘ {pipeline.name}: {skip_reason}")
            return PipelineRun(
                pipeline=pipeline.name,
                result=ActionResult(
                    status=Status.SKIPPED,
                    message=skip_reason,
                    action_name=pipeline.name
                ),
                context=ctx
            )

        local_path, temporary = self._prepare_working_copy(config)
        ctx.handle = RepositoryHandle(
            local_path=local_path,
            remote_uri=config.remote_uri,
            branch=config.branch
        )

        logger.info(f"Executing pipeline: {pipeline.name}")
        logger.info(f"  Remote: {config.remote_uri} ({config.branch})")
        logger.info(f"  Pinned ref: {config.pinned_ref}")
        logger.info(f"  Version: {config.version}")
        logger.info(f"  Working copy: {local_path}")

        result = self._execute(pipeline, ctx)
        self._cleanup(config, local_path, temporary, result)

        return PipelineRun(pipeline=pipeline.name, result=result, context=ctx)

    def update_samples(self, config: SamplesUpdateConfig) -> PipelineRun:
        """Run the samples version substitution pipeline."""
        pipeline = SamplesUpdatePipeline(config)
        ctx = PipelineContext(
            runner=self.runner,
            dry_run=self.dry_run,
            samples_config=config
        )

        logger.info(f"Executing pipeline: {pipeline.name}")
        for key, value in sorted(config.versions.items()):
            logger.info(f"  {key} = {value}")

        result = self._execute(pipeline, ctx)
        return PipelineRun(pipeline=pipeline.name, result=result, context=ctx)

    def _execute(self, pipeline: Pipeline, ctx: PipelineContext) -> ActionResult:
        try:
            return pipeline.execute(ctx)
        except Exception as e:
            logger.error(f"Unexpected error in {pipeline.name}: {e}", exc_info=True)
            result = ActionResult(
                status=Status.FAILED,
                message=f"Unexpected error: {e}",
                action_name=pipeline.name
            )
            ctx.add_result(result)
            return result

    def _prepare_working_copy(self, config: SnapshotPublishConfig) -> Tuple[Path, bool]:
        """Pick the working copy directory.

        Returns:
            (path, temporary) where temporary means the directory was created
            for this run and may be deleted afterwards
        """
        if config.work_dir is not None:
            if not self.dry_run:
                config.work_dir.mkdir(parents=True, exist_ok=True)
            return config.work_dir, False

        if self.dry_run:
            return Path(tempfile.gettempdir()) / WORKING_COPY_PREFIX, False

        return Path(tempfile.mkdtemp(prefix=WORKING_COPY_PREFIX)), True

    def _cleanup(
        self,
        config: SnapshotPublishConfig,
        local_path: Path,
        temporary: bool,
        result: ActionResult
    ) -> None:
        if not temporary:
            return
        if result.failed:
            logger.warning(f"Working copy kept for inspection: {local_path}")
            return
        if config.keep_working_copy:
            logger.info(f"Working copy kept: {local_path}")
            return
        shutil.rmtree(local_path, ignore_errors=True)
        logger.debug(f"Removed working copy {local_path}")
