"""Pipelines package for composable publishing operations."""

from .base import Pipeline, PipelineStep, Branch

from .executor import PipelineExecutor, PipelineRun

from .registry import PipelineRegistry, pipeline_registry

from .git_ops import SnapshotPublishPipeline

from .samples_ops import SamplesUpdatePipeline

__all__ = [
    # Base
    'Pipeline',
    'PipelineStep',
    'Branch',
    # Executor
    'PipelineExecutor',
    'PipelineRun',
    # Registry
    'PipelineRegistry',
    'pipeline_registry',
    # Publishing
    'SnapshotPublishPipeline',
    # Samples
    'SamplesUpdatePipeline',
]
