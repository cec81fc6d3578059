"""Pipeline registry."""

import logging
from typing import Dict, Type, List, Optional

from .base import Pipeline

logger = logging.getLogger('snapshot_publisher')


class PipelineRegistry:
    """Registry of the pipelines exposed on the command line."""

    def __init__(self):
        self._pipelines: Dict[str, Type[Pipeline]] = {}
        self._register_builtin_pipelines()

    def _register_builtin_pipelines(self) -> None:
        """Register all built-in pipelines."""
        from .git_ops import SnapshotPublishPipeline
        from .samples_ops import SamplesUpdatePipeline

        self.register(SnapshotPublishPipeline)
        self.register(SamplesUpdatePipeline)

    def register(self, pipeline_class: Type[Pipeline]) -> None:
        """Register a pipeline class under its name attribute."""
        self._pipelines[pipeline_class.name] = pipeline_class
        logger.debug(f"Registered pipeline: {pipeline_class.name}")

    def get(self, name: str) -> Optional[Type[Pipeline]]:
        """Get a pipeline class by name."""
        return self._pipelines.get(name)

    def list_pipelines(self) -> List[str]:
        """Get sorted list of available pipeline names."""
        return sorted(self._pipelines.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._pipelines


# Global registry instance
pipeline_registry = PipelineRegistry()
