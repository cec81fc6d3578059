"""Sample project maintenance pipelines."""

from .base import Pipeline
from ..config import SamplesUpdateConfig
from ..actions.samples import UpdateSampleVersionsAction


class SamplesUpdatePipeline(Pipeline):
    """Rewrite version properties of every sample in the given directories."""

    name = "update-samples"
    description = "Substitute plugin and library versions in sample projects"
    safe_parallel = True

    def __init__(self, config: SamplesUpdateConfig):
        super().__init__()
        self.config = config

        for directory in config.directories:
            self.then(UpdateSampleVersionsAction(directory, config.versions))
