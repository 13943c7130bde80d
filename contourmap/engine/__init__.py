"""contourmap marching-squares engine."""

from contourmap.engine.config import PipelineConfig
from contourmap.engine.context import Mode, PipelineContext
from contourmap.engine.partition import Partition, partition_range
from contourmap.engine.pipeline import Pipeline, create_pipeline, process_file, summarize
from contourmap.engine.registry import get_registry, stage
from contourmap.engine.worker import WorkerError

__all__ = [
    "PipelineConfig",
    "Mode",
    "PipelineContext",
    "Partition",
    "partition_range",
    "Pipeline",
    "create_pipeline",
    "process_file",
    "summarize",
    "get_registry",
    "stage",
    "WorkerError",
]
