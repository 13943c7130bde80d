"""Rendezvous stages — every worker blocks here until all peers arrive."""

from __future__ import annotations

from contourmap.engine.context import Mode, PipelineContext
from contourmap.engine.registry import stage
from contourmap.engine.worker import Worker


@stage(
    id="rescale_barrier",
    modes={Mode.RESCALED},
    dependencies=["rescale"],
    description="Wait until every canvas row is written",
)
def rescale_barrier(ctx: PipelineContext, worker: Worker) -> None:
    # Sampling reads canvas rows that other workers resampled
    worker.rendezvous()


@stage(
    id="grid_barrier",
    dependencies=["sample"],
    description="Wait until the whole sampling grid is written",
)
def grid_barrier(ctx: PipelineContext, worker: Worker) -> None:
    # Stamping reads grid row i + 1 and the last grid row, both written by
    # peers, and overwrites the last pixel row that sampling reads
    worker.rendezvous()
