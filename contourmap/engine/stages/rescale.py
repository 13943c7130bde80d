"""Rescale — resample the owned canvas rows from an oversized source.

Canvas row i, column j takes u = i/(rescale_x - 1), v = j/(rescale_y - 1).
"""

from __future__ import annotations

import logging

import numpy as np

from contourmap.engine.context import Mode, PipelineContext
from contourmap.engine.registry import stage
from contourmap.engine.worker import Worker

logger = logging.getLogger(__name__)


@stage(
    id="rescale",
    modes={Mode.RESCALED},
    description="Resample the worker's canvas rows from the source",
)
def rescale(ctx: PipelineContext, worker: Worker) -> None:
    cfg = ctx.config
    canvas = ctx.canvas
    if canvas is None:
        raise RuntimeError("rescale stage needs a canvas")

    rows = worker.partition.range(cfg.rescale_x)
    logger.debug("worker %d: rescale rows [%d, %d)", worker.id, rows.start, rows.stop)

    vs = np.arange(cfg.rescale_y, dtype=np.float64) / (cfg.rescale_y - 1)
    for lo in range(rows.start, rows.stop, cfg.rescale_chunk_rows):
        hi = min(lo + cfg.rescale_chunk_rows, rows.stop)
        us = np.arange(lo, hi, dtype=np.float64) / (cfg.rescale_x - 1)
        canvas[lo:hi] = ctx.resampler(ctx.source, us, vs)
