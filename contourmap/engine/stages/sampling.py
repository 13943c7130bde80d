"""Sampling — threshold the active image into the binary grid.

Grid point (i, j) for i < p, j < q reads pixel (i·step_x, j·step_y). The last
grid column reads the image's last pixel column and the last grid row its last
pixel row, so no cell needs a neighbour past the image edge.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from contourmap.engine.config import PipelineConfig
from contourmap.engine.context import PipelineContext
from contourmap.engine.registry import stage
from contourmap.engine.worker import Worker
from contourmap.utils.contour import threshold_pixels

logger = logging.getLogger(__name__)


def sample_rows(
    image: NDArray[np.uint8],
    grid: NDArray[np.uint8],
    config: PipelineConfig,
    rows: range,
) -> None:
    """Fill grid rows ``rows`` for columns [0, q], last column included."""
    if not rows:
        return
    sx, sy = config.step_x, config.step_y
    w = image.shape[1]
    q = grid.shape[1] - 1

    band = image[rows.start * sx : rows.stop * sx : sx]
    grid[rows.start : rows.stop, :q] = threshold_pixels(band[:, : q * sy : sy], config.sigma)
    grid[rows.start : rows.stop, q] = threshold_pixels(band[:, w - 1], config.sigma)


def sample_last_row(
    image: NDArray[np.uint8],
    grid: NDArray[np.uint8],
    config: PipelineConfig,
    cols: range,
) -> None:
    """Fill grid row p, columns ``cols``, from the image's last pixel row."""
    if not cols:
        return
    sy = config.step_y
    h = image.shape[0]
    p = grid.shape[0] - 1

    pixels = image[h - 1, cols.start * sy : cols.stop * sy : sy]
    grid[p, cols.start : cols.stop] = threshold_pixels(pixels, config.sigma)


@stage(
    id="sample",
    dependencies=["rescale_barrier"],
    description="Threshold the worker's grid rows and its share of the last grid row",
)
def sample(ctx: PipelineContext, worker: Worker) -> None:
    image = ctx.active_image
    grid = ctx.grid
    if grid is None:
        raise RuntimeError("sample stage needs an allocated grid")
    p, q = ctx.grid_extent

    rows = worker.partition.range(p)
    cols = worker.partition.range(q)
    logger.debug(
        "worker %d: sample rows [%d, %d), last-row cols [%d, %d)",
        worker.id,
        rows.start,
        rows.stop,
        cols.start,
        cols.stop,
    )

    sample_rows(image, grid, ctx.config, rows)
    sample_last_row(image, grid, ctx.config, cols)
    # Constant corner: every worker writes the same value
    grid[p, q] = 0
