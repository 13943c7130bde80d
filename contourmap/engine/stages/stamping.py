"""Stamping — composite the tile of each cell's configuration onto the image."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from contourmap.engine.config import PipelineConfig
from contourmap.engine.context import PipelineContext
from contourmap.engine.registry import stage
from contourmap.engine.worker import Worker
from contourmap.imaging.tiles import ContourTileSet
from contourmap.utils.contour import configuration_codes

logger = logging.getLogger(__name__)


def stamp_rows(
    image: NDArray[np.uint8],
    grid: NDArray[np.uint8],
    tiles: ContourTileSet,
    config: PipelineConfig,
    rows: range,
) -> None:
    """Overwrite cells of cell rows ``rows`` with their tiles, in place.

    Cell (i, j) covers pixels from (i·step_x, j·step_y); a tile smaller than
    the cell leaves the rest of the cell untouched.
    """
    if not rows:
        return
    sx, sy = config.step_x, config.step_y
    q = grid.shape[1] - 1
    codes = configuration_codes(grid, rows)

    if tiles.uniform_shape == (sx, sy):
        # Tiles fill their cells exactly: one block assignment for the band
        blocks = tiles.stacked()[codes]  # (n, q, sx, sy, 3)
        n = len(rows)
        image[rows.start * sx : rows.stop * sx, : q * sy] = blocks.transpose(0, 2, 1, 3, 4).reshape(
            n * sx, q * sy, 3
        )
        return

    for r, i in enumerate(rows):
        x = i * sx
        for j in range(q):
            tile = tiles[int(codes[r, j])]
            th, tw = tile.shape[:2]
            y = j * sy
            image[x : x + th, y : y + tw] = tile


@stage(
    id="stamp",
    dependencies=["grid_barrier"],
    description="Stamp contour tiles over the worker's cell rows",
)
def stamp(ctx: PipelineContext, worker: Worker) -> None:
    grid = ctx.grid
    if grid is None:
        raise RuntimeError("stamp stage needs a sampled grid")
    p, _ = ctx.grid_extent

    rows = worker.partition.range(p)
    logger.debug("worker %d: stamp cell rows [%d, %d)", worker.id, rows.start, rows.stop)
    stamp_rows(ctx.active_image, grid, ctx.tiles, ctx.config, rows)
