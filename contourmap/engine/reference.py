"""Single-threaded reference — the same stages without partitions or barriers.

Running the threaded pipeline with any worker count must give the same grid and
the same stamped image as these functions.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from contourmap.engine.config import PipelineConfig
from contourmap.engine.stages.sampling import sample_last_row, sample_rows
from contourmap.engine.stages.stamping import stamp_rows
from contourmap.imaging.ppm import new_image
from contourmap.imaging.tiles import ContourTileSet
from contourmap.utils.bicubic import sample_bicubic_block


def rescale_image(
    image: NDArray[np.uint8],
    config: PipelineConfig | None = None,
) -> NDArray[np.uint8]:
    """Bicubic resample of ``image`` onto a rescale_x × rescale_y canvas."""
    config = config or PipelineConfig()
    canvas = new_image(config.rescale_x, config.rescale_y)
    vs = np.arange(config.rescale_y, dtype=np.float64) / (config.rescale_y - 1)
    for lo in range(0, config.rescale_x, config.rescale_chunk_rows):
        hi = min(lo + config.rescale_chunk_rows, config.rescale_x)
        us = np.arange(lo, hi, dtype=np.float64) / (config.rescale_x - 1)
        canvas[lo:hi] = sample_bicubic_block(image, us, vs)
    return canvas


def sample_grid(
    image: NDArray[np.uint8],
    config: PipelineConfig | None = None,
) -> NDArray[np.uint8]:
    """Binary (p + 1) × (q + 1) sampling grid of ``image``."""
    config = config or PipelineConfig()
    p, q = config.grid_extent(*image.shape[:2])

    grid = np.zeros((p + 1, q + 1), dtype=np.uint8)
    sample_rows(image, grid, config, range(p))
    sample_last_row(image, grid, config, range(q))
    grid[p, q] = 0
    return grid


def march(
    image: NDArray[np.uint8],
    grid: NDArray[np.uint8],
    tiles: ContourTileSet,
    config: PipelineConfig | None = None,
) -> NDArray[np.uint8]:
    """Stamp every cell of ``grid`` onto ``image`` in place; returns ``image``."""
    config = config or PipelineConfig()
    p = grid.shape[0] - 1
    stamp_rows(image, grid, tiles, config, range(p))
    return image


def contour_image(
    image: NDArray[np.uint8],
    tiles: ContourTileSet,
    config: PipelineConfig | None = None,
) -> NDArray[np.uint8]:
    """Rescale if needed, sample, march. Returns a new array; ``image`` is untouched."""
    config = config or PipelineConfig()
    if config.needs_rescale(*image.shape[:2]):
        active = rescale_image(image, config)
    else:
        active = image.copy()
    return march(active, sample_grid(active, config), tiles, config)
