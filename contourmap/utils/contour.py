"""Marching squares — intensity thresholding and corner configuration codes."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# Corner weights: top-left, top-right, bottom-right, bottom-left
_TOP_LEFT = 8
_TOP_RIGHT = 4
_BOTTOM_RIGHT = 2
_BOTTOM_LEFT = 1


def threshold_pixels(pixels: NDArray[np.uint8], sigma: int) -> NDArray[np.uint8]:
    """Binary occupancy for RGB pixels: 1 where the channel mean is ≤ sigma.

    The mean is the integer mean of the three channels, so 200.9 counts as 200.
    Accepts any leading shape; the last axis must hold the three channels.
    """
    mean = pixels.astype(np.uint16).sum(axis=-1) // 3
    return (mean <= sigma).astype(np.uint8)


def configuration_code(grid: NDArray[np.uint8], i: int, j: int) -> int:
    """4-bit code of cell (i, j) from its four corners."""
    return (
        _TOP_LEFT * int(grid[i, j])
        + _TOP_RIGHT * int(grid[i, j + 1])
        + _BOTTOM_RIGHT * int(grid[i + 1, j + 1])
        + _BOTTOM_LEFT * int(grid[i + 1, j])
    )


def configuration_codes(grid: NDArray[np.uint8], rows: range) -> NDArray[np.uint8]:
    """Codes for every cell of the given cell rows, shape (len(rows), q).

    ``grid`` has shape (p + 1, q + 1); ``rows`` must lie within [0, p).
    """
    q = grid.shape[1] - 1
    start, end = rows.start, rows.stop
    g = grid.astype(np.uint8, copy=False)

    return (
        _TOP_LEFT * g[start:end, :q]
        + _TOP_RIGHT * g[start:end, 1 : q + 1]
        + _BOTTOM_RIGHT * g[start + 1 : end + 1, 1 : q + 1]
        + _BOTTOM_LEFT * g[start + 1 : end + 1, :q]
    ).astype(np.uint8)
