"""Bicubic resampling — Catmull-Rom cubic Hermite over a clamped 4×4 neighbourhood.

Coordinates are normalized: ``u`` runs along rows, ``v`` along columns, both in
[0, 1]. Pure functions over a read-only source, safe to call from any number of
worker threads at once.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# Neighbour offsets around the base index: one before, two after
_TAPS = np.array([-1, 0, 1, 2], dtype=np.int64)


def _hermite(a, b, c, d, t):
    """Cubic through b (t=0) and c (t=1) with Catmull-Rom tangents."""
    ca = -a / 2.0 + (3.0 * b) / 2.0 - (3.0 * c) / 2.0 + d / 2.0
    cb = a - (5.0 * b) / 2.0 + 2.0 * c - d / 2.0
    cc = -a / 2.0 + c / 2.0
    return ((ca * t + cb) * t + cc) * t + b


def _axis(coords: NDArray, size: int) -> tuple[NDArray[np.int64], NDArray[np.float32]]:
    """Clamped neighbour indices (n, 4) and fractional offsets (n,) along one axis."""
    x = np.asarray(coords, dtype=np.float32) * np.float32(size) - np.float32(0.5)
    # Base index truncates toward zero; the fraction is taken from the floor
    base = np.trunc(x).astype(np.int64)
    fract = (x - np.floor(x)).astype(np.float32)
    indices = np.clip(base[:, None] + _TAPS[None, :], 0, size - 1)
    return indices, fract


def sample_bicubic_block(
    image: NDArray[np.uint8],
    us: NDArray,
    vs: NDArray,
) -> NDArray[np.uint8]:
    """Resample the grid ``us × vs`` of normalized coordinates.

    Args:
        image: Source image, shape (h, w, 3), uint8.
        us: Row coordinates in [0, 1], shape (n,).
        vs: Column coordinates in [0, 1], shape (m,).

    Returns:
        Interpolated pixels, shape (n, m, 3), uint8. Values are clamped to
        [0, 255] and truncated.
    """
    h, w = image.shape[:2]
    rows, row_t = _axis(np.atleast_1d(us), h)
    cols, col_t = _axis(np.atleast_1d(vs), w)

    # Four source row bands, each (n, w, 3)
    bands = [image[rows[:, k]] for k in range(4)]
    row_weight = row_t[:, None, None]

    columns = []
    for k in range(4):
        taps = [band[:, cols[:, k]].astype(np.float32) for band in bands]
        columns.append(_hermite(*taps, row_weight))

    value = _hermite(*columns, col_t[None, :, None])
    return np.clip(value, 0.0, 255.0).astype(np.uint8)


def sample_bicubic(image: NDArray[np.uint8], u: float, v: float) -> tuple[int, int, int]:
    """One interpolated RGB pixel at normalized (u, v)."""
    pixel = sample_bicubic_block(image, np.array([u]), np.array([v]))[0, 0]
    return int(pixel[0]), int(pixel[1]), int(pixel[2])
