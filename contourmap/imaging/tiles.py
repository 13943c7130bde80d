"""Contour tile set — one stamp per 4-bit corner configuration.

Tiles live in a fixed directory as ``0.<ext>`` .. ``15.<ext>`` and are indexed
directly by configuration code. :func:`render_default_tiles` draws the standard
marching-squares set for a fresh checkout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw

from contourmap.imaging.ppm import read_image, write_image

logger = logging.getLogger(__name__)

TILE_COUNT = 16

_BACKGROUND = (255, 255, 255)
_INK = (0, 0, 0)

# Segments per code, as pairs of cell edges whose midpoints they join.
# Corner bits: 8 = top-left, 4 = top-right, 2 = bottom-right, 1 = bottom-left.
_SEGMENTS: dict[int, list[tuple[str, str]]] = {
    0: [],
    1: [("left", "bottom")],
    2: [("bottom", "right")],
    3: [("left", "right")],
    4: [("top", "right")],
    5: [("left", "top"), ("bottom", "right")],  # saddle
    6: [("top", "bottom")],
    7: [("left", "top")],
    8: [("left", "top")],
    9: [("top", "bottom")],
    10: [("top", "right"), ("left", "bottom")],  # saddle
    11: [("top", "right")],
    12: [("left", "right")],
    13: [("bottom", "right")],
    14: [("left", "bottom")],
    15: [],
}


@dataclass(frozen=True)
class ContourTileSet:
    """Sixteen RGB tiles, ``tiles[code]`` stamped for configuration ``code``."""

    tiles: tuple[NDArray[np.uint8], ...]

    def __post_init__(self) -> None:
        if len(self.tiles) != TILE_COUNT:
            raise ValueError(f"expected {TILE_COUNT} tiles, got {len(self.tiles)}")
        for code, tile in enumerate(self.tiles):
            if tile.ndim != 3 or tile.shape[2] != 3 or tile.dtype != np.uint8:
                raise ValueError(f"tile {code} is not an (h, w, 3) uint8 image")
            # Read-only: shared by reference across workers
            tile.setflags(write=False)

    def __len__(self) -> int:
        return len(self.tiles)

    def __getitem__(self, code: int) -> NDArray[np.uint8]:
        return self.tiles[code]

    @property
    def uniform_shape(self) -> tuple[int, int] | None:
        """(h, w) shared by every tile, or None when sizes differ."""
        shapes = {tile.shape[:2] for tile in self.tiles}
        if len(shapes) == 1:
            return next(iter(shapes))
        return None

    def stacked(self) -> NDArray[np.uint8]:
        """All tiles as one (16, h, w, 3) array. Requires a uniform size."""
        if self.uniform_shape is None:
            raise ValueError("tiles differ in size and cannot be stacked")
        return np.stack(self.tiles)

    def check_fits(self, step_x: int, step_y: int) -> None:
        """Raise unless every tile fits inside one step_x × step_y cell."""
        for code, tile in enumerate(self.tiles):
            h, w = tile.shape[:2]
            if h > step_x or w > step_y:
                raise ValueError(
                    f"tile {code} is {h}x{w}, larger than the {step_x}x{step_y} sampling cell"
                )

    @classmethod
    def load(cls, directory: str | Path, ext: str = "ppm") -> ContourTileSet:
        """Read ``0.<ext>`` .. ``15.<ext>`` from ``directory`` in numeric order."""
        directory = Path(directory)
        tiles = tuple(read_image(directory / f"{code}.{ext}") for code in range(TILE_COUNT))
        logger.info("Loaded %d contour tiles from %s", len(tiles), directory)
        return cls(tiles)


def render_default_tiles(size: int = 8) -> ContourTileSet:
    """Draw the 16 marching-squares tiles as black segments on white."""
    if size < 2:
        raise ValueError(f"tile size must be at least 2, got {size}")

    mid = (size - 1) // 2
    last = size - 1
    # Edge midpoints as (x, y) = (column, row)
    midpoints = {
        "top": (mid, 0),
        "bottom": (mid, last),
        "left": (0, mid),
        "right": (last, mid),
    }

    tiles = []
    for code in range(TILE_COUNT):
        img = Image.new("RGB", (size, size), _BACKGROUND)
        draw = ImageDraw.Draw(img)
        for start, end in _SEGMENTS[code]:
            draw.line([midpoints[start], midpoints[end]], fill=_INK, width=1)
        tiles.append(np.array(img, dtype=np.uint8))

    return ContourTileSet(tuple(tiles))


def write_default_tiles(directory: str | Path, size: int = 8, ext: str = "ppm") -> list[Path]:
    """Render the default tile set into ``directory``; returns the written paths."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    paths = []
    for code, tile in enumerate(render_default_tiles(size).tiles):
        path = directory / f"{code}.{ext}"
        write_image(tile, path)
        paths.append(path)

    logger.info("Wrote %d contour tiles (%dx%d) to %s", len(paths), size, size, directory)
    return paths
