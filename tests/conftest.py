"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from contourmap.engine.config import PipelineConfig
from contourmap.imaging.tiles import ContourTileSet, render_default_tiles


def flat_image(height: int, width: int, rgb: tuple[int, int, int]) -> np.ndarray:
    image = np.empty((height, width, 3), dtype=np.uint8)
    image[:, :] = rgb
    return image


def noise_image(height: int, width: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


def coded_tiles(size: int = 8) -> ContourTileSet:
    """Tile k is filled with (k, 255 - k, 10·k) so stamped cells reveal their code."""
    tiles = []
    for code in range(16):
        tile = np.empty((size, size, 3), dtype=np.uint8)
        tile[:, :] = (code, 255 - code, 10 * code)
        tiles.append(tile)
    return ContourTileSet(tuple(tiles))


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig()


@pytest.fixture
def small_canvas_config() -> PipelineConfig:
    """Rescales anything larger than 32×32; keeps real bicubic runs fast."""
    return PipelineConfig(rescale_x=32, rescale_y=32, rescale_chunk_rows=5)


@pytest.fixture
def default_tiles() -> ContourTileSet:
    return render_default_tiles(8)


@pytest.fixture
def tiles() -> ContourTileSet:
    return coded_tiles(8)


@pytest.fixture
def make_flat():
    return flat_image


@pytest.fixture
def make_noise():
    return noise_image


@pytest.fixture
def make_coded_tiles():
    return coded_tiles
