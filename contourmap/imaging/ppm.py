"""Raster I/O — facade over Pillow.

Images travel through the engine as (h, w, 3) uint8 arrays. Output is always
binary PPM (P6): ``P6 <w> <h> 255`` then one byte per channel, row-major.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image

logger = logging.getLogger(__name__)

# Sources of any size are valid input: oversized ones go to the rescale path
Image.MAX_IMAGE_PIXELS = None


def new_image(height: int, width: int) -> NDArray[np.uint8]:
    """Allocate a black RGB buffer."""
    if height < 1 or width < 1:
        raise ValueError(f"image dimensions must be positive, got {height}x{width}")
    return np.zeros((height, width, 3), dtype=np.uint8)


def read_image(path: str | Path) -> NDArray[np.uint8]:
    """Decode an image file into a writable (h, w, 3) uint8 array.

    Truncated or unrecognized files raise (``OSError`` /
    ``PIL.UnidentifiedImageError``) rather than yielding partial data.
    """
    with Image.open(path) as img:
        img.load()
        rgb = img.convert("RGB")

    # np.array copies: the engine stamps into this buffer in place
    data = np.array(rgb, dtype=np.uint8)
    logger.debug("Read %s: %dx%d", path, data.shape[1], data.shape[0])
    return data


def write_image(image: NDArray[np.uint8], path: str | Path) -> None:
    """Encode an (h, w, 3) uint8 array as binary PPM."""
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"expected an (h, w, 3) image, got shape {image.shape}")

    Image.fromarray(np.ascontiguousarray(image, dtype=np.uint8)).save(path, format="PPM")
    logger.debug("Wrote %s: %dx%d", path, image.shape[1], image.shape[0])
