"""PipelineContext — the buffers and shared state of one contour run.

The context owns the source image, the optional canvas and the sampling grid
for the lifetime of the run. Workers never own anything; they write into the
rows their :class:`~contourmap.engine.partition.Partition` assigns.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from contourmap.engine.config import PipelineConfig
from contourmap.imaging.ppm import new_image
from contourmap.imaging.tiles import ContourTileSet
from contourmap.utils.bicubic import sample_bicubic_block

# (image, us, vs) -> (len(us), len(vs), 3)
Resampler = Callable[[NDArray[np.uint8], NDArray, NDArray], NDArray[np.uint8]]


class Mode(enum.Enum):
    """Which image the sampling and stamping stages work on."""

    DIRECT = "direct"  # source fits: sample and stamp the source itself
    RESCALED = "rescaled"  # source too large: resample onto the canvas first


@dataclass
class PipelineContext:
    """Shared state flowing through every worker of a run."""

    source: NDArray[np.uint8]
    tiles: ContourTileSet
    config: PipelineConfig = field(default_factory=PipelineConfig)
    resampler: Resampler = sample_bicubic_block

    mode: Mode = Mode.DIRECT
    # Allocated only in RESCALED mode: config.rescale_x × config.rescale_y
    canvas: NDArray[np.uint8] | None = None
    # (p + 1) × (q + 1) binary grid over the active image
    grid: NDArray[np.uint8] | None = None

    # --- Run metadata ---
    # Stage ids completed, per worker id; each worker appends to its own list
    completed_stages: dict[int, list[str]] = field(default_factory=dict)
    elapsed_ms: float = 0.0

    @classmethod
    def prepare(
        cls,
        source: NDArray[np.uint8],
        tiles: ContourTileSet,
        config: PipelineConfig | None = None,
        resampler: Resampler | None = None,
    ) -> PipelineContext:
        """Pick the mode and allocate the canvas and grid for ``source``."""
        config = config or PipelineConfig()
        if source.ndim != 3 or source.shape[2] != 3:
            raise ValueError(f"expected an (h, w, 3) source image, got shape {source.shape}")
        if source.shape[0] < 1 or source.shape[1] < 1:
            raise ValueError(f"source image is empty: shape {source.shape}")

        tiles.check_fits(config.step_x, config.step_y)

        ctx = cls(
            source=source,
            tiles=tiles,
            config=config,
            resampler=resampler or sample_bicubic_block,
        )

        height, width = source.shape[:2]
        if config.needs_rescale(height, width):
            ctx.mode = Mode.RESCALED
            ctx.canvas = new_image(config.rescale_x, config.rescale_y)

        # An image narrower or shorter than one cell gets p == 0 or q == 0:
        # only the edge row or column is sampled and nothing is stamped
        p, q = config.grid_extent(*ctx.active_image.shape[:2])
        ctx.grid = np.zeros((p + 1, q + 1), dtype=np.uint8)
        return ctx

    @property
    def active_image(self) -> NDArray[np.uint8]:
        """The buffer sampled, stamped and finally persisted."""
        if self.mode is Mode.RESCALED:
            if self.canvas is None:
                raise RuntimeError("rescaled run has no canvas")
            return self.canvas
        return self.source

    @property
    def grid_extent(self) -> tuple[int, int]:
        """(p, q) for the active image."""
        h, w = self.active_image.shape[:2]
        return self.config.grid_extent(h, w)

    def release(self) -> None:
        """Drop every buffer the run owns, whichever one was the output."""
        self.canvas = None
        self.grid = None
        self.source = np.empty((0, 0, 3), dtype=np.uint8)
