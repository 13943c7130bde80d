"""Pipeline configuration — sampling stride, threshold and canvas limit."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    """Fixed constants shared by every stage of a run."""

    # Sampling stride: rows (x) and columns (y)
    step_x: int = 8
    step_y: int = 8

    # Mean intensity at or below sigma marks a grid point as "on"
    sigma: int = 200

    # Canvas size used when the source exceeds it: rows × columns
    rescale_x: int = 2048
    rescale_y: int = 2048

    # Rows per resampler call; bounds the temporaries of the vectorized kernel
    rescale_chunk_rows: int = 64

    def needs_rescale(self, height: int, width: int) -> bool:
        return height > self.rescale_x or width > self.rescale_y

    def grid_extent(self, height: int, width: int) -> tuple[int, int]:
        """(p, q): number of interior grid rows and columns for an image."""
        return height // self.step_x, width // self.step_y

    def __post_init__(self) -> None:
        if self.step_x < 1 or self.step_y < 1:
            raise ValueError(f"sampling steps must be positive, got {self.step_x}x{self.step_y}")
        if self.rescale_x < 2 or self.rescale_y < 2:
            raise ValueError(
                f"canvas must be at least 2x2, got {self.rescale_x}x{self.rescale_y}"
            )
        if self.rescale_chunk_rows < 1:
            raise ValueError(f"rescale_chunk_rows must be positive, got {self.rescale_chunk_rows}")
