"""Run summary model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from contourmap.engine.context import Mode


class RunSummary(BaseModel):
    mode: Mode
    workers: int
    source_size: tuple[int, int] = Field(..., description="(width, height) of the input")
    output_size: tuple[int, int] = Field(..., description="(width, height) of the written image")
    grid_size: tuple[int, int] = Field(..., description="(columns, rows) of the sampling grid")
    processing_time_ms: float = 0.0
    completed_stages: dict[int, list[str]] = Field(default_factory=dict)
