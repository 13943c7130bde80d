"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    contourmap_log_level: str = "info"

    # Contour tile set: 0.<ext> .. 15.<ext>
    contourmap_contour_dir: str = "./contours"
    contourmap_contour_ext: str = "ppm"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
