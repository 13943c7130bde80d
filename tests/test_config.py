"""Tests for environment settings."""

from contourmap.config import Settings


def test_settings_defaults(monkeypatch):
    for name in ("CONTOURMAP_LOG_LEVEL", "CONTOURMAP_CONTOUR_DIR", "CONTOURMAP_CONTOUR_EXT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert set(Settings.model_fields) == {
        "contourmap_log_level",
        "contourmap_contour_dir",
        "contourmap_contour_ext",
    }
    assert settings.contourmap_log_level == "info"
    assert settings.contourmap_contour_dir == "./contours"
    assert settings.contourmap_contour_ext == "ppm"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("CONTOURMAP_CONTOUR_DIR", "/srv/tiles")
    monkeypatch.setenv("CONTOURMAP_LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.contourmap_contour_dir == "/srv/tiles"
    assert settings.contourmap_log_level == "debug"
