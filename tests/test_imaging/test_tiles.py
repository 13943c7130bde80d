"""Tests for the contour tile set."""

import numpy as np
import pytest

from contourmap.imaging.tiles import (
    TILE_COUNT,
    ContourTileSet,
    render_default_tiles,
    write_default_tiles,
)


def test_default_set_has_sixteen_uniform_tiles():
    tiles = render_default_tiles(8)
    assert len(tiles) == TILE_COUNT == 16
    assert tiles.uniform_shape == (8, 8)
    assert tiles.stacked().shape == (16, 8, 8, 3)


def test_empty_and_full_cells_are_blank():
    tiles = render_default_tiles(8)
    assert (tiles[0] == 255).all()
    assert (tiles[15] == 255).all()


def test_complementary_codes_share_a_drawing():
    tiles = render_default_tiles(8)
    for code in range(1, 15):
        if code in (5, 10):
            continue
        assert np.array_equal(tiles[code], tiles[15 - code])


def test_straight_segments():
    tiles = render_default_tiles(8)
    # left-right across the middle row, top-bottom down the middle column
    assert (tiles[3][3] == 0).all()
    assert (tiles[6][:, 3] == 0).all()


def test_saddles_draw_two_segments():
    tiles = render_default_tiles(8)
    dark = lambda tile: int((tile == 0).all(axis=-1).sum())  # noqa: E731
    assert dark(tiles[5]) > dark(tiles[7])
    assert dark(tiles[10]) > dark(tiles[11])
    assert not np.array_equal(tiles[5], tiles[10])


def test_tiles_are_read_only():
    tiles = render_default_tiles(8)
    with pytest.raises(ValueError):
        tiles[3][0, 0] = (1, 2, 3)


def test_write_then_load_round_trip(tmp_path):
    paths = write_default_tiles(tmp_path, size=8)
    assert [p.name for p in paths] == [f"{i}.ppm" for i in range(16)]

    loaded = ContourTileSet.load(tmp_path)
    expected = render_default_tiles(8)
    for code in range(16):
        assert np.array_equal(loaded[code], expected[code])


def test_load_missing_tile(tmp_path):
    write_default_tiles(tmp_path)
    (tmp_path / "9.ppm").unlink()
    with pytest.raises(FileNotFoundError):
        ContourTileSet.load(tmp_path)


def test_wrong_tile_count_rejected():
    with pytest.raises(ValueError):
        ContourTileSet(tuple(np.zeros((8, 8, 3), dtype=np.uint8) for _ in range(15)))


def test_mixed_sizes_cannot_stack():
    tiles = [np.zeros((8, 8, 3), dtype=np.uint8) for _ in range(15)]
    tiles.append(np.zeros((4, 8, 3), dtype=np.uint8))
    tile_set = ContourTileSet(tuple(tiles))

    assert tile_set.uniform_shape is None
    with pytest.raises(ValueError):
        tile_set.stacked()
    tile_set.check_fits(8, 8)
    with pytest.raises(ValueError):
        tile_set.check_fits(4, 8)


def test_tile_size_must_allow_a_segment():
    with pytest.raises(ValueError):
        render_default_tiles(1)
