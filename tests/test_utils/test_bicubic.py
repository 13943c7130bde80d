"""Tests for bicubic resampling."""

import numpy as np
import pytest

from contourmap.utils.bicubic import sample_bicubic, sample_bicubic_block


def test_flat_image_stays_flat(make_flat):
    image = make_flat(20, 30, (17, 130, 244))
    us = np.linspace(0.0, 1.0, 11)
    vs = np.linspace(0.0, 1.0, 7)

    out = sample_bicubic_block(image, us, vs)

    assert out.shape == (11, 7, 3)
    assert out.dtype == np.uint8
    assert (out == (17, 130, 244)).all()


def test_step_edge_keeps_both_sides(make_flat):
    image = make_flat(16, 16, (0, 0, 0))
    image[:, 8:] = (255, 255, 255)

    assert sample_bicubic(image, 0.5, 0.0) == (0, 0, 0)
    assert sample_bicubic(image, 0.5, 1.0) == (255, 255, 255)

    middle = sample_bicubic(image, 0.5, 0.5)
    assert 0 < middle[0] < 255
    assert middle[0] == middle[1] == middle[2]


def test_rows_interpolate_independently_of_columns(make_flat):
    image = make_flat(16, 16, (255, 255, 255))
    image[:8] = (0, 0, 0)

    out = sample_bicubic_block(image, np.array([0.0, 1.0]), np.linspace(0.0, 1.0, 5))

    assert (out[0] == 0).all()
    assert (out[1] == 255).all()


@pytest.mark.parametrize("u, v", [(0.0, 0.0), (0.25, 0.75), (0.5, 0.5), (1.0, 1.0), (0.9, 0.1)])
def test_scalar_matches_block(make_noise, u, v):
    image = make_noise(24, 18, seed=6)
    block = sample_bicubic_block(image, np.array([u]), np.array([v]))
    assert sample_bicubic(image, u, v) == tuple(int(c) for c in block[0, 0])


def test_undershoot_is_clamped_to_zero():
    # Catmull-Rom dips below zero just past a bright column
    image = np.zeros((8, 8, 3), dtype=np.uint8)
    image[:, 2] = 255

    v = (3 + 1 / 3 + 0.5) / 8
    assert sample_bicubic(image, 0.5, v) == (0, 0, 0)

    out = sample_bicubic_block(image, np.linspace(0.0, 1.0, 9), np.linspace(0.0, 1.0, 33))
    assert out.dtype == np.uint8
    assert out.shape == (9, 33, 3)


def test_block_rows_are_chunk_independent(make_noise):
    image = make_noise(40, 40, seed=8)
    us = np.arange(32) / 31
    vs = np.arange(32) / 31

    whole = sample_bicubic_block(image, us, vs)
    parts = np.concatenate([sample_bicubic_block(image, us[i : i + 5], vs) for i in range(0, 32, 5)])

    assert np.array_equal(whole, parts)
