import numpy as np
import pytest

from stream_image.models.bounds import Bounds
from stream_image.models.raster import Raster


def test_bounds_from_extent_adds_one():
    b = Bounds.from_extent(0, 0, 5, 5)
    assert (b.offset_x, b.offset_y, b.width, b.height) == (0, 0, 6, 6)
    assert b.area == 36


def test_bounds_raster_footprint_rounds_up():
    b = Bounds.from_extent(0, 0, 2.5, 1)
    assert (b.width, b.height) == (3.5, 2)
    assert (b.raster_width, b.raster_height) == (4, 2)


def test_rgba_round_trip():
    rgba = np.array(
        [[[255, 0, 0, 255], [0, 255, 0, 128]],
         [[0, 0, 255, 0], [10, 20, 30, 255]]],
        dtype=np.uint8,
    )
    r = Raster.from_rgba(rgba)
    assert r.word_at(0, 0) == 0xFFFF0000
    assert r.word_at(1, 0) == 0x8000FF00
    assert r.word_at(0, 1) == 0x000000FF
    assert r.word_at(1, 1) == 0xFF0A141E
    assert np.array_equal(r.to_rgba(), rgba)


def test_rgb_array_is_opaque():
    rgb = np.zeros((2, 2, 3), dtype=np.uint8)
    rgb[0, 1] = (1, 2, 3)
    r = Raster.from_rgba(rgb)
    assert r.word_at(1, 0) == 0xFF010203
    assert r.word_at(0, 0) == 0xFF000000


def test_from_rgb_floats_clamps_and_masks():
    rgb = np.array([[[1.5, -1.0, 0.5], [0.2, 0.2, 0.2]]])
    opaque = np.array([[True, False]])
    r = Raster.from_rgb_floats(rgb, opaque)
    assert r.word_at(0, 0) == 0xFFFF007F
    assert r.word_at(1, 0) == 0


def test_from_rgb_floats_non_finite():
    rgb = np.array([[[np.nan, np.inf, -np.inf]]])
    r = Raster.from_rgb_floats(rgb, np.array([[True]]))
    assert r.word_at(0, 0) == 0xFF00FF00


def test_rejects_bad_shapes():
    with pytest.raises(ValueError):
        Raster(np.zeros(4, dtype=np.uint32))
    with pytest.raises(ValueError):
        Raster.from_rgba(np.zeros((2, 2, 2), dtype=np.uint8))
