import math

import numpy as np
import pytest

from mandelbrot_explorer.compute import (
    BOUNDED,
    band_modifier,
    colorize,
    escape_range,
    escape_time,
    estimate_entropy,
    sample_coarse,
    sample_field,
    shannon_entropy,
)
from mandelbrot_explorer.view import ViewParameters


def params(center=(0.0, 0.0), step_size=0.01, depth=50, palette=None):
    if palette is None:
        palette = np.array([[255, 0, 0], [0, 255, 0], [0, 0, 255]], dtype=np.uint8)
    return ViewParameters(center, step_size, depth, palette)


@pytest.mark.parametrize("point", [(2.0, 0.0), (-2.0, 0.0), (0.0, 2.0), (1.5, 1.5), (-3.0, -7.0)])
@pytest.mark.parametrize("max_depth", [1, 10, 400])
def test_points_outside_radius_escape_immediately(point, max_depth):
    assert escape_time(point[0], point[1], max_depth) == 0


@pytest.mark.parametrize("max_depth", [1, 2, 100, 1000])
def test_origin_is_bounded(max_depth):
    assert escape_time(0.0, 0.0, max_depth) == BOUNDED


def test_known_points():
    # -1 cycles between -1 and 0, i/4 sits well inside the main cardioid
    assert escape_time(-1.0, 0.0, 500) == BOUNDED
    assert escape_time(0.0, 0.25, 500) == BOUNDED
    # 1 -> 1, 2: escapes at the second step
    assert escape_time(1.0, 0.0, 500) == 1


def test_raising_depth_keeps_escape_iteration():
    points = [(0.3, 0.5), (-0.75, 0.1), (0.26, 0.0), (-1.5, 0.01), (0.41825, -0.34087)]
    for cr, ci in points:
        shallow = escape_time(cr, ci, 20)
        deep = escape_time(cr, ci, 2000)
        if shallow != BOUNDED:
            assert deep == shallow
        else:
            assert deep == BOUNDED or deep >= 20


def test_sample_field_shape_and_order():
    view = params(center=(-0.5, 0.0), step_size=0.05, depth=30)
    values = sample_field(view, (7, 5))
    assert values.shape == (35,)
    for idx in (0, 6, 17, 34):
        dx = idx % 7 - 7 // 2
        dy = idx // 7 - 5 // 2
        expected = escape_time(-0.5 + 0.05 * dx, 0.0 + 0.05 * dy, 30)
        assert values[idx] == expected


def test_sample_field_center_pixel_is_view_center():
    view = params(center=(0.0, 0.0), step_size=1.0, depth=10)
    values = sample_field(view, (4, 4)).reshape(4, 4)
    # pixel (2, 2) sits at offset (0, 0): the origin
    assert values[2, 2] == BOUNDED
    # pixel (0, 0) sits at (-2, -2)
    assert values[0, 0] == 0


@pytest.mark.parametrize("shape", [(0, 4), (4, 0), (-1, 3)])
def test_sample_field_rejects_empty_shapes(shape):
    with pytest.raises(ValueError):
        sample_field(params(), shape)


def test_sample_coarse_is_ten_by_ten():
    values = sample_coarse(params(center=(-0.5, 0.0), step_size=0.005, depth=60), (800, 600))
    assert values.shape == (100,)


def test_sample_coarse_offsets():
    view = params(center=(0.0, 0.0), step_size=0.001, depth=40)
    values = sample_coarse(view, (1000, 1000), grid=10)
    # lattice (0, 0) is g = (-5, -5): pixel offset -500, plane point (-0.5, -0.5)
    assert values[0] == escape_time(-0.5, -0.5, 40)
    # lattice (5, 5) is g = (0, 0): the center
    assert values[55] == BOUNDED


def test_escape_range_ignores_bounded():
    values = np.array([BOUNDED, 4, 9, BOUNDED, 2], dtype=np.int64)
    assert escape_range(values) == (2, 9)
    assert escape_range(np.full(5, BOUNDED, dtype=np.int64)) is None


def test_band_modifier():
    values = np.array([10, 110, BOUNDED], dtype=np.int64)
    # range 100 squeezed into min(20, 400) colors
    assert band_modifier(values, 20, 400) == 5
    # palette as long as depth is indexed directly
    assert band_modifier(values, 400, 400) == 1
    # narrow range never gives a divisor below 1
    assert band_modifier(np.array([3, 4], dtype=np.int64), 50, 400) == 1


def test_colorize_collapsed_range_uses_one_color():
    palette = np.array([[10, 20, 30], [40, 50, 60], [70, 80, 90]], dtype=np.uint8)
    values = np.array([7, 7, BOUNDED, 7], dtype=np.int64)
    out = colorize(values, palette, 100)
    escaped = out[values != BOUNDED]
    assert (escaped == escaped[0]).all()
    assert tuple(escaped[0]) == tuple(palette[7 % 3])
    assert tuple(out[2]) == (0, 0, 0)


def test_colorize_all_bounded_is_background():
    palette = np.array([[255, 255, 255]], dtype=np.uint8)
    values = np.full(16, BOUNDED, dtype=np.int64)
    out = colorize(values, palette, 400)
    assert out.shape == (16, 3)
    assert not out.any()


def test_colorize_bands_wide_range():
    palette = np.array([[i, 0, 0] for i in range(4)], dtype=np.uint8)
    values = np.array([0, 10, 20, 30, 40], dtype=np.int64)
    out = colorize(values, palette, 100)
    # modifier (40 - 0) // 4 = 10, index (v // 10) % 4
    assert list(out[:, 0]) == [0, 1, 2, 3, 0]


def test_colorize_rejects_empty_palette():
    with pytest.raises(ValueError):
        colorize(np.array([1], dtype=np.int64), np.zeros((0, 3), dtype=np.uint8), 10)


def test_entropy_single_bucket_is_zero():
    assert shannon_entropy([42]) == 0.0
    assert shannon_entropy([0, 17, 0]) == 0.0


@pytest.mark.parametrize("k", [2, 4, 8, 10, 37])
def test_entropy_uniform_histogram(k):
    assert shannon_entropy([5] * k) == pytest.approx(math.log2(k))


def test_estimate_entropy_inside_set_is_zero():
    # a tiny window around the origin is entirely bounded
    assert estimate_entropy(params(center=(0.0, 0.0), step_size=1e-6, depth=50), (100, 100)) == 0.0


def test_estimate_entropy_boundary_is_positive_and_deterministic():
    view = params(center=(-0.75, 0.1), step_size=0.002, depth=200)
    first = estimate_entropy(view, (800, 600))
    assert first > 0.0
    assert estimate_entropy(view, (800, 600)) == first
    assert first <= math.log2(100)
