import numpy as np
import pytest

from mandelbrot_explorer.colormaps import (
    PaletteStrategy,
    build_palette,
    continuous_hues,
    continuous_list,
    continuous_list_ranged,
    hsv_to_rgb,
    list_palette_names,
    next_bucket,
    random_alternating_list,
    random_bucket,
    random_hue_range,
    random_list,
    rgb_to_hsv,
)


def assert_valid_palette(palette, n):
    assert palette.shape == (n, 3)
    assert palette.dtype == np.uint8


def test_hsv_primaries():
    assert hsv_to_rgb(0.0, 1.0, 1.0) == (255, 0, 0)
    assert hsv_to_rgb(1 / 3, 1.0, 1.0) == (0, 255, 0)
    assert hsv_to_rgb(2 / 3, 1.0, 1.0) == (0, 0, 255)
    # hue wraps at 1.0
    assert hsv_to_rgb(1.0, 1.0, 1.0) == (255, 0, 0)


def test_rgb_to_hsv_recovers_hue():
    h, s, v = rgb_to_hsv(0, 0, 255)
    assert h == pytest.approx(2 / 3)
    assert s == 1
    assert v == 1


def test_random_bucket_is_saturated(rng):
    color = random_bucket(rng)
    assert len(color) == 3
    assert max(color) == 255
    assert all(0 <= c <= 255 for c in color)


def test_next_bucket_advances_hue():
    red = hsv_to_rgb(0.0, 1.0, 1.0)
    following = next_bucket(red, 3)
    assert following == hsv_to_rgb(1 / 3, 1.0, 1.0)


def test_next_bucket_wraps():
    color = hsv_to_rgb(0.95, 1.0, 1.0)
    hue, _, _ = rgb_to_hsv(*next_bucket(color, 10))
    assert hue < 0.1


@pytest.mark.parametrize("n", [1, 2, 7, 100, 513])
def test_every_strategy_returns_n_colors(rng, n):
    for strategy in PaletteStrategy:
        assert_valid_palette(build_palette(strategy, n, rng), n)


@pytest.mark.parametrize("strategy", list(PaletteStrategy))
def test_strategies_reject_empty(rng, strategy):
    with pytest.raises(ValueError):
        build_palette(strategy, 0, rng)


def test_unknown_strategy(rng):
    with pytest.raises(ValueError):
        build_palette("plaid", 10, rng)


def test_strategy_by_name(rng):
    assert set(list_palette_names()) == {"random", "continuous", "ranged", "alternating"}
    assert_valid_palette(build_palette("ranged", 12, rng), 12)


@pytest.mark.parametrize("start", [-0.5, 0.0, 0.2, 0.35, 0.6, 0.9, 1.7])
@pytest.mark.parametrize("n", [1, 3, 10, 250])
def test_continuous_hues_stay_in_range(start, n):
    low, high = 0.2, 0.6
    hues = continuous_hues(start, (low, high), n)
    assert len(hues) == n
    assert all(low <= h <= high for h in hues)


def test_continuous_hues_bounce():
    hues = continuous_hues(0.0, (0.0, 1.0), 4)
    assert hues == pytest.approx([0.0, 0.25, 0.5, 0.75])
    hues = continuous_hues(0.75, (0.0, 1.0), 4)
    # clamps at the top and walks back down
    assert hues == pytest.approx([0.75, 1.0, 1.0, 0.75])
    hues = continuous_hues(0.1, (0.0, 0.4), 4)
    assert hues == pytest.approx([0.1, 0.2, 0.3, 0.4])


def test_continuous_list_rejects_inverted_range():
    with pytest.raises(ValueError):
        continuous_list(0.5, (0.8, 0.2), 10)


def test_random_hue_range_bounds(rng):
    for _ in range(200):
        low, high = random_hue_range(rng)
        assert 0.0 <= low <= 0.1
        assert high - low >= 0.2
        assert high <= 0.9


def test_ranged_is_reproducible():
    first = continuous_list_ranged(64, np.random.default_rng(99))
    second = continuous_list_ranged(64, np.random.default_rng(99))
    np.testing.assert_array_equal(first, second)


def test_random_list_is_seeded():
    np.testing.assert_array_equal(random_list(30, np.random.default_rng(5)),
                                  random_list(30, np.random.default_rng(5)))


def test_alternating_cycles(rng):
    palette = random_alternating_list(10, 3, rng)
    assert_valid_palette(palette, 10)
    for i in range(10):
        np.testing.assert_array_equal(palette[i], palette[i % 3])


def test_alternating_rejects_zero_colors(rng):
    with pytest.raises(ValueError):
        random_alternating_list(10, 0, rng)
