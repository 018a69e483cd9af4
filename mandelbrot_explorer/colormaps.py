"""
Palette construction for Mandelbrot visualization.

Each palette is a numpy array of shape (n, 3) with RGB values (uint8).
Colors are built from hues in [0, 1) at full saturation and value, so a
palette is really a sequence of hues; the strategies below differ only in
how they pick them:

- random:      every bucket gets an independent random hue (psychedelic)
- continuous:  hue walks back and forth inside a range (smooth gradient)
- ranged:      continuous, confined to a random sub-range (coherent band)
- alternating: a few random colors repeated in a cycle (stripes)

All randomness comes from an explicitly passed numpy Generator so that
palettes are reproducible from a seed.

To add a new strategy:
1. Define a function taking (n, rng, **options) that returns the color array
2. Add it to the PALETTES dictionary at the bottom of this file
"""

import enum

import numpy as np


DEFAULT_HUE_RANGE = (0.0, 1.0)
RANGED_LOW_MAX = 0.1    # Lower bound of a ranged palette is drawn from [0, 0.1]
RANGED_HIGH_MAX = 0.9   # Ranged palettes stay below this, red never wraps to red
RANGED_MIN_WIDTH = 0.2
DEFAULT_ALTERNATING_COLORS = 4


def hsv_to_rgb(h, s, v):
    """Convert HSV (0-1 range) to RGB (0-255 range)."""
    if s == 0:
        r = g = b = int(v * 255)
        return (r, g, b)

    h = (h % 1.0) * 6
    i = int(h)
    f = h - i
    p = v * (1 - s)
    q = v * (1 - s * f)
    t = v * (1 - s * (1 - f))

    if i == 0:
        r, g, b = v, t, p
    elif i == 1:
        r, g, b = q, v, p
    elif i == 2:
        r, g, b = p, v, t
    elif i == 3:
        r, g, b = p, q, v
    elif i == 4:
        r, g, b = t, p, v
    else:
        r, g, b = v, p, q

    return (int(r * 255), int(g * 255), int(b * 255))


def rgb_to_hsv(r, g, b):
    """Convert RGB (0-255 range) to HSV (0-1 range)."""
    r, g, b = r / 255, g / 255, b / 255
    mx = max(r, g, b)
    mn = min(r, g, b)
    v = mx

    if mx == mn:
        h = 0
    elif mx == r:
        h = (60 * ((g - b) / (mx - mn)) + 360) % 360 / 360
    elif mx == g:
        h = (60 * ((b - r) / (mx - mn)) + 120) / 360
    else:
        h = (60 * ((r - g) / (mx - mn)) + 240) / 360

    s = 0 if mx == 0 else (mx - mn) / mx
    return (h, s, v)


def hue_color(hue):
    """Fully saturated, full value color for a hue in [0, 1)."""
    return hsv_to_rgb(hue, 1.0, 1.0)


def from_hues(hues):
    """Build a palette array from a sequence of hues."""
    colors = np.zeros((len(hues), 3), dtype=np.uint8)
    for i, hue in enumerate(hues):
        colors[i] = hue_color(hue)
    return colors


def _check_count(n, name="n"):
    if n < 1:
        raise ValueError(f"{name} must be at least 1, got {n}")


def random_bucket(rng):
    """A single color with a uniformly random hue."""
    return hue_color(rng.random())


def next_bucket(color, loop_depth):
    """
    The color following `color` when stepping through the hue circle in
    loop_depth steps. Hue wraps at 1.0.
    """
    hue, _, _ = rgb_to_hsv(*color)
    return hue_color((hue + 1.0 / loop_depth) % 1.0)


def continuous_hues(start_hue, hue_range, n):
    """
    Walk n hues through hue_range in steps of (high - low) / n.

    The walk bounces off the range bounds: a step that would leave the range
    is clamped to the bound and the direction reverses. The start hue is
    clamped into the range first, so no hue ever leaves [low, high].
    """
    _check_count(n)
    low, high = hue_range
    if low > high:
        raise ValueError(f"hue range lower bound {low} exceeds upper bound {high}")

    step = (high - low) / n
    hue = min(max(start_hue, low), high)
    hues = []
    for _ in range(n):
        hues.append(hue)
        hue += step
        if hue > high:
            hue = high
            step = -step
        elif hue < low:
            hue = low
            step = -step
    return hues


def continuous_list(start_hue, hue_range, n):
    """Smooth back-and-forth hue ramp, see continuous_hues."""
    return from_hues(continuous_hues(start_hue, hue_range, n))


def random_hue_range(rng):
    """
    Pick a random hue sub-range at least RANGED_MIN_WIDTH wide that stays
    inside [0, RANGED_HIGH_MAX].
    """
    low = rng.uniform(0.0, RANGED_LOW_MAX)
    high = rng.uniform(low + RANGED_MIN_WIDTH, RANGED_HIGH_MAX)
    return low, high


def continuous_list_ranged(n, rng):
    """Continuous ramp confined to a random hue band with a random start."""
    _check_count(n)
    low, high = random_hue_range(rng)
    start_hue = rng.uniform(low, high)
    return continuous_list(start_hue, (low, high), n)


def random_list(n, rng):
    """n independent random hues, no coherence between neighbours."""
    _check_count(n)
    return from_hues(rng.random(n))


def random_alternating_list(n, k, rng):
    """
    k random colors repeated in a cycle until n entries are filled
    (entry i is color i mod k). Gives banded, striped output.
    """
    _check_count(n)
    _check_count(k, "k")
    base = random_list(k, rng)
    return base[np.arange(n) % k]


class PaletteStrategy(enum.Enum):
    RANDOM = "random"
    CONTINUOUS = "continuous"
    CONTINUOUS_RANGED = "ranged"
    ALTERNATING = "alternating"


def _build_random(n, rng):
    return random_list(n, rng)


def _build_continuous(n, rng, start_hue=None, hue_range=DEFAULT_HUE_RANGE):
    if start_hue is None:
        start_hue = rng.uniform(*hue_range)
    return continuous_list(start_hue, hue_range, n)


def _build_ranged(n, rng):
    return continuous_list_ranged(n, rng)


def _build_alternating(n, rng, k=DEFAULT_ALTERNATING_COLORS):
    return random_alternating_list(n, k, rng)


# Registry of all palette strategies.
# Keys are strategies, values are factory functions taking (n, rng, **options).
PALETTES = {
    PaletteStrategy.RANDOM: _build_random,
    PaletteStrategy.CONTINUOUS: _build_continuous,
    PaletteStrategy.CONTINUOUS_RANGED: _build_ranged,
    PaletteStrategy.ALTERNATING: _build_alternating,
}


def build_palette(strategy, n, rng, **options):
    """
    Build a palette of n colors with the given strategy.

    Args:
        strategy: A PaletteStrategy or its string value
        n: Number of colors, >= 1
        rng: numpy.random.Generator used for every random choice
        **options: Strategy specific options (start_hue/hue_range for
            continuous, k for alternating)

    Returns:
        (n, 3) uint8 array of RGB colors

    Raises:
        ValueError if the strategy is unknown or n < 1
    """
    return PALETTES[PaletteStrategy(strategy)](n, rng, **options)


def list_palette_names():
    """Get list of available strategy names."""
    return [strategy.value for strategy in PALETTES]
