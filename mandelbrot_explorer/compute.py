"""
Mandelbrot computation functions using Numba JIT compilation.

This module contains all the performance-critical computation functions
that are JIT-compiled for speed. These functions handle:
- Escape-time classification of single points
- Parallel sampling of a full pixel grid (and of the coarse entropy grid)
- Palette application with dynamic-range banding
- Shannon entropy of a coarse sample

Classifications are plain integers: n >= 0 means the point escaped at
iteration n, BOUNDED (-1) means it never escaped within the depth cap.
"""

import numpy as np
from numba import jit, prange


BOUNDED = -1            # Classification for points that never escaped
ESCAPE_RADIUS_SQ = 4.0  # |z| >= 2, compared on the squared norm
ESTIMATE_GRID_SIZE = 10  # Side of the coarse grid used for entropy estimation


@jit(nopython=True, cache=True)
def escape_time(cr, ci, max_depth):
    """
    Classify a single point c = cr + i*ci.

    Iterates z -> z² + c from z = 0. The step index is returned as soon as
    |z| reaches 2; BOUNDED is returned if that never happens within
    max_depth steps.
    """
    zr = 0.0
    zi = 0.0
    for n in range(max_depth):
        # z² + c, multiplied out on the real and imaginary parts
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi >= ESCAPE_RADIUS_SQ:
            return n
    return BOUNDED


@jit(nopython=True, parallel=True, cache=True)
def compute_field(center_r, center_i, step_size, width, height, max_depth):
    """
    Classify every pixel of a width x height view.

    Pixel (px, py) sits at the integer offset (px - width // 2, py - height // 2)
    from the view center, scaled by step_size. The parallel loop runs over the
    flat index range, so every result lands in its own row-major slot.

    Returns:
        1D int64 array of length width * height
    """
    count = width * height
    result = np.empty(count, dtype=np.int64)
    half_w = width // 2
    half_h = height // 2

    for idx in prange(count):
        dx = idx % width - half_w
        dy = idx // width - half_h
        result[idx] = escape_time(
            center_r + step_size * dx,
            center_i + step_size * dy,
            max_depth
        )

    return result


@jit(nopython=True, parallel=True, cache=True)
def compute_coarse_field(center_r, center_i, step_size, width, height, max_depth, grid):
    """
    Classify a grid x grid lattice spread over a width x height view.

    Lattice coordinate g in [-grid // 2, grid - grid // 2) maps to the pixel
    offset trunc(g * width / grid), so the lattice covers the same window the
    full render would, only much more sparsely.

    Returns:
        1D int64 array of length grid * grid
    """
    count = grid * grid
    result = np.empty(count, dtype=np.int64)
    half = grid // 2

    for idx in prange(count):
        gx = idx % grid - half
        gy = idx // grid - half
        dx = int(gx * width / grid)
        dy = int(gy * height / grid)
        result[idx] = escape_time(
            center_r + step_size * dx,
            center_i + step_size * dy,
            max_depth
        )

    return result


@jit(nopython=True, parallel=True, cache=True)
def apply_palette(values, palette, modifier, out):
    """
    Map classifications through a palette.

    Args:
        values: 1D array of classifications
        palette: Nx3 array of RGB colors (uint8)
        modifier: Banding divisor, >= 1
        out: (len(values), 3) uint8 array, modified in place
    """
    num_colors = palette.shape[0]

    for i in prange(values.shape[0]):
        v = values[i]
        if v < 0:
            # Points in the set are black
            out[i, 0] = 0
            out[i, 1] = 0
            out[i, 2] = 0
        else:
            idx = (v // modifier) % num_colors
            out[i, 0] = palette[idx, 0]
            out[i, 1] = palette[idx, 1]
            out[i, 2] = palette[idx, 2]


def _check_shape(shape):
    width, height = int(shape[0]), int(shape[1])
    if width < 1 or height < 1:
        raise ValueError(f"shape must be at least 1x1, got {width}x{height}")
    return width, height


def sample_field(params, shape):
    """
    Classify every pixel of a view.

    Args:
        params: Anything with center, step_size and depth (a ViewParameters
            or a ViewState)
        shape: (width, height) in pixels

    Returns:
        1D int64 classification array, row-major
    """
    width, height = _check_shape(shape)
    cr, ci = params.center
    return compute_field(float(cr), float(ci), float(params.step_size),
                         width, height, int(params.depth))


def sample_coarse(params, shape, grid=ESTIMATE_GRID_SIZE):
    """Classify the coarse entropy lattice for a view rendered at shape."""
    width, height = _check_shape(shape)
    cr, ci = params.center
    return compute_coarse_field(float(cr), float(ci), float(params.step_size),
                                width, height, int(params.depth), int(grid))


def escape_range(values):
    """
    Return (min, max) over the escaped classifications, or None when
    every point is bounded.
    """
    escaped = values[values != BOUNDED]
    if escaped.size == 0:
        return None
    return int(escaped.min()), int(escaped.max())


def band_modifier(values, palette_len, depth):
    """
    Compute the banding divisor that squeezes the observed escape range
    into the available palette entries.

    A palette with exactly depth colors is indexed directly. Otherwise the
    divisor is (max - min) // min(palette_len, depth), never below 1. A
    collapsed range (min == max) or an all-bounded grid gives 1.
    """
    if palette_len == depth:
        return 1
    bounds = escape_range(values)
    if bounds is None:
        return 1
    lo, hi = bounds
    if lo == hi:
        return 1
    return max(1, (hi - lo) // min(palette_len, depth))


def colorize(values, palette, depth):
    """
    Turn a classification grid into pixel colors.

    Args:
        values: 1D classification array
        palette: Nx3 uint8 palette, N >= 1
        depth: Iteration cap the values were computed with

    Returns:
        (len(values), 3) uint8 array of RGB colors, black for bounded points
    """
    if len(palette) == 0:
        raise ValueError("cannot colorize with an empty palette")

    out = np.zeros((values.shape[0], 3), dtype=np.uint8)
    if escape_range(values) is None:
        # Nothing escaped, the whole frame is background
        return out

    modifier = band_modifier(values, len(palette), depth)
    apply_palette(values, np.ascontiguousarray(palette, dtype=np.uint8), modifier, out)
    return out


def shannon_entropy(counts):
    """Shannon entropy, in bits, of a histogram given as bucket counts."""
    counts = np.asarray(counts, dtype=np.float64)
    counts = counts[counts > 0]
    total = counts.sum()
    if total == 0:
        return 0.0
    probs = counts / total
    return float(-np.sum(probs * np.log2(probs)))


def estimate_entropy(params, shape, grid=ESTIMATE_GRID_SIZE):
    """
    Score how visually varied a view is.

    Samples the coarse lattice, buckets bounded points as 0 and points that
    escaped at n as n + 1, and returns the Shannon entropy of that histogram.
    """
    values = sample_coarse(params, shape, grid)
    _, counts = np.unique(values + 1, return_counts=True)
    return shannon_entropy(counts)


def warmup_jit():
    """
    Warm up JIT compilation with small dummy arrays.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on first actual use.
    """
    values = compute_field(-0.5, 0.0, 0.01, 10, 10, 10)
    compute_coarse_field(-0.5, 0.0, 0.01, 10, 10, 10, ESTIMATE_GRID_SIZE)
    dummy = np.zeros((values.shape[0], 3), dtype=np.uint8)
    apply_palette(values, np.full((4, 3), 255, dtype=np.uint8), 1, dummy)
