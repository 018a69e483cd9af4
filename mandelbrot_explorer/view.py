"""
View state: where we look at the Mandelbrot set and how it is colored.

A ViewState owns the center, the step size (plane units per pixel), the
iteration depth and the active palette, plus the random generator used to
regenerate palettes. It is the whole surface the explorer and the generator
drive: mutators, getters, rendering, entropy estimation and snapshots.

Background renders never touch a ViewState directly; they work on the
immutable ViewParameters returned by `ViewState.params`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from . import snapshot as snapshots
from .colormaps import PaletteStrategy, build_palette, random_bucket
from .compute import colorize, estimate_entropy, sample_field
from .config import ViewDefaults


logger = logging.getLogger(__name__)

SEQUENCE_LOG_INTERVAL = 10


@dataclass(frozen=True, eq=False)
class ViewParameters:
    """Everything needed to render one frame, frozen at request time."""

    center: tuple[float, float]
    step_size: float
    depth: int
    palette: np.ndarray


def render_pixels(params, shape):
    """Classify and colorize a view; returns a (width * height, 3) uint8 array."""
    values = sample_field(params, shape)
    return colorize(values, params.palette, params.depth)


class ViewState:
    """
    Mutable view of the Mandelbrot set.

    Usage:
        view = ViewState(rng=np.random.default_rng(7))
        view.zoom(0.5)
        view.mod_depth(25)
        view.snapshot("overview", (800, 600))

    Attributes:
        rng: numpy Generator used by every palette regeneration
    """

    def __init__(self, center=None, step_size=None, depth=None, palette=None,
                 rng=None, defaults=None):
        self.defaults = defaults or ViewDefaults()
        self.rng = rng if rng is not None else np.random.default_rng()

        self._center = (0.0, 0.0)
        self._step_size = self.defaults.step_size
        self._depth = 1
        self._palette = None
        self._precision_warned = False

        self.set_center(center if center is not None else self.defaults.center)
        self.set_step_size(step_size if step_size is not None else self.defaults.step_size)
        self.set_depth(depth if depth is not None else self.defaults.depth)
        if palette is None:
            self.regenerate_palette(PaletteStrategy.CONTINUOUS, self.defaults.color_loop,
                                    start_hue=0.0)
        else:
            self.set_palette(palette)

    # Getters

    @property
    def center(self):
        return self._center

    @property
    def step_size(self):
        return self._step_size

    @property
    def depth(self):
        return self._depth

    @property
    def palette(self):
        return self._palette

    @property
    def params(self):
        """Immutable snapshot of the current view for rendering."""
        return ViewParameters(self._center, self._step_size, self._depth, self._palette)

    # Navigation

    def set_center(self, new_center):
        cr, ci = new_center
        self._center = (float(cr), float(ci))
        self._check_precision()

    def move_center(self, pixel_offset):
        """Shift the center by a pixel offset, e.g. from a click to the screen middle."""
        dx, dy = pixel_offset
        cr, ci = self._center
        self.set_center((cr + self._step_size * dx, ci + self._step_size * dy))

    def set_step_size(self, value):
        value = float(value)
        if not value > 0 or not np.isfinite(value):
            raise ValueError(f"step size must be positive and finite, got {value}")
        self._step_size = value
        self._check_precision()

    def set_step_default(self):
        self.set_step_size(self.defaults.step_size)

    def zoom(self, factor):
        """
        Multiply the step size by factor (< 1 zooms in, > 1 zooms out).

        Raises:
            ValueError if factor is not positive or the new step size would
            underflow to zero; the view is left unchanged.
        """
        if not factor > 0:
            raise ValueError(f"zoom factor must be positive, got {factor}")
        new_step = self._step_size * factor
        if new_step == 0.0:
            raise ValueError(
                f"zooming {self._step_size!r} by {factor!r} underflows the step size")
        self.set_step_size(new_step)

    def _check_precision(self):
        # Below the float64 spacing at the center neighbouring pixels map to the
        # same plane point and the image degrades into blocks.
        spacing = np.spacing(max(abs(self._center[0]), abs(self._center[1]), 1e-300))
        below = self._step_size < spacing
        if below and not self._precision_warned:
            logger.warning(
                "Step size %g is below the float64 resolution %g at the current center; "
                "detail is lost beyond this zoom", self._step_size, spacing)
        self._precision_warned = below

    # Depth

    def set_depth(self, value):
        value = int(value)
        if value < 1:
            raise ValueError(f"depth must be at least 1, got {value}")
        self._depth = value

    def mod_depth(self, delta):
        """Change the depth by delta, never going below 1."""
        self.set_depth(max(1, self._depth + int(delta)))

    # Palettes

    def set_palette(self, palette):
        palette = np.array(palette, dtype=np.uint8).reshape(-1, 3)
        if len(palette) == 0:
            raise ValueError("palette must have at least one color")
        palette.setflags(write=False)
        self._palette = palette
        logger.debug("Palette: %d colors", len(palette))

    def regenerate_palette(self, strategy, n, **options):
        """Replace the palette with a fresh one built by `strategy`."""
        self.set_palette(build_palette(strategy, n, self.rng, **options))

    def randomize_start_color(self):
        """Single-color palette with a random hue."""
        self.set_palette([random_bucket(self.rng)])

    def randomize_color(self, n):
        self.regenerate_palette(PaletteStrategy.RANDOM, n)

    def randomize_continuous_color(self, n, start_hue=None, hue_range=(0.0, 1.0)):
        self.regenerate_palette(PaletteStrategy.CONTINUOUS, n,
                                start_hue=start_hue, hue_range=hue_range)

    def randomize_continuous_color_ranged(self, n):
        self.regenerate_palette(PaletteStrategy.CONTINUOUS_RANGED, n)

    def randomize_alternating_color(self, n, k):
        self.regenerate_palette(PaletteStrategy.ALTERNATING, n, k=k)

    # Rendering

    def log_stats(self):
        logger.info("center = %r + j%r, step size = %r, depth = %d",
                    self._center[0], self._center[1], self._step_size, self._depth)

    def estimate_entropy(self, shape):
        """Entropy of a coarse sample of this view rendered at shape."""
        return estimate_entropy(self, shape)

    def create_values(self, shape):
        """Classification of every pixel, row-major."""
        return sample_field(self, shape)

    def create_pixel_triplets(self, shape):
        """(width * height, 3) uint8 array of pixel colors, row-major."""
        return render_pixels(self.params, shape)

    def create_pixels(self, shape):
        """Flat RGB byte buffer, as handed to the image encoder."""
        return self.create_pixel_triplets(shape).tobytes()

    # Snapshots

    def snapshot(self, file_name, shape):
        """
        Render the view and save it as `file_name`.png.

        Returns:
            The path written

        Raises:
            SnapshotError if the image could not be written
        """
        path = snapshots.snapshot_path(file_name)
        snapshots.write_png(self.create_pixels(shape), tuple(shape), path)
        return path

    def snapshot_sequence_zoomed(self, count, shape, zoom_factor, file_prefix):
        """
        Save `count` frames named {prefix}{index:06}, zooming by zoom_factor
        after each one. Stops at the first failed write.

        Returns:
            List of paths written
        """
        paths = []
        for i in range(count):
            paths.append(self.snapshot(snapshots.sequence_name(file_prefix, i), shape))
            self.zoom(zoom_factor)
            if (i + 1) % SEQUENCE_LOG_INTERVAL == 0:
                logger.info("Sequence progress: %d/%d", i + 1, count)
        return paths
