"""
Autonomous search for interesting Mandelbrot views.

Every cycle the Generator jumps to a random place and zoom level, picks a
random ranged palette and scores the view with the entropy estimator. Views
scoring above the threshold are saved as snapshots named by local time.
"""

import logging
import os
from datetime import datetime

import numpy as np

from .config import GeneratorSettings
from .errors import SnapshotError
from .view import ViewState


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
POSITION_RANGE = (-2.0, 2.0)


class Generator:
    """
    Random-walk search over the Mandelbrot set.

    Usage:
        generator = Generator(rng=np.random.default_rng(1))
        generator.run(cycles=100)
    """

    def __init__(self, settings=None, rng=None, output_dir="."):
        """
        Args:
            settings: GeneratorSettings (default values if omitted)
            rng: numpy Generator for positions, zoom levels and palettes
            output_dir: Directory snapshots are written to
        """
        self.settings = settings or GeneratorSettings()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.output_dir = output_dir
        self.view = ViewState(depth=self.settings.depth, rng=self.rng)
        self.snapshots_taken = 0

    def random_position(self):
        low, high = POSITION_RANGE
        return (self.rng.uniform(low, high), self.rng.uniform(low, high))

    def random_step_size(self):
        return self.rng.uniform(*self.settings.step_size_range)

    def random_bucket_count(self):
        low, high = self.settings.bucket_count_range
        return int(self.rng.integers(low, high))

    def randomize_view(self):
        """Move to a random view and return its entropy."""
        self.view.set_center(self.random_position())
        self.view.set_step_size(self.random_step_size())
        self.view.randomize_continuous_color_ranged(self.random_bucket_count())
        return self.view.estimate_entropy(self.settings.snapshot_size)

    def snapshot_name(self):
        return os.path.join(self.output_dir, datetime.now().strftime(TIMESTAMP_FORMAT))

    def cycle(self):
        """
        Run one search step.

        Returns:
            (entropy, saved) where saved tells whether a snapshot was written
        """
        entropy = self.randomize_view()
        if entropy <= self.settings.entropy_threshold:
            logger.debug("Entropy %.3f below threshold, skipping", entropy)
            return entropy, False

        width, height = self.settings.snapshot_size
        logger.info("Entropy threshold reached, taking snapshot (%dx%d)...", width, height)
        name = self.snapshot_name()
        center = self.view.center
        logger.info("center = %r/%r, step_size = %r, depth = %d, entropy = %.3f, file = '%s'",
                    center[0], center[1], self.view.step_size, self.view.depth, entropy, name)
        try:
            self.view.snapshot(name, (width, height))
        except SnapshotError as err:
            logger.error("Snapshot failed: %s", err)
            return entropy, False

        self.snapshots_taken += 1
        logger.info("Snapshot finished!")
        return entropy, True

    def run(self, cycles=None):
        """
        Search until interrupted, or for `cycles` steps.

        Returns:
            Number of snapshots written
        """
        done = 0
        while cycles is None or done < cycles:
            self.cycle()
            done += 1
        return self.snapshots_taken
