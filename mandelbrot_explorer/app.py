"""
Main application module for the Mandelbrot explorer.

Contains the MandelbrotApp class which handles:
- Window setup and main loop
- User input (keyboard navigation, click to recenter)
- Rendering and display
- Snapshots and zoomed sequences of the current view
"""

import logging
from datetime import datetime

import numpy as np
import pygame

from .compute import warmup_jit
from .config import ExplorerSettings
from .errors import DisplayError, SnapshotError
from .renderer import MandelbrotRenderer
from .view import ViewState


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
CAPTION = "Mandelbrot Explorer - click to recenter, E/Q zoom, R/F depth, Esc to quit"


def timestamp_name():
    """Snapshot base name from the local time."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


class MandelbrotApp:
    """
    Main application class for the Mandelbrot explorer.

    Handles the pygame window, event loop, and coordinates between the
    view state, the renderer and the display.

    Keys:
        E / Q: zoom in / out
        R / F: depth up / down
        F1: snapshot, F2: zoomed sequence
        F3: random start color, F4: reset zoom
        F5: ranged continuous palette, F6: alternating palette
        Esc: quit
    """

    PALETTE_SIZE_RANGE = (100, 500)
    ALTERNATING_COLORS = 4

    def __init__(self, settings=None, view=None):
        """
        Initialize the application.

        Args:
            settings: ExplorerSettings (default values if omitted)
            view: ViewState to explore (a fresh default view if omitted)
        """
        self.settings = settings or ExplorerSettings()
        self.view = view or ViewState()
        self.shape = tuple(self.settings.window_size)

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None

        self.renderer = MandelbrotRenderer(*self.shape)
        self.current_surface = None

        self.needs_update = True
        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._warmup()

        self.running = True
        try:
            while self.running:
                self._handle_events()
                if self.needs_update:
                    self.needs_update = False
                    self.view.log_stats()
                    self.renderer.compute_async(self.view.params)
                    pygame.display.set_caption("Computing...")
                self._check_render_result()
                self._draw()
                self.clock.tick(self.settings.fps)
        finally:
            pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        try:
            pygame.init()
            self.screen = pygame.display.set_mode(self.shape, pygame.RESIZABLE)
        except pygame.error as err:
            raise DisplayError(f"could not create {self.shape[0]}x{self.shape[1]} window: {err}") from err
        pygame.display.set_caption(CAPTION)
        self.clock = pygame.time.Clock()

    def _warmup(self):
        """Compile the JIT kernels before the first frame."""
        pygame.display.set_caption("Compiling (first run only)...")
        warmup_jit()
        pygame.display.set_caption(CAPTION)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEBUTTONDOWN:
                self.handle_click(event.pos, event.button)
            elif event.type == pygame.VIDEORESIZE:
                self.handle_resize(event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

    def handle_resize(self, width, height):
        logger.info("W = %d, H = %d", width, height)
        self.shape = (width, height)
        self.renderer.resize(width, height)
        self.needs_update = True

    def handle_click(self, pos, button):
        """Left click recenters the view on the clicked pixel."""
        logger.info("pos = %d/%d, button = %d", pos[0], pos[1], button)
        if button == 1:
            offset = (pos[0] - self.shape[0] // 2, pos[1] - self.shape[1] // 2)
            self.view.move_center(offset)
            self.needs_update = True

    def handle_key(self, key):
        """Handle keyboard input."""
        settings = self.settings
        if key == pygame.K_e:
            self._zoom(settings.zoom_in_factor)
        elif key == pygame.K_q:
            self._zoom(settings.zoom_out_factor)
        elif key == pygame.K_r:
            self.view.mod_depth(settings.depth_step)
        elif key == pygame.K_f:
            self.view.mod_depth(-settings.depth_step)
        elif key == pygame.K_F1:
            self.take_snapshot()
            return
        elif key == pygame.K_F2:
            self.take_sequence()
        elif key == pygame.K_F3:
            self.view.randomize_start_color()
        elif key == pygame.K_F4:
            self.view.set_step_default()
        elif key == pygame.K_F5:
            self.view.randomize_continuous_color_ranged(self._random_palette_size())
        elif key == pygame.K_F6:
            self.view.randomize_alternating_color(self._random_palette_size(), self.ALTERNATING_COLORS)
        elif key == pygame.K_ESCAPE:
            self.running = False
            return
        else:
            return
        self.needs_update = True

    def _zoom(self, factor):
        try:
            self.view.zoom(factor)
        except ValueError as err:
            logger.warning("Zoom ignored: %s", err)

    def _random_palette_size(self):
        low, high = self.PALETTE_SIZE_RANGE
        return int(self.view.rng.integers(low, high))

    def take_snapshot(self):
        """Save the current view at the configured snapshot size."""
        shape = self.settings.snapshot_size
        name = timestamp_name()
        self.renderer.wait()
        logger.info("Starting snapshot of size %dx%d", shape[0], shape[1])
        try:
            self.view.snapshot(name, shape)
        except SnapshotError as err:
            logger.error("Snapshot: %s", err)
            return False
        logger.info("Finished snapshot!")
        return True

    def take_sequence(self):
        """Save a zoomed sequence starting from the current view."""
        settings = self.settings
        logger.info("Starting zoomed sequence...")
        self.renderer.wait()
        try:
            self.view.snapshot_sequence_zoomed(
                settings.sequence_count,
                settings.sequence_shape,
                settings.sequence_zoom_factor,
                settings.sequence_prefix,
            )
        except SnapshotError as err:
            logger.error("Zoomed sequence: %s", err)
            return False
        except ValueError as err:
            logger.warning("Zoomed sequence stopped: %s", err)
            return False
        logger.info("Finished zoomed sequence")
        return True

    def _check_render_result(self):
        """Check if async render has completed."""
        rgb, _ = self.renderer.get_result()
        if rgb is not None:
            self.current_surface = pygame.surfarray.make_surface(
                np.ascontiguousarray(rgb.swapaxes(0, 1))
            )
            pygame.display.set_caption(CAPTION)

    def _draw(self):
        """Draw the current frame."""
        self.screen.fill((0, 0, 0))
        if self.current_surface is not None:
            self.screen.blit(self.current_surface, (0, 0))
        pygame.display.flip()


def run(settings=None, view=None):
    """
    Run the Mandelbrot explorer.

    Args:
        settings: ExplorerSettings (default values if omitted)
        view: Starting ViewState (default view if omitted)
    """
    app = MandelbrotApp(settings, view)
    try:
        app.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
