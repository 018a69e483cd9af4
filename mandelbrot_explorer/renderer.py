"""
Asynchronous Mandelbrot renderer.

The MandelbrotRenderer class handles:
- Background (async) computation so the UI stays responsive
- Coalescing of requests: while a frame is computing, only the latest
  request is kept and rendered next
- Handing finished frames back to the main thread under a lock

Each request carries an immutable ViewParameters snapshot, so the caller is
free to keep mutating its ViewState while a frame is in flight.
"""

import logging
import threading

from .view import render_pixels


logger = logging.getLogger(__name__)


class MandelbrotRenderer:
    """
    Handles async Mandelbrot rendering.

    Usage:
        renderer = MandelbrotRenderer(800, 600)
        renderer.compute_async(view.params)

        # In your game loop:
        rgb, params = renderer.get_result()
        if rgb is not None:
            # rgb is a (height, width, 3) image of the view described by params
            display(rgb)

    Attributes:
        width, height: Output dimensions in pixels
    """

    def __init__(self, width, height):
        """
        Initialize the renderer.

        Args:
            width, height: Output dimensions in pixels
        """
        self.width = width
        self.height = height

        # Async computation state
        self.computing = False
        self.result_ready = False
        self.pending = None        # (params, shape) waiting to be rendered
        self.rgb = None
        self.result_params = None
        self.lock = threading.Lock()
        self._thread = None

    def resize(self, width, height):
        """Change the output size; applies to the next request."""
        with self.lock:
            self.width = width
            self.height = height

    def compute_async(self, params):
        """
        Start async computation of a frame.

        If a frame is already computing, the request replaces any earlier
        one still waiting and runs when the current frame finishes.

        Args:
            params: ViewParameters describing the frame
        """
        with self.lock:
            self.pending = (params, (self.width, self.height))
            if not self.computing:
                self.computing = True
                self._thread = threading.Thread(target=self._compute_thread)
                self._thread.daemon = True
                self._thread.start()

    def _compute_thread(self):
        """Background thread for Mandelbrot computation."""
        while True:
            with self.lock:
                request = self.pending
                self.pending = None
                if request is None:
                    self.computing = False
                    break

            params, shape = request
            width, height = shape
            try:
                rgb = render_pixels(params, shape).reshape(height, width, 3)
            except Exception:
                logger.exception("Render of %dx%d frame failed", width, height)
                continue

            with self.lock:
                self.rgb = rgb
                self.result_params = params
                self.result_ready = True

    def get_result(self):
        """
        Get the latest render result if ready.

        Returns:
            Tuple of (image, params) if a new frame is ready, (None, None)
            otherwise. The image is (height, width, 3) uint8.
        """
        with self.lock:
            if self.result_ready:
                self.result_ready = False
                return self.rgb, self.result_params
        return None, None

    def wait(self, timeout=None):
        """Block until the background thread has drained all requests."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
