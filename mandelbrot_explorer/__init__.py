"""
Mandelbrot Explorer Package

Renders and explores the Mandelbrot set: escape-time evaluation on all CPU
cores with Numba, palette strategies, entropy-driven autonomous search and
PNG snapshots (single frames and zoomed sequences). Pygame provides the
interactive window and the PNG encoder.

Quick Start:
    from mandelbrot_explorer import ViewState
    view = ViewState()
    view.snapshot("overview", (800, 600))

Or from command line:
    python -m mandelbrot_explorer explore

Package Structure:
    - compute.py: JIT-compiled evaluation, sampling, coloring and entropy
    - colormaps.py: Palette construction strategies
    - view.py: View state and its mutators
    - snapshot.py: PNG output
    - renderer.py: Async rendering for the interactive window
    - app.py: Interactive explorer and event loop
    - generator.py: Autonomous search for interesting views
    - config.py: Defaults loaded from settings.json
    - cli.py: Command line entry point

Controls (explorer):
    - Click: Recenter on the clicked point
    - E / Q: Zoom in / out
    - R / F: Increase / decrease depth
    - F1 / F2: Snapshot / zoomed sequence
    - F3 - F6: New palette
    - ESC: Quit
"""

from .app import run, MandelbrotApp
from .colormaps import PALETTES, PaletteStrategy, build_palette, list_palette_names
from .compute import BOUNDED, escape_time, estimate_entropy, sample_field, colorize
from .errors import MandelbrotError, SnapshotError, DisplayError, ConfigError
from .generator import Generator
from .renderer import MandelbrotRenderer
from .view import ViewParameters, ViewState

__version__ = "1.0.0"
__all__ = [
    "run",
    "MandelbrotApp",
    "MandelbrotRenderer",
    "PALETTES",
    "PaletteStrategy",
    "build_palette",
    "list_palette_names",
    "BOUNDED",
    "escape_time",
    "estimate_entropy",
    "sample_field",
    "colorize",
    "MandelbrotError",
    "SnapshotError",
    "DisplayError",
    "ConfigError",
    "Generator",
    "ViewParameters",
    "ViewState",
]
