import os

# pygame must not try to open a real display or audio device
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from mandelbrot_explorer.view import ViewState


DEFAULT_CENTER = (0.41825764120184555, -0.34087020355542164)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def view(rng):
    return ViewState(center=DEFAULT_CENTER, step_size=1.0 / 800.0, depth=400, rng=rng)


@pytest.fixture
def recorded_writes(monkeypatch):
    """Replace the PNG encoder with a recorder of (path, shape, size)."""
    writes = []

    def fake_write_png(pixels, shape, path):
        writes.append((path, tuple(shape), len(pixels)))

    monkeypatch.setattr("mandelbrot_explorer.snapshot.write_png", fake_write_png)
    return writes
