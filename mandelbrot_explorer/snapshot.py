"""
PNG snapshot output.

Pixels arrive as a flat RGB byte buffer (row-major, 8 bits per channel, no
padding). pygame wraps the buffer in a surface and encodes it; no display
is needed for this.
"""

import logging
import os

import pygame

from .errors import SnapshotError


logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = ".png"


def snapshot_path(file_name):
    """Destination path for a snapshot base name."""
    return file_name + SNAPSHOT_SUFFIX


def sequence_name(prefix, index):
    """Base name of frame `index` of a zoomed sequence."""
    return f"{prefix}{index:06d}"


def write_png(pixels, shape, path):
    """
    Encode an RGB byte buffer as a PNG file.

    Args:
        pixels: bytes of length width * height * 3
        shape: (width, height)
        path: Destination file path

    Raises:
        SnapshotError if the buffer cannot be encoded or the file written
    """
    width, height = shape
    expected = width * height * 3
    if len(pixels) != expected:
        raise ValueError(f"expected {expected} bytes for {width}x{height}, got {len(pixels)}")

    try:
        surface = pygame.image.frombuffer(pixels, (width, height), "RGB")
        pygame.image.save(surface, os.fspath(path))
    except (OSError, pygame.error) as err:
        raise SnapshotError(path, err) from err
    logger.debug("Wrote %dx%d snapshot to %s", width, height, path)
