"""
Configuration defaults for the explorer, the generator and new views.

Defaults live in settings.json next to this module. If that file is missing
or broken a warning is logged and the built-in values below are used. A
settings file passed in explicitly must be readable, or ConfigError is
raised.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields

from .errors import ConfigError


logger = logging.getLogger(__name__)

SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')


@dataclass(frozen=True)
class ViewDefaults:
    """Starting point of a fresh view."""

    center: tuple[float, float] = (0.41825764120184555, -0.34087020355542164)
    step_size: float = 1.0 / 800.0
    depth: int = 400
    color_loop: int = 100


@dataclass(frozen=True)
class ExplorerSettings:
    """Window and key binding parameters of the interactive explorer."""

    window_size: tuple[int, int] = (1024, 768)
    fps: int = 30
    zoom_in_factor: float = 0.8
    zoom_out_factor: float = 1.25
    depth_step: int = 25
    snapshot_size: tuple[int, int] = (1920, 1080)
    sequence_count: int = 1000
    sequence_shape: tuple[int, int] = (800, 600)
    sequence_zoom_factor: float = 0.99
    sequence_prefix: str = "seq_"


@dataclass(frozen=True)
class GeneratorSettings:
    """Search space and acceptance threshold of the autonomous generator."""

    snapshot_size: tuple[int, int] = (1920, 1080)
    entropy_threshold: float = 4.0
    depth: int = 400
    step_size_range: tuple[float, float] = (1e-14, 1e-4)
    bucket_count_range: tuple[int, int] = (100, 500)


@dataclass(frozen=True)
class Config:
    view: ViewDefaults = field(default_factory=ViewDefaults)
    explorer: ExplorerSettings = field(default_factory=ExplorerSettings)
    generator: GeneratorSettings = field(default_factory=GeneratorSettings)


def load_settings(path=None):
    """
    Load the raw settings dictionary.

    The bundled file is optional: if it cannot be read, a warning is logged
    and None is returned. A file named explicitly must exist and hold a JSON
    object, otherwise ConfigError is raised.
    """
    settings_path = path or SETTINGS_PATH
    try:
        with open(settings_path, 'r') as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        if path is not None:
            raise ConfigError(f"could not load settings '{settings_path}': {e}") from e
        logger.warning("Could not load %s: %s", settings_path, e)
        return None

    if not isinstance(raw, dict):
        if path is not None:
            raise ConfigError(f"settings '{settings_path}' must hold a JSON object")
        logger.warning("Ignoring %s: not a JSON object", settings_path)
        return None
    return raw


def _section(cls, raw):
    """Build a settings dataclass from a JSON section, ignoring unknown keys."""
    if not raw:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"{cls.__name__} settings must be a JSON object, got {raw!r}")
    values = {}
    for f in fields(cls):
        if f.name not in raw:
            continue
        value = raw[f.name]
        # JSON has no tuples
        values[f.name] = tuple(value) if isinstance(value, list) else value
    unknown = set(raw) - set(values)
    if unknown:
        logger.warning("Ignoring unknown %s keys: %s", cls.__name__, ", ".join(sorted(unknown)))
    return cls(**values)


def load_config(path=None):
    """
    Load the full configuration.

    Args:
        path: Settings file to read (default: the bundled settings.json)

    Returns:
        Config with every section filled in

    Raises:
        ConfigError if an explicit path cannot be read or is not a JSON object
    """
    raw = load_settings(path) or {}
    return Config(
        view=_section(ViewDefaults, raw.get('view')),
        explorer=_section(ExplorerSettings, raw.get('explorer')),
        generator=_section(GeneratorSettings, raw.get('generator')),
    )
