"""
Command line entry point.

    mandelbrot-explorer explore
    mandelbrot-explorer generate --threshold 4.5 --output-dir shots
    mandelbrot-explorer snapshot overview --width 1920 --height 1080
    mandelbrot-explorer sequence seq_ --count 300 --zoom-factor 0.98
"""

import logging
import os
import sys
from argparse import SUPPRESS, ArgumentParser
from dataclasses import replace

import numpy as np

from .app import run as run_explorer
from .colormaps import list_palette_names
from .config import load_config
from .errors import MandelbrotError
from .generator import Generator
from .view import ViewState


logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s %(levelname)-5s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_ENV = "MANDELBROT_LOG"


def setup_logging(verbose=False):
    """
    Send package logs to stderr.

    The level is INFO, or DEBUG with verbose; the MANDELBROT_LOG environment
    variable (debug, info, warning, error) overrides both.
    """
    level = logging.DEBUG if verbose else logging.INFO
    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        level = logging.getLevelName(env_level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    package_logger = logging.getLogger(__package__)
    package_logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False
    return package_logger


def _add_view_arguments(parser):
    parser.add_argument('--width', type=int, dest='width',
                        help='image width in pixels', metavar='WIDTH')
    parser.add_argument('--height', type=int, dest='height',
                        help='image height in pixels', metavar='HEIGHT')
    parser.add_argument('--center', type=float, nargs=2, dest='center',
                        help='center of the view in the complex plane', metavar=('X', 'Y'))
    parser.add_argument('--step', type=float, dest='step_size',
                        help='plane units per pixel', metavar='STEP')
    parser.add_argument('--depth', type=int, dest='depth',
                        help='maximum number of iterations per point', metavar='DEPTH')
    parser.add_argument('--palette', choices=list_palette_names(),
                        help='palette strategy (default: continuous hue ramp)')
    parser.add_argument('--colors', type=int, dest='colors', default=None,
                        help='number of palette colors', metavar='COLORS')


def _common_parser(defaults=True):
    """
    Flags accepted both before and after the subcommand. The subcommand
    copies default to SUPPRESS so they never clobber a value given earlier.
    """
    parser = ArgumentParser(add_help=False)
    parser.add_argument('-v', '--verbose', action='store_true',
                        default=False if defaults else SUPPRESS,
                        help='enable debug logging')
    parser.add_argument('--config', type=str, dest='config',
                        default=None if defaults else SUPPRESS,
                        help='settings JSON file to use instead of the bundled one', metavar='PATH')
    parser.add_argument('--seed', type=int, dest='seed',
                        default=None if defaults else SUPPRESS,
                        help='seed for palettes and random search', metavar='SEED')
    return parser


def build_parser():
    parser = ArgumentParser(prog='mandelbrot-explorer',
                            description='Render and explore the Mandelbrot set.',
                            parents=[_common_parser()])
    common = [_common_parser(defaults=False)]

    commands = parser.add_subparsers(dest='command', required=True)

    explore = commands.add_parser('explore', parents=common, help='open the interactive explorer window')
    _add_view_arguments(explore)

    generate = commands.add_parser('generate', parents=common, help='search for interesting views and save them')
    generate.add_argument('--threshold', type=float, dest='threshold',
                          help='minimum entropy for a view to be saved', metavar='ENTROPY')
    generate.add_argument('--cycles', type=int, dest='cycles', default=None,
                          help='number of views to try (default: run until interrupted)', metavar='N')
    generate.add_argument('--output-dir', type=str, dest='output_dir', default='.',
                          help='directory snapshots are written to', metavar='DIR')

    snapshot = commands.add_parser('snapshot', parents=common, help='render a single PNG')
    snapshot.add_argument('name', help='output base name, ".png" is appended')
    _add_view_arguments(snapshot)

    sequence = commands.add_parser('sequence', parents=common, help='render a zoomed PNG sequence')
    sequence.add_argument('prefix', help='frame name prefix, frames are PREFIX000000.png, ...')
    sequence.add_argument('--count', type=int, dest='count',
                          help='number of frames', metavar='N')
    sequence.add_argument('--zoom-factor', type=float, dest='zoom_factor',
                          help='step size multiplier per frame, < 1 zooms in', metavar='FACTOR')
    _add_view_arguments(sequence)

    return parser


def build_view(args, config, rng):
    """ViewState from the config defaults overridden by command line flags."""
    view = ViewState(center=args.center, step_size=args.step_size, depth=args.depth,
                     rng=rng, defaults=config.view)
    if args.palette is not None or args.colors is not None:
        view.regenerate_palette(args.palette or 'continuous', args.colors or config.view.color_loop)
    return view


def _shape(args, default):
    return (args.width or default[0], args.height or default[1])


def run_command(args, config):
    rng = np.random.default_rng(args.seed)

    if args.command == 'explore':
        settings = replace(config.explorer,
                           window_size=_shape(args, config.explorer.window_size))
        run_explorer(settings, build_view(args, config, rng))

    elif args.command == 'generate':
        settings = config.generator
        if args.threshold is not None:
            settings = replace(settings, entropy_threshold=args.threshold)
        os.makedirs(args.output_dir, exist_ok=True)
        generator = Generator(settings, rng=rng, output_dir=args.output_dir)
        try:
            count = generator.run(cycles=args.cycles)
        except KeyboardInterrupt:
            count = generator.snapshots_taken
        logger.info("Saved %d snapshots", count)

    elif args.command == 'snapshot':
        view = build_view(args, config, rng)
        shape = _shape(args, config.explorer.snapshot_size)
        view.log_stats()
        path = view.snapshot(args.name, shape)
        logger.info("Saved %s", path)

    elif args.command == 'sequence':
        explorer = config.explorer
        view = build_view(args, config, rng)
        shape = _shape(args, explorer.sequence_shape)
        count = args.count if args.count is not None else explorer.sequence_count
        factor = args.zoom_factor if args.zoom_factor is not None else explorer.sequence_zoom_factor
        view.log_stats()
        paths = view.snapshot_sequence_zoomed(count, shape, factor, args.prefix)
        logger.info("Saved %d frames", len(paths))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        run_command(args, load_config(args.config))
    except MandelbrotError as err:
        logger.error("%s", err)
        return 1
    except ValueError as err:
        logger.error("Invalid argument: %s", err)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
