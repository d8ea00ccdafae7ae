# terrain_generator/__main__.py

"""
================================================================================
TERRAIN GENERATOR COMMAND-LINE TOOL
================================================================================
Generates a terrain height field, opens the interactive edit menu and saves
the result as a Wavefront OBJ mesh.

Usage:
    python -m terrain_generator --seed 42 --output terrain.obj
    python -m terrain_generator --config path/to/config.json --preview terrain.png
================================================================================
"""
import argparse
import json
import logging
import logging.config
import os
import sys

from . import config as DEFAULTS
from .errors import TerrainError
from .generator import TerrainGenerator
from .menu import run_menu

LOG_CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'logging_config.json')
LOG_FILENAME = 'terrain_generator.log'


def setup_logging(log_dir: str, level: str = None) -> logging.Logger:
    """Initializes the logging system from the packaged config file."""
    os.makedirs(log_dir, exist_ok=True)
    with open(LOG_CONFIG_PATH, 'rt') as f:
        log_config = json.load(f)
    log_config['handlers']['file']['filename'] = os.path.join(log_dir, LOG_FILENAME)
    if level:
        log_config['root']['level'] = level.upper()
    logging.config.dictConfig(log_config)
    return logging.getLogger("TerrainGenerator")


def load_config(config_path: str, logger: logging.Logger) -> dict:
    """Loads terrain parameters from a JSON file, or returns {} if none given."""
    if not config_path:
        return {}
    logger.info(f"Loading configuration from: {config_path}")
    with open(config_path, 'r') as f:
        config = json.load(f)
    return dict(config.get('terrain_generation_parameters', {}))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a procedural terrain, edit it interactively and export it as an OBJ mesh."
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON file with a 'terrain_generation_parameters' object."
    )
    parser.add_argument(
        "--size", type=int, default=None,
        help=f"Cells along one side of the grid (default: {DEFAULTS.GRID_SIZE})"
    )
    parser.add_argument(
        "--scale", type=float, default=None,
        help=f"Noise frequency; higher gives smaller features (default: {DEFAULTS.NOISE_SCALE})"
    )
    parser.add_argument(
        "--roughness", type=float, default=None,
        help=f"Height amplitude multiplier (default: {DEFAULTS.ROUGHNESS})"
    )
    seed_group = parser.add_mutually_exclusive_group()
    seed_group.add_argument(
        "--seed", type=int, default=None,
        help=f"Random seed for reproducible terrain (default: {DEFAULTS.DEFAULT_SEED})"
    )
    seed_group.add_argument(
        "--random-seed", action="store_true",
        help="Use a fresh random permutation on every run."
    )
    parser.add_argument(
        "--output", "-o", default=DEFAULTS.DEFAULT_OUTPUT_FILENAME,
        help=f"Output OBJ file path (default: {DEFAULTS.DEFAULT_OUTPUT_FILENAME})"
    )
    parser.add_argument(
        "--preview", default=None,
        help="Also save a grayscale PNG of the final height field to this path."
    )
    parser.add_argument(
        "--log-dir", default="logs",
        help="Directory for the log file (default: logs)"
    )
    parser.add_argument(
        "--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Root log level (default: INFO)"
    )
    return parser


def main(argv=None, stdin=None, stdout=None) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    logger = setup_logging(args.log_dir, args.log_level)

    try:
        params = load_config(args.config, logger)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return 1

    for key in ("size", "scale", "roughness", "seed"):
        value = getattr(args, key)
        if value is not None:
            params[key] = value
    if args.random_seed:
        params['seed'] = None

    try:
        generator = TerrainGenerator(config=params, logger=logger)
    except TerrainError as e:
        logger.critical(f"Could not generate terrain: {e}")
        print(f"Could not generate terrain: {e}", file=stdout)
        return 1

    output_dir = os.path.dirname(args.output)
    if output_dir:
        try:
            os.makedirs(output_dir, exist_ok=True)
        except OSError as e:
            logger.critical(f"Could not create output directory '{output_dir}': {e}")
            print(f"Could not create output directory '{output_dir}': {e}", file=stdout)
            return 1

    saved = run_menu(generator, args.output, stdin, stdout, preview_path=args.preview)
    return 0 if saved else 1


if __name__ == "__main__":
    sys.exit(main())
