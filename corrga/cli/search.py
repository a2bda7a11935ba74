"""
Headless genetic template search CLI.

Loads an image and a template (from a file or a region of the image), runs a
fixed number of generations and reports the best location found.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from ..core.config import Config
from ..core.exceptions import CorrGAException
from ..core.logging import setup_logging, get_logger, log_with_correlation
from ..data.images import Region, load_image, crop_region
from ..genetic import CorrelationGA, GeneticSearchConfig
from ..utils.helpers import parse_roi


def _load_config(parsed_args: argparse.Namespace) -> Config:
    config = Config(config_file=parsed_args.config, env_file=parsed_args.env_file)
    search = config.search
    if parsed_args.population_size is not None:
        search.population_size = parsed_args.population_size
    if parsed_args.crossover_rate is not None:
        search.crossover_rate = parsed_args.crossover_rate
    if parsed_args.mutation_rate is not None:
        search.mutation_rate = parsed_args.mutation_rate
    if parsed_args.generations is not None:
        search.generations = parsed_args.generations
    if parsed_args.seed is not None:
        search.seed = parsed_args.seed
    if parsed_args.output_dir is not None:
        config.output.history_dir = str(parsed_args.output_dir)
    return config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="corrga search",
        description="Locate a template in an image with a genetic algorithm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search for a template stored in its own file
  corrga search --image scene.png --template patch.png --generations 100

  # Cut the template out of the image itself and use a fixed seed
  corrga search --image scene.png --roi 40,60,32,32 --seed 7
        """
    )

    # -- Configuration ------------------------------------
    config_group = parser.add_argument_group('Configuration')
    config_group.add_argument('--config', '-c', type=Path, help='Path to configuration file (JSON)')
    config_group.add_argument('--env-file', '-e', type=Path, help='Path to .env file with overrides')

    # -- Input --------------------------------------------
    input_group = parser.add_argument_group('Input')
    input_group.add_argument('--image', type=Path, required=True, help='Image to search')
    template_source = input_group.add_mutually_exclusive_group(required=True)
    template_source.add_argument('--template', type=Path, help='Template image file')
    template_source.add_argument('--roi', type=str, help='Template region of the image as x,y,width,height')
    input_group.add_argument('--grayscale', action='store_true', help='Match on single channel images')

    # -- Genetic Search -----------------------------------
    genetic_group = parser.add_argument_group('Genetic Search')
    genetic_group.add_argument('--generations', type=int, help='Generations to run (default: from config, 50)')
    genetic_group.add_argument('--population-size', type=int, help='Population size (default: from config, 100)')
    genetic_group.add_argument('--crossover-rate', type=float, help='Crossovers per generation as a fraction of the population (default: 0.40)')
    genetic_group.add_argument('--mutation-rate', type=float, help='Mutations per generation as a fraction of the population (default: 0.03)')
    genetic_group.add_argument('--seed', type=int, help='Random seed for a reproducible search')

    # -- Output ------------------------------------------
    output_group = parser.add_argument_group('Output')
    output_group.add_argument('--output-dir', type=Path, help='Directory for the history CSV')
    output_group.add_argument('--save-history', dest='save_history', action='store_true', help='Save search history to file')
    output_group.add_argument('--no-save-history', dest='save_history', action='store_false')
    output_group.set_defaults(save_history=True)
    output_group.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')
    output_group.add_argument('--log-file', type=Path, help='Write structured logs to this file')

    return parser


@log_with_correlation
def run_search(parsed_args: argparse.Namespace, config: Config):
    """Run the search described by the parsed arguments. Returns the engine."""
    logger = get_logger(__name__)

    image = load_image(parsed_args.image, grayscale=parsed_args.grayscale)
    if parsed_args.template is not None:
        template = load_image(parsed_args.template, grayscale=parsed_args.grayscale)
    else:
        template = crop_region(image, Region(*parse_roi(parsed_args.roi)))

    search = config.search
    engine = CorrelationGA(
        image,
        template,
        config=GeneticSearchConfig(
            population_size=search.population_size,
            crossover_rate=search.crossover_rate,
            mutation_rate=search.mutation_rate
        ),
        rng=np.random.default_rng(search.seed)
    )

    logger.info(f"Running {search.generations} generations")
    engine.run(search.generations)

    if parsed_args.save_history:
        timestamp = pd.Timestamp.now().strftime('%Y%m%d_%H%M%S')
        engine.save_history(config.get_history_dir() / f"search_history_{timestamp}.csv")

    return engine


def search_command(args: Optional[list] = None) -> None:
    parsed_args = _build_parser().parse_args(args)

    setup_logging(
        level=parsed_args.log_level or "INFO",
        log_file=parsed_args.log_file,
        enable_file=parsed_args.log_file is not None
    )
    logger = get_logger(__name__)

    try:
        config = _load_config(parsed_args)
        if parsed_args.log_level is None:
            logging.getLogger().setLevel(config.output.log_level.upper())
        logger.info(f"Configuration: {config}")
        engine = run_search(parsed_args, config)
    except CorrGAException as e:
        logger.error(f"Search failed: {e}")
        sys.exit(1)

    best = engine.best_individual()
    print("\n=== Genetic Template Search Completed ===")
    print(f"Generations: {engine.generation}")
    print(f"Best location: x={best.x}, y={best.y}")
    print(f"Best fitness: {best.fitness:.6g}")


if __name__ == "__main__":
    search_command()
