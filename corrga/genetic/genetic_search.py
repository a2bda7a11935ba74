"""
Genetic algorithm for locating a template inside an image.

This module provides the evolution engine. Each generation is built with
fitness-proportionate (roulette) selection, axis-swapping crossover that only
replaces a parent when the offspring is strictly fitter, and unconditional
single-bit mutation.
"""

import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from corrga.core.exceptions import ConfigurationError, ValidationError
from corrga.core.logging import get_logger
from corrga.utils.helpers import ensure_directory, safe_divide
from corrga.utils.validators import validate_rate, validate_search_dimensions
from .gene import Gene, BAD_FITNESS, GENE_BITS
from .fitness import FitnessOracle, SearchSpace, TemplateMatchFitness

logger = get_logger(__name__)

# How the selection weights of a generation were derived
SELECTION_PROPORTIONAL = "proportional"
SELECTION_RAW_FITNESS = "raw_fitness"
SELECTION_UNIFORM = "uniform"


@dataclass(frozen=True)
class GeneticSearchConfig:
    """Configuration for the correlation genetic algorithm."""

    population_size: int = 100
    crossover_rate: float = 0.40
    mutation_rate: float = 0.03

    # Generations between INFO progress lines
    log_interval: int = 10

    @property
    def crossover_count(self) -> int:
        return int(math.floor(self.population_size * self.crossover_rate))

    @property
    def mutation_count(self) -> int:
        return int(math.floor(self.population_size * self.mutation_rate))

    def validate(self) -> None:
        """
        Check the configuration.

        Raises:
            ConfigurationError: If any setting is out of range
        """
        errors = []

        if (isinstance(self.population_size, bool) or
                not isinstance(self.population_size, int) or self.population_size <= 0):
            errors.append("Population size must be a positive integer")

        for name in ("crossover_rate", "mutation_rate"):
            try:
                validate_rate(getattr(self, name), name.replace("_", " ").capitalize())
            except ConfigurationError as e:
                errors.append(e.message)

        if self.log_interval <= 0:
            errors.append("Log interval must be positive and greater than 0")

        if errors:
            raise ConfigurationError("Genetic search configuration is invalid", details=errors)


@dataclass
class GenerationResult:
    """Result of a single generation."""

    generation: int
    best_fitness: float
    avg_fitness: float
    worst_fitness: float
    best_gene: Gene
    distinct_locations: int
    selection_mode: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class CorrelationGA:
    """
    Genetic algorithm that searches for the best match of a template in an image.

    The engine owns its population and changes it only inside
    ``advance_generation``. There is no stopping criterion: the caller decides
    how many generations to run. All randomness comes from the injected
    ``numpy.random.Generator``, so a seeded generator replays exactly.
    """

    def __init__(
        self,
        image: np.ndarray,
        template: np.ndarray,
        config: Optional[GeneticSearchConfig] = None,
        rng: Optional[np.random.Generator] = None,
        fitness: Optional[FitnessOracle] = None
    ):
        """
        Initialize the engine and evaluate a random first population.

        Args:
            image: Image to search
            template: Template to locate, strictly smaller than the image
            config: Genetic search configuration
            rng: Random source (defaults to an unseeded generator)
            fitness: Fitness oracle (defaults to template matching on image/template)

        Raises:
            ConfigurationError: If the configuration or the dimensions are unusable
        """
        self.config = config or GeneticSearchConfig()
        self.config.validate()
        validate_search_dimensions(image, template)

        self.space = SearchSpace.from_arrays(image, template)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.fitness = fitness if fitness is not None else TemplateMatchFitness(image, template)

        self.population_size = self.config.population_size
        self.crossover_count = self.config.crossover_count
        self.mutation_count = self.config.mutation_count

        self.generation: int = 0
        self.generation_history: List[GenerationResult] = []

        self._population: List[Gene] = [
            self._evaluated(Gene.random(self.space.image_width, self.space.image_height, self.rng))
            for _ in range(self.population_size)
        ]

        logger.info(
            f"Initialized population of {self.population_size} "
            f"(crossover {self.crossover_count}, mutation {self.mutation_count}) "
            f"for a {self.space.template_width}x{self.space.template_height} template "
            f"in a {self.space.image_width}x{self.space.image_height} image"
        )

    @property
    def population(self) -> List[Gene]:
        """A copy of the current population."""
        return list(self._population)

    def evaluate(self, x: int, y: int) -> float:
        """
        Fitness of a location, BAD_FITNESS if the template does not fit there.

        The oracle is never consulted for an invalid location.
        """
        if not self.space.contains(x, y):
            return BAD_FITNESS
        return self.fitness.evaluate(x, y)

    def _evaluated(self, gene: Gene) -> Gene:
        return gene.with_fitness(self.evaluate(gene.x, gene.y))

    def seed_population(self, genes: Sequence[Gene]) -> None:
        """
        Replace the population with the given genes, taken as already evaluated.

        Raises:
            ValidationError: If the number of genes differs from the population size
        """
        genes = list(genes)
        if len(genes) != self.population_size:
            raise ValidationError(
                f"Population must contain exactly {self.population_size} genes, got {len(genes)}"
            )
        if not all(isinstance(gene, Gene) for gene in genes):
            raise ValidationError("Population members must be Gene instances")
        self._population = genes

    def selection_weights(self, population: Optional[Sequence[Gene]] = None) -> Tuple[np.ndarray, str]:
        """
        Cumulative selection weights for fitness-proportionate selection.

        Each individual's weight is floor(100 * fitness / total fitness), the
        number of times it would appear in a literal roulette pool. When the
        total fitness is zero every individual gets weight 1; when the total
        is positive but every floored share is zero, the raw fitness values are
        used as weights.

        Args:
            population: Genes to weight (defaults to the current population)

        Returns:
            Tuple of (cumulative weights, selection mode)
        """
        if population is None:
            population = self._population

        fitness = np.array([gene.fitness for gene in population], dtype=np.float64)
        total = fitness.sum()

        if total <= 0:
            return np.arange(1, len(fitness) + 1, dtype=np.int64), SELECTION_UNIFORM

        shares = np.floor(fitness / total * 100.0).astype(np.int64)
        if shares.sum() > 0:
            return np.cumsum(shares), SELECTION_PROPORTIONAL

        return np.cumsum(fitness), SELECTION_RAW_FITNESS

    def _draw(self, cumulative: np.ndarray, size: int) -> np.ndarray:
        """Draw indices with probability proportional to their weight."""
        if np.issubdtype(cumulative.dtype, np.integer):
            draws = self.rng.integers(0, cumulative[-1], size=size)
        else:
            draws = self.rng.random(size) * cumulative[-1]
        indices = np.searchsorted(cumulative, draws, side="right")
        # float rounding can put a draw exactly on the total
        return np.minimum(indices, len(cumulative) - 1)

    def advance_generation(self) -> None:
        """Create the next generation and make it the current population."""
        n = self.population_size

        cumulative, mode = self.selection_weights()
        if mode == SELECTION_UNIFORM:
            logger.warning(
                f"Generation {self.generation + 1}: total fitness is zero, "
                f"falling back to uniform selection"
            )
        elif mode == SELECTION_RAW_FITNESS:
            logger.warning(
                f"Generation {self.generation + 1}: every fitness share is below 1%, "
                f"selecting in proportion to raw fitness"
            )

        next_population = [self._population[i] for i in self._draw(cumulative, n)]

        crossovers_accepted = 0
        for _ in range(self.crossover_count):
            first = int(self.rng.integers(n))
            second = int(self.rng.integers(n))

            first_offspring = self._evaluated(next_population[first].crossover(next_population[second]))
            second_offspring = self._evaluated(next_population[second].crossover(next_population[first]))

            # offspring only replace a parent they strictly improve on
            if first_offspring.fitness > next_population[first].fitness:
                next_population[first] = first_offspring
                crossovers_accepted += 1
            if second_offspring.fitness > next_population[second].fitness:
                next_population[second] = second_offspring
                crossovers_accepted += 1

        for _ in range(self.mutation_count):
            mutated = int(self.rng.integers(n))
            axis = int(self.rng.integers(2))
            bit = int(self.rng.integers(GENE_BITS))
            next_population[mutated] = self._evaluated(next_population[mutated].flip_bit(axis, bit))

        self._population = next_population
        self.generation += 1

        result = self._create_generation_result(mode, crossovers_accepted)
        self.generation_history.append(result)

        logger.debug(
            f"Generation {result.generation}: best={result.best_fitness:.6g} "
            f"at {result.best_gene.location}, selection={mode}"
        )
        if self.generation % self.config.log_interval == 0:
            self._log_generation_progress(result)

    def best_individual(self) -> Gene:
        """
        Return the fittest gene of the current population.

        Ties go to the first gene in population order. If no gene beats
        BAD_FITNESS the first gene is returned.
        """
        best = self._population[0]
        best_fitness = BAD_FITNESS
        for gene in self._population:
            if gene.fitness > best_fitness:
                best = gene
                best_fitness = gene.fitness
        return best

    def run(self, generations: int) -> Gene:
        """
        Advance a fixed number of generations.

        Args:
            generations: Number of generations to run

        Returns:
            Best gene after the last generation
        """
        if generations < 0:
            raise ValidationError(f"Number of generations must not be negative, got {generations}")

        for _ in range(generations):
            self.advance_generation()

        best = self.best_individual()
        logger.info(
            f"Search finished after {self.generation} generations: "
            f"best fitness {best.fitness:.6g} at {best.location}"
        )
        return best

    def _create_generation_result(self, mode: str, crossovers_accepted: int) -> GenerationResult:
        """Create result summary for the current generation."""
        fitness_scores = [gene.fitness for gene in self._population]
        best = self.best_individual()

        return GenerationResult(
            generation=self.generation,
            best_fitness=best.fitness,
            avg_fitness=float(np.mean(fitness_scores)),
            worst_fitness=min(fitness_scores),
            best_gene=best,
            distinct_locations=len({gene.location for gene in self._population}),
            selection_mode=mode,
            metadata={
                "fitness_std": float(np.std(fitness_scores)),
                "crossovers_accepted": crossovers_accepted,
                "crossover_acceptance": safe_divide(crossovers_accepted, 2 * self.crossover_count)
            }
        )

    def _log_generation_progress(self, result: GenerationResult) -> None:
        """Log progress for current generation."""
        logger.info(
            f"Generation {result.generation}: "
            f"Best={result.best_fitness:.6g} at {result.best_gene.location}, "
            f"Avg={result.avg_fitness:.6g}, "
            f"Worst={result.worst_fitness:.6g}, "
            f"Distinct={result.distinct_locations}"
        )

    def history_frame(self) -> pd.DataFrame:
        """Generation history as a DataFrame, one row per generation."""
        columns = [
            "generation", "best_fitness", "avg_fitness", "worst_fitness",
            "best_x", "best_y", "distinct_locations", "selection_mode",
            "crossovers_accepted"
        ]
        rows = [
            {
                "generation": r.generation,
                "best_fitness": r.best_fitness,
                "avg_fitness": r.avg_fitness,
                "worst_fitness": r.worst_fitness,
                "best_x": r.best_gene.x,
                "best_y": r.best_gene.y,
                "distinct_locations": r.distinct_locations,
                "selection_mode": r.selection_mode,
                "crossovers_accepted": r.metadata.get("crossovers_accepted", 0)
            }
            for r in self.generation_history
        ]
        return pd.DataFrame(rows, columns=columns)

    def save_history(self, path: Union[str, Path]) -> Optional[Path]:
        """
        Save the generation history to a CSV file.

        Returns:
            Path written, or None if writing failed
        """
        path = Path(path)
        try:
            ensure_directory(path.parent)
            self.history_frame().to_csv(path, index=False)
            logger.info(f"Search history saved to {path}")
            return path
        except OSError as e:
            logger.error(f"Error saving search history: {e}")
            return None

    def get_search_summary(self) -> Dict[str, Any]:
        """Get a summary of the search state."""
        best = self.best_individual()
        return {
            "generation": self.generation,
            "best_fitness": best.fitness,
            "best_location": best.location,
            "population_size": self.population_size,
            "crossover_count": self.crossover_count,
            "mutation_count": self.mutation_count,
            "distinct_locations": len({gene.location for gene in self._population}),
            "cache": self.fitness.get_cache_stats()
        }
