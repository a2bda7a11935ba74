"""
Genetic search for template locations.
"""

from .gene import Gene, BAD_FITNESS, GENE_BITS, AXIS_X, AXIS_Y
from .fitness import FitnessOracle, TemplateMatchFitness, SearchSpace, PERFECT_MATCH_FITNESS
from .genetic_search import CorrelationGA, GeneticSearchConfig, GenerationResult

__all__ = [
    "Gene",
    "BAD_FITNESS",
    "GENE_BITS",
    "AXIS_X",
    "AXIS_Y",
    "FitnessOracle",
    "TemplateMatchFitness",
    "SearchSpace",
    "PERFECT_MATCH_FITNESS",
    "CorrelationGA",
    "GeneticSearchConfig",
    "GenerationResult"
]
