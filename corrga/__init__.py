"""
corrga - Genetic Algorithm Template Correlation

Locates a template region inside an image with a genetic algorithm whose
fitness is the inverse squared-difference template match, plus an interactive
OpenCV driver that tracks a mouse-selected region in video.
"""

__version__ = "0.1.0"

from .core.config import Config
from .core.logging import setup_logging
from .genetic import Gene, CorrelationGA, GeneticSearchConfig, FitnessOracle, TemplateMatchFitness

__all__ = [
    "Config",
    "setup_logging",
    "Gene",
    "CorrelationGA",
    "GeneticSearchConfig",
    "FitnessOracle",
    "TemplateMatchFitness"
]
