"""
Fitness evaluation for the correlation genetic algorithm.

This module provides the fitness oracle interface, the template matching
implementation and the search space that decides which locations are valid.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Tuple

import cv2
import numpy as np

from corrga.core.logging import get_logger

logger = get_logger(__name__)

# 1 / score is clamped to this value when the template matches exactly.
PERFECT_MATCH_FITNESS = 1.0e9
_MIN_MATCH_SCORE = 1.0 / PERFECT_MATCH_FITNESS


@dataclass(frozen=True)
class SearchSpace:
    """Image and template dimensions that bound the candidate locations."""
    
    image_width: int
    image_height: int
    template_width: int
    template_height: int
    
    @classmethod
    def from_arrays(cls, image: np.ndarray, template: np.ndarray) -> "SearchSpace":
        image_height, image_width = image.shape[:2]
        template_height, template_width = template.shape[:2]
        return cls(image_width, image_height, template_width, template_height)
    
    def contains(self, x: int, y: int) -> bool:
        """Whether the template can be placed with its top-left corner at (x, y)."""
        if x < 0 or x >= self.image_width:
            return False
        if y < 0 or y >= self.image_height:
            return False
        if x + self.template_width >= self.image_width:
            return False
        if y + self.template_height >= self.image_height:
            return False
        return True


class FitnessOracle(ABC):
    """
    Abstract base class for location fitness.
    
    Implementations may assume they are only asked about valid locations;
    bounds are enforced by the caller.
    """
    
    def __init__(self, cache_results: bool = True):
        """
        Initialize fitness oracle.
        
        Args:
            cache_results: Whether to cache results per location
        """
        self.cache_results = cache_results
        self._cache: Dict[Tuple[int, int], float] = {}
        self._cache_hits = 0
        self._cache_misses = 0
    
    @abstractmethod
    def compute(self, x: int, y: int) -> float:
        """
        Compute the fitness at a location. Higher is better.
        
        Args:
            x: Column of the template's top-left corner
            y: Row of the template's top-left corner
        
        Returns:
            Fitness value
        """
        pass
    
    def evaluate(self, x: int, y: int) -> float:
        """Return the fitness at (x, y), using the cache when enabled."""
        if not self.cache_results:
            return self.compute(x, y)
        
        key = (x, y)
        if key in self._cache:
            self._cache_hits += 1
            return self._cache[key]
        
        self._cache_misses += 1
        value = self.compute(x, y)
        self._cache[key] = value
        return value
    
    def clear_cache(self) -> None:
        """Clear the evaluation cache."""
        self._cache.clear()
        self._cache_hits = 0
        self._cache_misses = 0
    
    def get_cache_stats(self) -> Dict[str, int]:
        """Get cache statistics."""
        return {
            "cached_results": len(self._cache),
            "cache_hits": self._cache_hits,
            "cache_misses": self._cache_misses
        }


class TemplateMatchFitness(FitnessOracle):
    """
    Fitness from squared-difference template matching.
    
    The template is compared with the equally sized image patch at the
    candidate location by the sum of squared differences (the ``TM_SQDIFF``
    score of ``cv2.matchTemplate`` for a single placement, computed with
    ``cv2.norm`` so that an exact match scores exactly zero). The fitness is
    the reciprocal of that score, so small differences give high fitness.
    """
    
    def __init__(self, image: np.ndarray, template: np.ndarray, cache_results: bool = True):
        super().__init__(cache_results)
        
        # both inputs must share an OpenCV depth: 8-bit or 32-bit float
        if image.dtype == template.dtype and image.dtype in (np.uint8, np.float32):
            self.image = image
            self.template = template
        else:
            self.image = image.astype(np.float32)
            self.template = template.astype(np.float32)
        
        self.template_height, self.template_width = self.template.shape[:2]
        logger.debug(
            f"Template matcher ready: image {self.image.shape}, "
            f"template {self.template.shape}, dtype {self.image.dtype}"
        )
    
    def compute(self, x: int, y: int) -> float:
        patch = self.image[y:y + self.template_height, x:x + self.template_width]
        score = cv2.norm(patch, self.template, cv2.NORM_L2SQR)
        if score <= _MIN_MATCH_SCORE:
            return PERFECT_MATCH_FITNESS
        return 1.0 / float(score)
