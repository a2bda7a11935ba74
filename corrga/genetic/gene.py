"""
Gene representation for the correlation genetic algorithm.

A gene is a candidate template location: two unsigned 16-bit pixel coordinates
plus the fitness cached for that location. Genes are immutable values; the
genetic operators return new genes instead of modifying their inputs.
"""

from dataclasses import dataclass, replace, asdict
from typing import Any, Dict, Tuple

import numpy as np

from corrga.core.exceptions import ValidationError

# Coordinates are unsigned 16-bit values.
GENE_BITS = 16
GENE_MAX = (1 << GENE_BITS) - 1

# Fitness of any location where the template cannot be placed.
BAD_FITNESS = 0.0

AXIS_X = 0
AXIS_Y = 1


def _check_coordinate(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValidationError(f"Gene coordinate {name} must be an integer, got {type(value).__name__}")
    value = int(value)
    if not 0 <= value <= GENE_MAX:
        raise ValidationError(f"Gene coordinate {name} must be in [0, {GENE_MAX}], got {value}")
    return value


@dataclass(frozen=True)
class Gene:
    """A candidate location and its cached fitness."""
    
    x: int
    y: int
    fitness: float = BAD_FITNESS
    
    def __post_init__(self):
        object.__setattr__(self, "x", _check_coordinate("x", self.x))
        object.__setattr__(self, "y", _check_coordinate("y", self.y))
        object.__setattr__(self, "fitness", float(self.fitness))
    
    @classmethod
    def random(cls, width: int, height: int, rng: np.random.Generator) -> "Gene":
        """
        Sample a gene uniformly from [0, width) x [0, height).
        
        The fitness is left at BAD_FITNESS; the caller is expected to evaluate it.
        
        Args:
            width: Image width in pixels
            height: Image height in pixels
            rng: Random source
        
        Returns:
            Unevaluated gene
        """
        x = int(rng.integers(width))
        y = int(rng.integers(height))
        return cls(x, y)
    
    @property
    def location(self) -> Tuple[int, int]:
        return self.x, self.y
    
    def crossover(self, other: "Gene") -> "Gene":
        """Take x from this gene and y from the other. Fitness is reset."""
        return Gene(self.x, other.y)
    
    def flip_bit(self, axis: int, bit: int) -> "Gene":
        """
        Flip one bit of the x (axis 0) or y (axis 1) coordinate.
        
        Args:
            axis: AXIS_X or AXIS_Y
            bit: Bit index in [0, GENE_BITS)
        
        Returns:
            Mutated gene with fitness reset to BAD_FITNESS
        """
        if not 0 <= bit < GENE_BITS:
            raise ValidationError(f"Bit index must be in [0, {GENE_BITS}), got {bit}")
        mask = 1 << bit
        if axis == AXIS_X:
            return Gene(self.x ^ mask, self.y)
        if axis == AXIS_Y:
            return Gene(self.x, self.y ^ mask)
        raise ValidationError(f"Axis must be {AXIS_X} (x) or {AXIS_Y} (y), got {axis}")
    
    def with_fitness(self, fitness: float) -> "Gene":
        return replace(self, fitness=fitness)
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
    
    def __repr__(self) -> str:
        return f"Gene(x={self.x}, y={self.y}, fitness={self.fitness:.6g})"
