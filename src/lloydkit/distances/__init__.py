"""Distance functions for clustering."""

from .euclidean import EuclideanDistance, WeightedEuclideanDistance
from .manhattan import ManhattanDistance
from .cosine import CosineDistance

__all__ = [
    'EuclideanDistance',
    'WeightedEuclideanDistance',
    'ManhattanDistance',
    'CosineDistance'
]
