"""
Euclidean distance functions.

The most common distance for k-means; the squared variant is what the
classic k-means objective sums up.
"""

import torch
from torch import Tensor

from ..base.interfaces import DistanceFunction


class EuclideanDistance(DistanceFunction):
    """Euclidean distance ||x - μ|| between points and centers."""

    def __init__(self, squared: bool = False):
        """
        Args:
            squared: If True, return squared distances.
                    If False (default), return actual Euclidean distances.
        """
        self.squared = squared

    def pairwise(self, points: Tensor, centers: Tensor) -> Tensor:
        """Compute Euclidean distances from every point to every center.

        Args:
            points: (n, d) tensor of points
            centers: (k, d) tensor of centers

        Returns:
            (n, k) tensor of distances
        """
        diff = points.unsqueeze(1) - centers.unsqueeze(0)
        squared_distances = torch.sum(diff * diff, dim=2)

        if self.squared:
            return squared_distances
        else:
            return torch.sqrt(squared_distances)

    def __repr__(self) -> str:
        return f"EuclideanDistance(squared={self.squared})"


class WeightedEuclideanDistance(DistanceFunction):
    """Weighted Euclidean distance with feature weights.

    Computes sqrt(sum_i w_i * (x_i - μ_i)²) where w_i are feature weights.
    """

    def __init__(self, weights: Tensor, squared: bool = False):
        """
        Args:
            weights: (d,) tensor of non-negative feature weights
            squared: Whether to return squared distances
        """
        if (weights < 0).any():
            raise ValueError("Feature weights must be non-negative")
        self.weights = weights
        self.squared = squared

    def pairwise(self, points: Tensor, centers: Tensor) -> Tensor:
        weights = self.weights.to(device=points.device, dtype=points.dtype)

        diff = points.unsqueeze(1) - centers.unsqueeze(0)
        squared_distances = torch.sum(weights * diff * diff, dim=2)

        if self.squared:
            return squared_distances
        else:
            return torch.sqrt(squared_distances)
