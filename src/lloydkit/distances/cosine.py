"""
Cosine distance for direction-only clustering.
"""

import torch
from torch import Tensor

from ..base.interfaces import DistanceFunction


class CosineDistance(DistanceFunction):
    """1 - cos(x, μ), in [0, 2].

    Zero vectors are treated as orthogonal to everything.
    """

    def __init__(self, eps: float = 1e-8):
        self.eps = eps

    def pairwise(self, points: Tensor, centers: Tensor) -> Tensor:
        points_unit = points / torch.norm(points, dim=1, keepdim=True).clamp(min=self.eps)
        centers_unit = centers / torch.norm(centers, dim=1, keepdim=True).clamp(min=self.eps)
        similarities = torch.matmul(points_unit, centers_unit.t())
        # Rounding can push |cos| slightly above 1
        return torch.clamp(1 - similarities, min=0.0, max=2.0)
