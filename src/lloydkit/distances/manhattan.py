"""
Manhattan (L1) distance.
"""

import torch
from torch import Tensor

from ..base.interfaces import DistanceFunction


class ManhattanDistance(DistanceFunction):
    """Sum of absolute coordinate differences."""

    def pairwise(self, points: Tensor, centers: Tensor) -> Tensor:
        diff = points.unsqueeze(1) - centers.unsqueeze(0)
        return torch.sum(torch.abs(diff), dim=2)
