"""
K-means++ seeding.

Selects initial cluster centers among the input points so that centers
tend to be far apart, which improves convergence speed and quality.
"""

from typing import List, Optional, Sequence
from concurrent.futures import Executor
import torch

from ..base.interfaces import DistanceFunction
from ..base.data_structures import Point, ClusterSet
from ..utils.cluster_utils import compute_square_distances_from_nearest_cluster
from ..utils.validation import check_cluster_count, check_random_state


class KMeansPlusPlusSeeder:
    """K-means++ seeding over a working point set.

    Algorithm:
    1. Choose first center uniformly at random
    2. For each remaining center:
       - Compute squared distance from each remaining point to its
         nearest chosen center
       - Draw r uniformly in [0, max distance) and take the first
         remaining point whose distance is at least r
    3. Chosen points leave the pool, so centers are distinct input points

    If there are fewer points than requested clusters, seeding stops with
    one cluster per point.
    """

    def __init__(self, generator: Optional[torch.Generator] = None):
        """
        Args:
            generator: Source of randomness (None for a non-deterministic one)
        """
        self.generator = check_random_state(generator)

    def _uniform(self) -> float:
        return torch.rand(1, generator=self.generator, dtype=torch.float64).item()

    def seed(self, points: Sequence[Point], n_clusters: int,
             distance_function: DistanceFunction,
             executor: Optional[Executor] = None) -> ClusterSet:
        """Build the initial cluster set.

        Args:
            points: Working point set (not modified)
            n_clusters: Number of clusters wanted
            distance_function: Distance used by the cluster set
            executor: Worker pool for the distance computations

        Returns:
            ClusterSet with min(n_clusters, len(points)) empty clusters
        """
        check_cluster_count(n_clusters)
        if not points:
            raise ValueError("Cannot seed clusters from an empty point set")

        remaining: List[Point] = list(points)
        cluster_set = ClusterSet(distance_function)

        first_idx = int(torch.randint(len(remaining), (1,), generator=self.generator).item())
        cluster_set.add_new_cluster_with_center(remaining.pop(first_idx))

        dxs = torch.full((len(remaining),), torch.finfo(torch.float64).max, dtype=torch.float64)

        while cluster_set.cluster_count < n_clusters and remaining:
            dxs = compute_square_distances_from_nearest_cluster(
                cluster_set, remaining, dxs, executor)
            r = self._uniform() * dxs.max().item()

            # r < max always holds unless every distance is 0, then take the first point
            selected = int(torch.nonzero(dxs >= r)[0].item())
            cluster_set.add_new_cluster_with_center(remaining.pop(selected))
            dxs = torch.cat([dxs[:selected], dxs[selected + 1:]])

        return cluster_set

    def __repr__(self) -> str:
        return "KMeansPlusPlusSeeder()"
