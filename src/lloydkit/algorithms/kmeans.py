"""
K-means clustering front end.

Classic k-means expressed as a fixed-cluster-count strategy run by the
iteration engine.
"""

from typing import Optional, Union
import torch
from torch import Tensor
import numpy as np

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.interfaces import DistanceFunction
from ..strategy.base import FixedClusterCountStrategy
from ..utils.convergence import (
    FixedIterationCountCondition, ConvergenceCondition, CombinedCondition
)
from ..utils.validation import validate_data


class KMeansClustering(BaseClusteringAlgorithm):
    """K-means clustering algorithm.

    Partitions data into K clusters, seeding with k-means++ and keeping the
    cluster count fixed: clusters that lose all their points are pruned and
    replaced by splitting the most spread-out ones.

    Parameters
    ----------
    n_clusters : int
        Number of clusters
    max_iter : int, default=100
        Maximum number of iterations
    tol : float or None, default=1e-4
        Stop early once fewer than this fraction of points change cluster.
        None disables the early stop.
    distance_function : DistanceFunction, optional
        Defaults to Euclidean distance
    allow_empty_clusters : bool, default=False
        Keep clusters that end up without points
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Random seed for reproducibility
    n_workers : int, optional
        Worker pool size

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Cluster centroids
    labels_ : Tensor of shape (n_samples,)
        Cluster assignments for training data
    inertia_ : float
        Sum of distances to the assigned cluster center
    n_iter_ : int
        Number of iterations run
    """

    def __init__(self,
                 n_clusters: int,
                 max_iter: int = 100,
                 tol: Optional[float] = 1e-4,
                 distance_function: Optional[DistanceFunction] = None,
                 allow_empty_clusters: bool = False,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 n_workers: Optional[int] = None):
        """Initialize K-means algorithm."""
        self.n_clusters = n_clusters
        self.max_iter = max_iter
        self.tol = tol

        if tol is None:
            condition = FixedIterationCountCondition(max_iter)
        else:
            condition = CombinedCondition([
                FixedIterationCountCondition(max_iter),
                ConvergenceCondition(tol)
            ], mode='any')

        strategy = FixedClusterCountStrategy.setup(
            n_clusters, distance_function,
            allow_empty_clusters=allow_empty_clusters
        ).end_when(condition)

        super().__init__(
            strategy,
            random_state=random_state,
            n_workers=n_workers,
            verbose=verbose
        )

    @classmethod
    def setup(cls, cluster_count: int, max_iteration_count: int,
              distance_function: Optional[DistanceFunction] = None,
              **kwargs) -> 'KMeansClustering':
        """Run exactly ``max_iteration_count`` iterations (no early stop)."""
        return cls(cluster_count, max_iter=max_iteration_count, tol=None,
                   distance_function=distance_function, **kwargs)

    def score(self, X: Union[Tensor, np.ndarray, list], y: Optional[Tensor] = None) -> float:
        """Opposite of the total distance of X to its nearest centers.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features)
            New data
        y : Ignored
            Not used

        Returns
        -------
        score : float
            Negative of sum of distances to the nearest centers
        """
        labels = self.predict(X)
        X = validate_data(X, dtype=self.cluster_set.centers.dtype)
        distances = self.cluster_set.distance_function.pairwise(X, self.cluster_set.centers)
        return -distances.gather(1, labels.unsqueeze(1)).sum().item()
