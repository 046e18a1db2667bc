"""
Base class for strategy-driven clustering.

Provides the generalized Lloyd iteration: seed, then repeatedly classify
points, recompute centers and let the clustering strategy prune, split or
optimize the cluster set until the termination condition holds.
"""

from typing import Optional, Dict, Any, List, Sequence, Tuple, Union
import torch
from torch import Tensor
import numpy as np
import time
import warnings

from .data_structures import Point, ClusterSet
from .cluster_info import ClusterSetInfo
from .exceptions import NumericInstabilityWarning
from ..iteration.history import IterationInfo, IterationHistory
from ..strategy.base import (
    ClusteringStrategy, FixedClusterCountStrategy, OptimizationStrategy
)
from ..initialization.kmeans_plusplus import KMeansPlusPlusSeeder
from ..utils.cluster_utils import (
    classify_points, refresh_cluster_centers, compute_cluster_set_info,
    split_most_spread_out_clusters, apply_optimization
)
from ..utils.concurrency import new_executor
from ..utils.validation import validate_data, validate_points, check_random_state


class BaseClusteringAlgorithm:
    """Iteration engine driving a clustering strategy.

    The engine owns a worker pool for its whole lifetime. Release it with
    ``close()`` or by using the engine as a context manager:

    >>> strategy = (FixedClusterCountStrategy.setup(2)
    ...     .end_when_no_improvement())
    >>> with BaseClusteringAlgorithm(strategy, random_state=0) as engine:
    ...     cluster_set = engine.apply_to(points)

    An instance must not run ``apply_to`` from several threads at once.
    """

    def __init__(self,
                 clustering_strategy: ClusteringStrategy,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 n_workers: Optional[int] = None,
                 verbose: int = 0,
                 seeder: Optional[KMeansPlusPlusSeeder] = None):
        """
        Args:
            clustering_strategy: Immutable run configuration
            random_state: Seed or generator for seeding (None for random)
            n_workers: Size of the worker pool (None for one per CPU)
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            seeder: Custom seeder (defaults to k-means++ on ``random_state``)
        """
        clustering_strategy.validate()
        self.clustering_strategy = clustering_strategy
        self.random_state = random_state
        self.n_workers = n_workers
        self.verbose = verbose

        self.seeder = seeder if seeder is not None else KMeansPlusPlusSeeder(
            check_random_state(random_state))

        self._executor = new_executor(n_workers)
        self._closed = False

        # Run state, reset by every apply_to
        self.iteration_history = IterationHistory()
        self.current_iteration = 0
        self.cluster_set: Optional[ClusterSet] = None
        self.points: List[Point] = []

        self.fitted_ = False

    @classmethod
    def setup(cls, clustering_strategy: ClusteringStrategy, **kwargs) -> 'BaseClusteringAlgorithm':
        return cls(clustering_strategy, **kwargs)

    # Resource lifecycle

    def close(self) -> None:
        """Shut the worker pool down. The engine cannot run afterwards."""
        if not self._closed:
            self._executor.shutdown(wait=True)
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> 'BaseClusteringAlgorithm':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # Main entry point

    def apply_to(self, points: Union[Sequence[Point], Tensor, np.ndarray]) -> ClusterSet:
        """Cluster a point set.

        Args:
            points: Points to cluster (or an (n, d) matrix of coordinates)

        Returns:
            The final cluster set, with every point assigned

        Raises:
            InvalidInputError: If the point set is empty or inconsistent
            RuntimeError: If the engine was closed
        """
        if self._closed:
            raise RuntimeError("Engine has been closed")

        points = validate_points(points)
        self._reset_state(points)

        start_time = time.time()
        self._init_clusters()
        self._iterations()

        if self.verbose:
            print(f"Stopped after {self.current_iteration} iterations with "
                  f"{self.cluster_set.cluster_count} clusters")
            print(f"Total clustering time: {time.time() - start_time:.3f}s")

        self.fitted_ = True
        return self.cluster_set

    def _reset_state(self, points: List[Point]) -> None:
        self.iteration_history = IterationHistory()
        self.current_iteration = 0
        self.cluster_set = None
        self.points = points
        self.fitted_ = False

    def _init_clusters(self) -> None:
        strategy = self.clustering_strategy
        if self.verbose:
            print(f"Seeding {min(strategy.initial_cluster_count, len(self.points))} clusters...")

        self.cluster_set = self.seeder.seed(
            self.points, strategy.initial_cluster_count,
            strategy.distance_function, self._executor)

        initial_info = compute_cluster_set_info(self.cluster_set)
        self.iteration_history.record(IterationInfo(self.current_iteration, initial_info))

    def _should_continue(self) -> bool:
        # Stop only when the condition holds AND the last pass left the structure alone
        history = self.iteration_history
        # Seeding assigns no points, so at least one classify pass always runs
        if history.iteration_count == 0:
            return True
        return (not self.clustering_strategy.termination_condition.is_satisfied(history)
                or history.most_recent_iteration_info.strategy_applied)

    def _iterations(self) -> None:
        while self._should_continue():
            iter_start_time = time.time()
            self.current_iteration += 1

            self._remove_points()
            cluster_set_info = self._classify_points()
            cluster_set_info, applied = self._apply_clustering_strategy(cluster_set_info)

            self.iteration_history.record(
                IterationInfo(self.current_iteration, cluster_set_info, applied))

            iter_time = time.time() - iter_start_time
            if self.verbose >= 2 or (self.verbose >= 1 and self.current_iteration % 10 == 0):
                marker = " [strategy applied]" if applied else ""
                print(f"Iteration {self.current_iteration:3d}: "
                      f"clusters = {self.cluster_set.cluster_count}, "
                      f"total distance = {cluster_set_info.total_point_distance_from_center:.6f}, "
                      f"moved = {cluster_set_info.point_location_change}{marker} "
                      f"({iter_time:.3f}s)")

    def _remove_points(self) -> None:
        self.cluster_set = self.cluster_set.without_points()

    def _classify_points(self) -> ClusterSetInfo:
        cluster_set_info = classify_points(self.cluster_set, self.points, self._executor)
        refresh_cluster_centers(self.cluster_set, cluster_set_info, self._executor)
        return cluster_set_info

    # Strategy application

    def _apply_clustering_strategy(self, cluster_set_info: ClusterSetInfo) -> Tuple[ClusterSetInfo, bool]:
        """Prune, split and optimize the current cluster set.

        Returns:
            The (possibly pruned) stats and whether the structure changed
        """
        strategy = self.clustering_strategy
        applied = False

        if not strategy.allow_empty_clusters:
            removed_count, cluster_set_info = self._remove_empty_clusters(cluster_set_info)
            if removed_count > 0:
                applied = True

                if (isinstance(strategy, FixedClusterCountStrategy)
                        and self.cluster_set.cluster_count < strategy.initial_cluster_count):
                    split_count = split_most_spread_out_clusters(
                        self.cluster_set, cluster_set_info,
                        strategy.initial_cluster_count - self.cluster_set.cluster_count,
                        self._executor)
                    applied = applied or split_count > 0

        if isinstance(strategy, OptimizationStrategy) and self._is_optimization_applicable_now(cluster_set_info):
            applied = self._optimize(strategy, cluster_set_info) or applied

        return cluster_set_info, applied

    def _is_optimization_applicable_now(self, cluster_set_info: ClusterSetInfo) -> bool:
        strategy = self.clustering_strategy
        # No optimization on the first refine pass: stats still describe the seeds
        if not strategy.is_optimization_defined() or self.iteration_history.iteration_count == 0:
            return False
        pending = self.iteration_history.extended(
            IterationInfo(self.current_iteration, cluster_set_info))
        return strategy.is_optimization_applicable_now(pending)

    def _optimize(self, strategy: OptimizationStrategy, cluster_set_info: ClusterSetInfo) -> bool:
        return apply_optimization(strategy.optimization, self.cluster_set,
                                  cluster_set_info, self._executor)

    def _remove_empty_clusters(self, cluster_set_info: ClusterSetInfo) -> Tuple[int, ClusterSetInfo]:
        empty_count = sum(1 for cluster in self.cluster_set if cluster.is_empty())
        removed = self.cluster_set.remove_empty_clusters(
            keep=self.clustering_strategy.min_cluster_count)

        if len(removed) < empty_count:
            warnings.warn(
                f"Iteration {self.current_iteration}: kept {empty_count - len(removed)} empty "
                f"cluster(s) to stay at min_cluster_count="
                f"{self.clustering_strategy.min_cluster_count}",
                NumericInstabilityWarning)

        if not removed:
            return 0, cluster_set_info
        return len(removed), cluster_set_info.remove_cluster_infos(removed)

    # Tensor conveniences

    def fit(self, X: Union[Tensor, np.ndarray, list], y: Optional[Tensor] = None) -> 'BaseClusteringAlgorithm':
        """Cluster the rows of X.

        Args:
            X: (n, d) data
            y: Ignored (for sklearn compatibility)

        Returns:
            Self
        """
        self.apply_to(Point.to_points(validate_data(X)))
        return self

    def fit_predict(self, X: Union[Tensor, np.ndarray, list], y: Optional[Tensor] = None) -> Tensor:
        """Fit and return cluster indices of the rows of X."""
        self.fit(X)
        return self.labels_

    def predict(self, X: Union[Tensor, np.ndarray, list]) -> Tensor:
        """Index of the nearest final cluster for each row of X.

        Args:
            X: (n, d) data

        Returns:
            (n,) tensor of cluster indices (in cluster set order)
        """
        if not self.fitted_:
            raise RuntimeError("Model must be fitted before calling predict")

        X = validate_data(X, dtype=self.cluster_set.centers.dtype)
        distances = self.cluster_set.distance_function.pairwise(X, self.cluster_set.centers)
        return torch.argmin(distances, dim=1)

    @property
    def labels_(self) -> Tensor:
        """Cluster index of every working point after the last run."""
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")
        return self.cluster_set.labels_for(self.points)

    @property
    def cluster_centers_(self) -> Tensor:
        """Get cluster centers."""
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")
        return self.cluster_set.centers

    @property
    def n_iter_(self) -> int:
        return self.current_iteration

    @property
    def inertia_(self) -> float:
        """Total point-to-center distance of the last iteration."""
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")
        return self.iteration_history.most_recent_cluster_set_info.total_point_distance_from_center

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'clustering_strategy': self.clustering_strategy,
            'random_state': self.random_state,
            'n_workers': self.n_workers,
            'verbose': self.verbose
        }
