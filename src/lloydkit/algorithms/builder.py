"""
Builder pattern for configuring clustering runs.

Provides a fluent interface for assembling a clustering strategy and the
engine that runs it.
"""

from typing import Optional, Union, List
import torch

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.interfaces import DistanceFunction, TerminationCondition
from ..base.exceptions import ConfigurationError
from ..strategy.base import (
    ClusteringStrategy, FixedClusterCountStrategy, OptimizationStrategy, GenericStrategy
)
from ..strategy.optimization import (
    ClusteringOptimization, OptimizationApplicability,
    IterationCountMultipleOf, PointDistributionVariationRateLessThan
)
from ..strategy.types import ClusteringOptimizationType
from ..distances import EuclideanDistance, CosineDistance, ManhattanDistance
from ..utils.convergence import (
    FixedIterationCountCondition, ConvergenceCondition, NoImprovementCondition,
    VarianceVariationCondition, DeadlineCondition, CombinedCondition
)


class ClusteringBuilder:
    """Fluent builder for clustering engines.

    Several termination conditions may be added; the run stops as soon as
    any of them holds.

    Examples
    --------
    >>> # Classic k-means with a safety cap
    >>> engine = (ClusteringBuilder()
    ...     .with_fixed_cluster_count()
    ...     .with_no_improvement(patience=2)
    ...     .with_iteration_limit(200)
    ...     .with_random_state(0)
    ...     .build(n_clusters=5))

    >>> # Grow clusters until none is wider than 1.5 on average
    >>> engine = (ClusteringBuilder()
    ...     .with_optimization(ClusteringOptimizationType.MINIMIZE_AVERAGE_POINT_TO_CENTER_DISTANCE, 1.5)
    ...     .optimize_every(5)
    ...     .with_iteration_limit(100)
    ...     .build(n_clusters=2))
    """

    def __init__(self):
        """Initialize builder with defaults."""
        self._strategy_class = FixedClusterCountStrategy
        self._optimization_type: Optional[ClusteringOptimizationType] = None
        self._optimization_value = 0.0
        self._applicability: Optional[OptimizationApplicability] = None
        self._distance_function: DistanceFunction = EuclideanDistance()
        self._conditions: List[TerminationCondition] = []
        self._allow_empty_clusters = False
        self._min_cluster_count = 1

        # Engine parameters
        self._verbose = 0
        self._random_state = None
        self._n_workers = None

    def with_fixed_cluster_count(self) -> 'ClusteringBuilder':
        """Keep the cluster count constant (k-means style)."""
        self._strategy_class = FixedClusterCountStrategy
        return self

    def with_generic_strategy(self) -> 'ClusteringBuilder':
        """Only prune empty clusters."""
        self._strategy_class = GenericStrategy
        return self

    def with_optimization(self, optimization_type: ClusteringOptimizationType,
                          value: float) -> 'ClusteringBuilder':
        """Split clusters whose ``optimization_type`` measure exceeds ``value``."""
        self._strategy_class = OptimizationStrategy
        self._optimization_type = optimization_type
        self._optimization_value = value
        return self

    def optimize_every(self, n: int) -> 'ClusteringBuilder':
        self._applicability = IterationCountMultipleOf(n)
        return self

    def optimize_when_distribution_variation_rate_less_than(self, rate: float) -> 'ClusteringBuilder':
        self._applicability = PointDistributionVariationRateLessThan(rate)
        return self

    def with_distance(self, distance_function: DistanceFunction) -> 'ClusteringBuilder':
        self._distance_function = distance_function
        return self

    def with_euclidean_distance(self, squared: bool = False) -> 'ClusteringBuilder':
        return self.with_distance(EuclideanDistance(squared=squared))

    def with_cosine_distance(self) -> 'ClusteringBuilder':
        return self.with_distance(CosineDistance())

    def with_manhattan_distance(self) -> 'ClusteringBuilder':
        return self.with_distance(ManhattanDistance())

    def with_termination(self, condition: TerminationCondition) -> 'ClusteringBuilder':
        """Add a termination condition."""
        self._conditions.append(condition)
        return self

    def with_iteration_limit(self, max_iter: int) -> 'ClusteringBuilder':
        return self.with_termination(FixedIterationCountCondition(max_iter))

    def with_convergence(self, rate: float = 1e-4) -> 'ClusteringBuilder':
        """Stop once fewer than ``rate`` of the points change cluster."""
        return self.with_termination(ConvergenceCondition(rate))

    def with_no_improvement(self, patience: int = 1, rel_tol: float = 0.0,
                            abs_tol: float = 0.0) -> 'ClusteringBuilder':
        return self.with_termination(
            NoImprovementCondition(patience=patience, rel_tol=rel_tol, abs_tol=abs_tol))

    def with_variance_variation(self, variation: float, period: int = 1) -> 'ClusteringBuilder':
        return self.with_termination(VarianceVariationCondition(variation, period))

    def with_deadline(self, seconds: float) -> 'ClusteringBuilder':
        return self.with_termination(DeadlineCondition(seconds))

    def with_empty_clusters_allowed(self, allow: bool = True) -> 'ClusteringBuilder':
        self._allow_empty_clusters = allow
        return self

    def with_min_cluster_count(self, min_cluster_count: int) -> 'ClusteringBuilder':
        self._min_cluster_count = min_cluster_count
        return self

    def with_verbose(self, verbose: int) -> 'ClusteringBuilder':
        """Set verbosity level."""
        self._verbose = verbose
        return self

    def with_random_state(self, random_state: Union[int, torch.Generator]) -> 'ClusteringBuilder':
        """Set random seed or generator."""
        self._random_state = random_state
        return self

    def with_workers(self, n_workers: int) -> 'ClusteringBuilder':
        """Set worker pool size."""
        self._n_workers = n_workers
        return self

    def _termination_condition(self) -> TerminationCondition:
        if not self._conditions:
            raise ConfigurationError("No termination condition configured")
        if len(self._conditions) == 1:
            return self._conditions[0]
        return CombinedCondition(self._conditions, mode='any')

    def build_strategy(self, n_clusters: int) -> ClusteringStrategy:
        """Build only the strategy.

        Parameters
        ----------
        n_clusters : int
            Initial number of clusters

        Returns
        -------
        strategy : ClusteringStrategy
            The frozen strategy
        """
        kwargs = dict(
            initial_cluster_count=n_clusters,
            distance_function=self._distance_function,
            termination_condition=self._termination_condition(),
            allow_empty_clusters=self._allow_empty_clusters,
            min_cluster_count=self._min_cluster_count
        )
        if self._strategy_class is OptimizationStrategy:
            kwargs['optimization'] = ClusteringOptimization(
                self._optimization_type, self._optimization_value, self._applicability)
        elif self._applicability is not None:
            raise ConfigurationError("Optimization applicability set without an optimization")
        return self._strategy_class(**kwargs)

    def build(self, n_clusters: int) -> BaseClusteringAlgorithm:
        """Build the clustering engine.

        Parameters
        ----------
        n_clusters : int
            Initial number of clusters

        Returns
        -------
        algorithm : BaseClusteringAlgorithm
            Engine owning its worker pool; close it when done
        """
        return BaseClusteringAlgorithm(
            self.build_strategy(n_clusters),
            random_state=self._random_state,
            n_workers=self._n_workers,
            verbose=self._verbose
        )


def create_kmeans(n_clusters: int, **kwargs) -> BaseClusteringAlgorithm:
    """Create a k-means engine using the builder.

    Parameters
    ----------
    n_clusters : int
        Number of clusters
    **kwargs : dict
        Additional parameters passed to matching ``with_*`` builder methods

    Returns
    -------
    algorithm : BaseClusteringAlgorithm
        K-means engine
    """
    builder = ClusteringBuilder()
    builder.with_fixed_cluster_count()
    builder.with_euclidean_distance()
    builder.with_convergence()
    builder.with_iteration_limit(kwargs.pop('max_iter', 100))

    for key, value in kwargs.items():
        method = getattr(builder, f'with_{key}', None)
        if method is None:
            raise TypeError(f"Unknown option: {key}")
        method(value)

    return builder.build(n_clusters)
