"""
Clustering strategies: the immutable configuration of a run.

A strategy is one of a closed set of variants:

- FixedClusterCountStrategy: keep the cluster count at its initial value,
  splitting spread-out clusters whenever empty ones get pruned
- OptimizationStrategy: let an optimization pass split clusters that
  exceed a threshold
- GenericStrategy: only prune empty clusters

All variants are frozen; the fluent ``end_when_*`` / ``with_*`` helpers
return modified copies.

Example:
    >>> strategy = (FixedClusterCountStrategy.setup(3, EuclideanDistance())
    ...     .end_when_iteration_count_equals(50))
"""

from typing import Optional, ClassVar, TYPE_CHECKING
from dataclasses import dataclass, field, replace

from .types import ClusteringStrategyType, ClusteringOptimizationType
from .optimization import (
    ClusteringOptimization, OptimizationApplicability,
    IterationCountMultipleOf, PointDistributionVariationRateLessThan
)
from ..base.interfaces import DistanceFunction, TerminationCondition
from ..base.exceptions import ConfigurationError, InvalidInputError
from ..distances import EuclideanDistance
from ..utils.convergence import (
    FixedIterationCountCondition, ConvergenceCondition, NoImprovementCondition,
    VarianceVariationCondition, DeadlineCondition
)

if TYPE_CHECKING:
    from ..iteration.history import IterationHistory


@dataclass(frozen=True)
class ClusteringStrategy:
    """Settings shared by every strategy variant.

    Attributes:
        initial_cluster_count: Number of clusters seeding aims for
        distance_function: Distance between points and centers
        termination_condition: When the refine loop may stop
        allow_empty_clusters: Keep clusters that lost all their points
        min_cluster_count: Floor that pruning never goes below
    """

    strategy_type: ClassVar[ClusteringStrategyType] = ClusteringStrategyType.OTHER

    initial_cluster_count: int
    distance_function: DistanceFunction = field(default_factory=EuclideanDistance)
    termination_condition: Optional[TerminationCondition] = None
    allow_empty_clusters: bool = False
    min_cluster_count: int = 1

    def __post_init__(self):
        if isinstance(self.initial_cluster_count, bool) or not isinstance(self.initial_cluster_count, int):
            raise TypeError(f"initial_cluster_count must be int, got {type(self.initial_cluster_count)}")
        if self.initial_cluster_count <= 0:
            raise InvalidInputError(
                f"initial_cluster_count must be positive, got {self.initial_cluster_count}")
        if self.min_cluster_count < 1 or self.min_cluster_count > self.initial_cluster_count:
            raise ConfigurationError(
                f"min_cluster_count must be in [1, {self.initial_cluster_count}], "
                f"got {self.min_cluster_count}")

    @classmethod
    def setup(cls, cluster_count: int,
              distance_function: Optional[DistanceFunction] = None,
              **kwargs) -> 'ClusteringStrategy':
        """Create a strategy without a termination condition yet."""
        if distance_function is None:
            distance_function = EuclideanDistance()
        return cls(initial_cluster_count=cluster_count,
                   distance_function=distance_function, **kwargs)

    def validate(self) -> None:
        """Check the strategy is complete enough to run.

        Raises:
            ConfigurationError: If no termination condition was set
        """
        if self.termination_condition is None:
            raise ConfigurationError(f"{type(self).__name__} has no termination condition")

    def is_strategy_of_type(self, strategy_type: ClusteringStrategyType) -> bool:
        return self.strategy_type is strategy_type

    def is_optimization_defined(self) -> bool:
        return False

    def is_optimization_applicable_now(self, history: 'IterationHistory') -> bool:
        return False

    # Fluent configuration

    def end_when(self, condition: TerminationCondition) -> 'ClusteringStrategy':
        return replace(self, termination_condition=condition)

    def end_when_iteration_count_equals(self, max_iteration_count: int) -> 'ClusteringStrategy':
        return self.end_when(FixedIterationCountCondition(max_iteration_count))

    def end_when_distribution_variation_rate_less_than(self, rate: float) -> 'ClusteringStrategy':
        return self.end_when(ConvergenceCondition(rate))

    def end_when_no_improvement(self, patience: int = 1,
                                rel_tol: float = 0.0) -> 'ClusteringStrategy':
        return self.end_when(NoImprovementCondition(patience=patience, rel_tol=rel_tol))

    def end_when_variance_variation_less_than(self, variation: float,
                                              period: int = 1) -> 'ClusteringStrategy':
        return self.end_when(VarianceVariationCondition(variation, period))

    def end_when_deadline_reached(self, seconds: float) -> 'ClusteringStrategy':
        return self.end_when(DeadlineCondition(seconds))

    def with_empty_clusters_allowed(self, allow: bool = True) -> 'ClusteringStrategy':
        return replace(self, allow_empty_clusters=allow)

    def with_min_cluster_count(self, min_cluster_count: int) -> 'ClusteringStrategy':
        return replace(self, min_cluster_count=min_cluster_count)


@dataclass(frozen=True)
class FixedClusterCountStrategy(ClusteringStrategy):
    """Keep ``initial_cluster_count`` clusters by splitting after pruning."""

    strategy_type: ClassVar[ClusteringStrategyType] = ClusteringStrategyType.FIXED_CLUSTER_COUNT


@dataclass(frozen=True)
class GenericStrategy(ClusteringStrategy):
    """Prune empty clusters (unless allowed) and nothing else."""

    strategy_type: ClassVar[ClusteringStrategyType] = ClusteringStrategyType.OTHER


@dataclass(frozen=True)
class OptimizationStrategy(ClusteringStrategy):
    """Split clusters that exceed an optimization threshold."""

    strategy_type: ClassVar[ClusteringStrategyType] = ClusteringStrategyType.OPTIMIZATION

    optimization: Optional[ClusteringOptimization] = None

    def __post_init__(self):
        super().__post_init__()
        if self.optimization is None:
            raise ConfigurationError("OptimizationStrategy requires an optimization")

    @classmethod
    def setup(cls, cluster_count: int,
              distance_function: Optional[DistanceFunction] = None,
              optimization_type: Optional[ClusteringOptimizationType] = None,
              value: float = 0.0,
              **kwargs) -> 'OptimizationStrategy':
        """Create a strategy optimizing ``optimization_type`` down to ``value``."""
        if 'optimization' not in kwargs:
            if optimization_type is None:
                raise ConfigurationError("OptimizationStrategy requires an optimization type")
            kwargs['optimization'] = ClusteringOptimization(optimization_type, value)
        return super().setup(cluster_count, distance_function, **kwargs)

    def is_optimization_defined(self) -> bool:
        return True

    def is_optimization_applicable_now(self, history: 'IterationHistory') -> bool:
        return self.optimization.is_applicable_now(history)

    def optimize_when(self, applicability: OptimizationApplicability) -> 'OptimizationStrategy':
        return replace(self, optimization=replace(self.optimization, applicability=applicability))

    def optimize_when_iteration_count_multiple_of(self, n: int) -> 'OptimizationStrategy':
        return self.optimize_when(IterationCountMultipleOf(n))

    def optimize_when_point_distribution_variation_rate_less_than(self, rate: float) -> 'OptimizationStrategy':
        return self.optimize_when(PointDistributionVariationRateLessThan(rate))
