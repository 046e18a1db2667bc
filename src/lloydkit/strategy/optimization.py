"""
Optimization policies run by optimization-typed strategies.

An optimization couples a target (what to keep under a threshold) with an
applicability rule deciding in which iterations the pass may run.
"""

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING
from dataclasses import dataclass

from .types import ClusteringOptimizationType
from ..base.exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..iteration.history import IterationHistory


class OptimizationApplicability(ABC):
    """Decides whether an optimization pass may run in the current iteration."""

    @abstractmethod
    def is_applicable(self, history: 'IterationHistory') -> bool:
        pass


@dataclass(frozen=True)
class IterationCountMultipleOf(OptimizationApplicability):
    """Run every ``n`` iterations."""
    n: int

    def __post_init__(self):
        if self.n < 1:
            raise ConfigurationError(f"n must be positive, got {self.n}")

    def is_applicable(self, history: 'IterationHistory') -> bool:
        return history.iteration_count % self.n == 0


@dataclass(frozen=True)
class PointDistributionVariationRateLessThan(OptimizationApplicability):
    """Run once fewer than ``rate`` of the points moved in the latest iteration."""
    rate: float

    def __post_init__(self):
        if not 0.0 <= self.rate <= 1.0:
            raise ConfigurationError(f"rate must be in [0, 1], got {self.rate}")

    def is_applicable(self, history: 'IterationHistory') -> bool:
        info = history.most_recent_cluster_set_info
        if info is None:
            return False
        return info.point_location_change_rate < self.rate


@dataclass(frozen=True)
class ClusteringOptimization:
    """An optimization target with its threshold.

    Attributes:
        optimization_type: Quantity to keep under ``value``
        value: Threshold; clusters above it get split
        applicability: When the pass may run (None for every iteration)
    """
    optimization_type: ClusteringOptimizationType
    value: float
    applicability: Optional[OptimizationApplicability] = None

    def __post_init__(self):
        if not isinstance(self.optimization_type, ClusteringOptimizationType):
            raise ConfigurationError(f"Unknown optimization type: {self.optimization_type!r}")
        if self.value < 0:
            raise ConfigurationError(f"Optimization value must be non-negative, got {self.value}")

    def is_applicable_now(self, history: 'IterationHistory') -> bool:
        if self.applicability is None:
            return True
        return self.applicability.is_applicable(history)
