"""Clustering strategies and optimization policies."""

from .types import ClusteringStrategyType, ClusteringOptimizationType
from .optimization import (
    ClusteringOptimization,
    OptimizationApplicability,
    IterationCountMultipleOf,
    PointDistributionVariationRateLessThan
)
from .base import (
    ClusteringStrategy,
    FixedClusterCountStrategy,
    OptimizationStrategy,
    GenericStrategy
)

__all__ = [
    # Tags
    'ClusteringStrategyType',
    'ClusteringOptimizationType',

    # Optimization
    'ClusteringOptimization',
    'OptimizationApplicability',
    'IterationCountMultipleOf',
    'PointDistributionVariationRateLessThan',

    # Strategies
    'ClusteringStrategy',
    'FixedClusterCountStrategy',
    'OptimizationStrategy',
    'GenericStrategy'
]
