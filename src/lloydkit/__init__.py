"""
lloydkit: strategy-driven k-means clustering.

The iteration engine runs the generalized Lloyd loop (classify points,
recompute centers) and lets a clustering strategy reshape the cluster set
between passes:
- Fixed cluster count (classic k-means with empty-cluster recovery)
- Optimization (split clusters that exceed a distance or size threshold)
- Generic (prune empty clusters only)

Example usage:
    >>> import torch
    >>> from lloydkit import FixedClusterCountStrategy, BaseClusteringAlgorithm, Point
    >>>
    >>> points = Point.to_points(torch.randn(1000, 2))
    >>> strategy = (FixedClusterCountStrategy.setup(5)
    ...     .end_when_distribution_variation_rate_less_than(0.01))
    >>>
    >>> with BaseClusteringAlgorithm(strategy, random_state=0) as engine:
    ...     cluster_set = engine.apply_to(points)
    >>>
    >>> # Or the sklearn-style front end
    >>> from lloydkit import KMeansClustering
    >>> labels = KMeansClustering(n_clusters=5, random_state=0).fit_predict(torch.randn(1000, 2))
"""

__version__ = '0.1.0'

# Core engine and data structures
from .base import (
    ClusteringError,
    InvalidInputError,
    ConfigurationError,
    NumericInstabilityWarning,
    DistanceFunction,
    TerminationCondition,
    Point,
    Cluster,
    ClusterSet,
    ClusterInfo,
    ClusterSetInfo,
    BaseClusteringAlgorithm
)

from .iteration import IterationInfo, IterationHistory

from .strategy import (
    ClusteringStrategyType,
    ClusteringOptimizationType,
    ClusteringOptimization,
    IterationCountMultipleOf,
    PointDistributionVariationRateLessThan,
    ClusteringStrategy,
    FixedClusterCountStrategy,
    OptimizationStrategy,
    GenericStrategy
)

from .distances import (
    EuclideanDistance,
    WeightedEuclideanDistance,
    ManhattanDistance,
    CosineDistance
)

from .initialization import KMeansPlusPlusSeeder

from .utils.convergence import (
    FixedIterationCountCondition,
    ConvergenceCondition,
    NoImprovementCondition,
    VarianceVariationCondition,
    DeadlineCondition,
    CombinedCondition,
    NeverCondition
)

# Front ends
from .algorithms.kmeans import KMeansClustering
from .algorithms.builder import ClusteringBuilder, create_kmeans

# Import visualization
from .visualization import (
    plot_cluster_set,
    plot_iteration_history
)

__all__ = [
    # Errors
    'ClusteringError',
    'InvalidInputError',
    'ConfigurationError',
    'NumericInstabilityWarning',

    # Interfaces
    'DistanceFunction',
    'TerminationCondition',

    # Core data structures
    'Point',
    'Cluster',
    'ClusterSet',
    'ClusterInfo',
    'ClusterSetInfo',
    'IterationInfo',
    'IterationHistory',

    # Engine
    'BaseClusteringAlgorithm',
    'KMeansPlusPlusSeeder',

    # Strategies
    'ClusteringStrategyType',
    'ClusteringOptimizationType',
    'ClusteringOptimization',
    'IterationCountMultipleOf',
    'PointDistributionVariationRateLessThan',
    'ClusteringStrategy',
    'FixedClusterCountStrategy',
    'OptimizationStrategy',
    'GenericStrategy',

    # Distances
    'EuclideanDistance',
    'WeightedEuclideanDistance',
    'ManhattanDistance',
    'CosineDistance',

    # Termination conditions
    'FixedIterationCountCondition',
    'ConvergenceCondition',
    'NoImprovementCondition',
    'VarianceVariationCondition',
    'DeadlineCondition',
    'CombinedCondition',
    'NeverCondition',

    # Front ends
    'KMeansClustering',
    'ClusteringBuilder',
    'create_kmeans',

    # Visualization
    'plot_cluster_set',
    'plot_iteration_history',

    # Version
    '__version__'
]
