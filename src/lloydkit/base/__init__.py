"""Base classes, data structures and interfaces for the clustering engine."""

from .exceptions import (
    ClusteringError,
    InvalidInputError,
    ConfigurationError,
    NumericInstabilityWarning
)

from .interfaces import (
    DistanceFunction,
    TerminationCondition
)

from .data_structures import (
    Point,
    PointClassification,
    Cluster,
    ClusterSet
)

from .cluster_info import (
    ClusterInfo,
    ClusterSetInfo
)

from .clustering_base import BaseClusteringAlgorithm

__all__ = [
    # Errors
    'ClusteringError',
    'InvalidInputError',
    'ConfigurationError',
    'NumericInstabilityWarning',

    # Interfaces
    'DistanceFunction',
    'TerminationCondition',

    # Data structures
    'Point',
    'PointClassification',
    'Cluster',
    'ClusterSet',
    'ClusterInfo',
    'ClusterSetInfo',

    # Base algorithm
    'BaseClusteringAlgorithm'
]
