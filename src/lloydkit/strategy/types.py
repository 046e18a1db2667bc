"""Enumerations tagging strategy and optimization variants."""

from enum import Enum


class ClusteringStrategyType(Enum):
    """How the strategy layer treats the cluster count."""
    FIXED_CLUSTER_COUNT = 'fixed_cluster_count'
    OPTIMIZATION = 'optimization'
    OTHER = 'other'


class ClusteringOptimizationType(Enum):
    """What an optimization pass tries to bring under its threshold."""
    MINIMIZE_AVERAGE_POINT_TO_CENTER_DISTANCE = 'minimize_average_point_to_center_distance'
    MINIMIZE_MAXIMUM_POINT_TO_CENTER_DISTANCE = 'minimize_maximum_point_to_center_distance'
    MINIMIZE_PER_CLUSTER_POINT_COUNT = 'minimize_per_cluster_point_count'
