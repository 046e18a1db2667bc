"""Utility functions for the lloydkit engine."""

from .concurrency import (
    default_worker_count,
    new_executor,
    map_chunks,
    map_items
)

from .validation import (
    validate_data,
    validate_points,
    check_cluster_count,
    check_random_state
)

from .cluster_utils import (
    classify_points,
    refresh_cluster_centers,
    compute_cluster_set_info,
    compute_square_distances_from_nearest_cluster,
    split_clusters,
    split_most_spread_out_clusters,
    split_clusters_where_average_distance_from_center_greater_than,
    split_clusters_where_maximum_distance_from_center_greater_than,
    split_clusters_where_point_count_greater_than,
    apply_optimization
)

from .convergence import (
    FixedIterationCountCondition,
    ConvergenceCondition,
    NoImprovementCondition,
    VarianceVariationCondition,
    DeadlineCondition,
    CombinedCondition,
    NeverCondition
)

__all__ = [
    # Concurrency
    'default_worker_count',
    'new_executor',
    'map_chunks',
    'map_items',

    # Validation
    'validate_data',
    'validate_points',
    'check_cluster_count',
    'check_random_state',

    # Bulk cluster operations
    'classify_points',
    'refresh_cluster_centers',
    'compute_cluster_set_info',
    'compute_square_distances_from_nearest_cluster',
    'split_clusters',
    'split_most_spread_out_clusters',
    'split_clusters_where_average_distance_from_center_greater_than',
    'split_clusters_where_maximum_distance_from_center_greater_than',
    'split_clusters_where_point_count_greater_than',
    'apply_optimization',

    # Termination conditions
    'FixedIterationCountCondition',
    'ConvergenceCondition',
    'NoImprovementCondition',
    'VarianceVariationCondition',
    'DeadlineCondition',
    'CombinedCondition',
    'NeverCondition'
]
