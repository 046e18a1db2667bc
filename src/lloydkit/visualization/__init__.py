"""Visualization utilities for clustering results."""

from .plot_clusters import (
    plot_cluster_set,
    plot_iteration_history
)

__all__ = [
    'plot_cluster_set',
    'plot_iteration_history'
]
