"""
Cluster visualization utilities.

Plots a 2D cluster set (members colored per cluster, centers marked) and
the per-iteration statistics recorded in an iteration history.
"""

from typing import Optional, List
import matplotlib.pyplot as plt
import numpy as np

from ..base.data_structures import ClusterSet
from ..iteration.history import IterationHistory


def plot_cluster_set(cluster_set: ClusterSet,
                     ax: Optional[plt.Axes] = None,
                     colors: Optional[List] = None,
                     alpha: float = 0.7,
                     center_marker: str = 'X',
                     center_size: int = 200,
                     point_size: int = 50,
                     show_legend: bool = True,
                     title: Optional[str] = None) -> plt.Axes:
    """Plot the members and centers of a 2D cluster set.

    Args:
        cluster_set: Cluster set whose points have 2 coordinates
        ax: Matplotlib axes (created if None)
        colors: One color per cluster
        alpha: Point transparency
        center_marker: Marker for centers
        center_size: Size of center markers
        point_size: Size of data points
        show_legend: Whether to show legend
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if cluster_set.cluster_count == 0:
        raise ValueError("Cannot plot a cluster set without clusters")
    if cluster_set.centers.shape[1] != 2:
        raise ValueError(f"Expected 2D points, got dimension {cluster_set.centers.shape[1]}")

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    n_clusters = cluster_set.cluster_count
    if colors is None:
        cmap = plt.get_cmap('tab10' if n_clusters <= 10 else 'tab20')
        colors = [cmap(i % cmap.N) for i in range(n_clusters)]

    for i, cluster in enumerate(cluster_set):
        if cluster.is_empty():
            continue
        X_np = cluster.points_tensor().detach().cpu().numpy()
        ax.scatter(X_np[:, 0], X_np[:, 1],
                   c=[colors[i % len(colors)]],
                   s=point_size,
                   alpha=alpha,
                   edgecolors='black',
                   linewidth=0.5,
                   label=cluster.label or f'Cluster {i}')

    centers_np = cluster_set.centers.detach().cpu().numpy()
    ax.scatter(centers_np[:, 0], centers_np[:, 1],
               c='black',
               marker=center_marker,
               s=center_size,
               edgecolors='white',
               linewidth=2,
               label='Centers',
               zorder=10)

    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')

    if title:
        ax.set_title(title)

    if show_legend:
        ax.legend()

    return ax


def plot_iteration_history(history: IterationHistory,
                           ax: Optional[plt.Axes] = None,
                           title: Optional[str] = None) -> plt.Axes:
    """Plot total distance and cluster count against the iteration index.

    Iterations in which the strategy changed the cluster structure are
    marked with a vertical line.
    """
    if len(history) == 0:
        raise ValueError("Iteration history is empty")

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 4))

    indices = np.array([info.index for info in history])
    totals = np.array([info.cluster_set_info.total_point_distance_from_center for info in history])
    counts = np.array([info.cluster_set_info.cluster_count for info in history])

    ax.plot(indices, totals, 'o-', color='tab:blue', label='Total distance')
    ax.set_xlabel('Iteration')
    ax.set_ylabel('Total distance to center')

    count_ax = ax.twinx()
    count_ax.step(indices, counts, where='post', color='tab:orange', label='Clusters')
    count_ax.set_ylabel('Cluster count')

    for info in history:
        if info.strategy_applied:
            ax.axvline(info.index, color='gray', linestyle='--', alpha=0.5)

    if title:
        ax.set_title(title)

    return ax
