"""
Bulk-numeric operations on cluster sets.

These are the heavy steps of every iteration: classifying all points,
recomputing centers, measuring distances for seeding, and splitting
clusters. Work is fanned out over the engine's executor (chunks of points
or one task per cluster) and every call blocks until all tasks are done;
results are merged back into the cluster set on the calling thread.
"""

from typing import Dict, List, Optional, Sequence, Tuple
from concurrent.futures import Executor
import torch
from torch import Tensor

from ..base.data_structures import Point, Cluster, ClusterSet
from ..base.cluster_info import ClusterInfo, ClusterSetInfo
from ..strategy.types import ClusteringOptimizationType
from .concurrency import map_chunks, map_items

DEFAULT_CHUNK_SIZE = 2048


def _stack(points: Sequence[Point]) -> Tensor:
    return torch.stack([p.array for p in points])


def _nearest_centers(cluster_set: ClusterSet, X: Tensor,
                     executor: Optional[Executor],
                     chunk_size: int) -> Tuple[Tensor, Tensor]:
    """Distance to, and index of, the nearest center for every row of X."""
    centers = cluster_set.centers
    distance_function = cluster_set.distance_function

    def task(start: int, stop: int):
        distances = distance_function.pairwise(X[start:stop], centers)
        return torch.min(distances, dim=1)

    results = map_chunks(executor, task, X.shape[0], chunk_size)
    min_distances = torch.cat([r.values for r in results])
    indices = torch.cat([r.indices for r in results])

    if not torch.isfinite(min_distances).all():
        raise FloatingPointError(
            f"{distance_function!r} produced non-finite distances")

    return min_distances, indices


def classify_points(cluster_set: ClusterSet, points: Sequence[Point],
                    executor: Optional[Executor] = None,
                    chunk_size: int = DEFAULT_CHUNK_SIZE) -> ClusterSetInfo:
    """Assign every point to its nearest cluster.

    Args:
        cluster_set: Cluster set whose clusters have no members yet
        points: Working point set
        executor: Worker pool (None to run inline)
        chunk_size: Number of points per task

    Returns:
        Stats of the resulting assignment, including how many points
        changed cluster compared to the previous snapshot

    Raises:
        FloatingPointError: If the distance function yields NaN or inf
    """
    if cluster_set.cluster_count == 0:
        raise ValueError("Cannot classify points without clusters")

    min_distances, indices = _nearest_centers(cluster_set, _stack(points), executor, chunk_size)

    distances_by_cluster: Dict[str, Dict[str, float]] = {c.id: {} for c in cluster_set.clusters}
    location_change = 0
    for point, idx, distance in zip(points, indices.tolist(), min_distances.tolist()):
        cluster = cluster_set.clusters[idx]
        if cluster_set.previous_distribution.get(point.id) != cluster.id:
            location_change += 1
        cluster_set.assign_point(point, cluster)
        distances_by_cluster[cluster.id][point.id] = distance

    return ClusterSetInfo(
        cluster_infos={cid: ClusterInfo(cid, d) for cid, d in distances_by_cluster.items()},
        point_location_change=location_change
    )


def refresh_cluster_centers(cluster_set: ClusterSet, cluster_set_info: ClusterSetInfo,
                            executor: Optional[Executor] = None) -> None:
    """Move every non-empty cluster center to the mean of its members.

    Empty clusters keep their previous center.
    """
    def task(cluster: Cluster) -> Optional[Tensor]:
        if cluster.is_empty():
            return None
        return cluster.points_tensor().mean(dim=0)

    new_centers = map_items(executor, task, cluster_set.clusters)
    for cluster, center in zip(cluster_set.clusters, new_centers):
        if center is not None:
            cluster.center = center


def compute_cluster_set_info(cluster_set: ClusterSet) -> ClusterSetInfo:
    """Measure every member's distance to its cluster center."""
    distance_function = cluster_set.distance_function
    infos = {}
    for cluster in cluster_set.clusters:
        members = cluster.points
        if members:
            distances = distance_function.pairwise(
                cluster.points_tensor(), cluster.center.unsqueeze(0))[:, 0].tolist()
        else:
            distances = []
        infos[cluster.id] = ClusterInfo(cluster.id, dict(zip((p.id for p in members), distances)))
    return ClusterSetInfo(cluster_infos=infos)


def compute_square_distances_from_nearest_cluster(cluster_set: ClusterSet,
                                                  points: Sequence[Point],
                                                  previous_distances: Tensor,
                                                  executor: Optional[Executor] = None,
                                                  chunk_size: int = DEFAULT_CHUNK_SIZE) -> Tensor:
    """Squared distance from each point to its nearest center.

    Args:
        cluster_set: Clusters chosen so far
        points: Candidate points, aligned with ``previous_distances``
        previous_distances: (n,) float64 tensor from the previous call
        executor: Worker pool

    Returns:
        (n,) float64 tensor, never larger than ``previous_distances``
    """
    if not points:
        return previous_distances.new_zeros(0)
    min_distances, _ = _nearest_centers(cluster_set, _stack(points), executor, chunk_size)
    squared = min_distances.to(torch.float64) ** 2
    return torch.minimum(previous_distances, squared)


def _split_candidate(cluster: Cluster, cluster_set: ClusterSet) -> Optional[Point]:
    """Member point that will center the new half of a split, if any.

    Picks the member farthest from the current center that does not sit on
    any existing center.
    """
    members = cluster.points
    if len(members) < 2:
        return None
    distances = cluster_set.distance_function.pairwise(
        cluster.points_tensor(), cluster.center.unsqueeze(0))[:, 0]
    centers = cluster_set.centers
    for idx in torch.argsort(distances, descending=True).tolist():
        if distances[idx].item() <= 0.0:
            break
        candidate = members[idx]
        if not (centers == candidate.array.unsqueeze(0)).all(dim=1).any():
            return candidate
    return None


def split_clusters(cluster_set: ClusterSet, clusters: Sequence[Cluster],
                   executor: Optional[Executor] = None,
                   limit: Optional[int] = None) -> int:
    """Split each of the given clusters in two.

    The original cluster keeps its center; a new cluster is centered on
    its member farthest from that center. Clusters with fewer than two
    members, or whose members all sit on existing centers, are skipped.

    Args:
        cluster_set: Set the new clusters are added to
        clusters: Clusters to split, in priority order
        executor: Worker pool for the per-cluster distance measurements
        limit: Stop after this many successful splits

    Returns:
        Number of clusters actually split
    """
    candidates = map_items(executor, lambda c: _split_candidate(c, cluster_set), list(clusters))
    split_count = 0
    for candidate in candidates:
        if limit is not None and split_count >= limit:
            break
        if candidate is None:
            continue
        # A previous split in this batch may already have claimed the spot
        if (cluster_set.centers == candidate.array.unsqueeze(0)).all(dim=1).any():
            continue
        cluster_set.add_new_cluster_with_center(candidate)
        split_count += 1
    return split_count


def _clusters_for(cluster_set: ClusterSet, infos: Sequence[ClusterInfo]) -> List[Cluster]:
    clusters = [cluster_set.get_cluster(info.cluster_id) for info in infos]
    return [c for c in clusters if c is not None]


def split_most_spread_out_clusters(cluster_set: ClusterSet, cluster_set_info: ClusterSetInfo,
                                   count: int, executor: Optional[Executor] = None) -> int:
    """Split up to ``count`` clusters, most spread-out first.

    Spread is the total distance of members to the center. Clusters that
    cannot be split are passed over in favour of the next most spread out.
    """
    if count <= 0:
        return 0
    ranked = cluster_set_info.most_spread_out(cluster_set_info.cluster_count)
    return split_clusters(cluster_set, _clusters_for(cluster_set, ranked), executor, limit=count)


def split_clusters_where_average_distance_from_center_greater_than(
        cluster_set: ClusterSet, cluster_set_info: ClusterSetInfo,
        max_distance: float, executor: Optional[Executor] = None) -> int:
    infos = [info for info in cluster_set_info.cluster_infos.values()
             if info.average_point_distance_from_center > max_distance]
    return split_clusters(cluster_set, _clusters_for(cluster_set, infos), executor)


def split_clusters_where_maximum_distance_from_center_greater_than(
        cluster_set: ClusterSet, cluster_set_info: ClusterSetInfo,
        max_distance: float, executor: Optional[Executor] = None) -> int:
    infos = [info for info in cluster_set_info.cluster_infos.values()
             if info.max_point_distance_from_center > max_distance]
    return split_clusters(cluster_set, _clusters_for(cluster_set, infos), executor)


def split_clusters_where_point_count_greater_than(
        cluster_set: ClusterSet, cluster_set_info: ClusterSetInfo,
        max_point_count: float, executor: Optional[Executor] = None) -> int:
    infos = [info for info in cluster_set_info.cluster_infos.values()
             if info.point_count > max_point_count]
    return split_clusters(cluster_set, _clusters_for(cluster_set, infos), executor)


def apply_optimization(optimization, cluster_set: ClusterSet,
                       cluster_set_info: ClusterSetInfo,
                       executor: Optional[Executor] = None) -> bool:
    """Run one optimization pass.

    Args:
        optimization: A ClusteringOptimization (type + threshold value)
        cluster_set: Current cluster set, modified in place
        cluster_set_info: Stats of the current iteration
        executor: Worker pool

    Returns:
        True if the cluster structure changed
    """
    optimization_type = optimization.optimization_type
    value = optimization.value

    if optimization_type is ClusteringOptimizationType.MINIMIZE_AVERAGE_POINT_TO_CENTER_DISTANCE:
        split_count = split_clusters_where_average_distance_from_center_greater_than(
            cluster_set, cluster_set_info, value, executor)
    elif optimization_type is ClusteringOptimizationType.MINIMIZE_MAXIMUM_POINT_TO_CENTER_DISTANCE:
        split_count = split_clusters_where_maximum_distance_from_center_greater_than(
            cluster_set, cluster_set_info, value, executor)
    elif optimization_type is ClusteringOptimizationType.MINIMIZE_PER_CLUSTER_POINT_COUNT:
        split_count = split_clusters_where_point_count_greater_than(
            cluster_set, cluster_set_info, value, executor)
    else:
        raise ValueError(f"Unknown optimization type: {optimization_type}")

    return split_count > 0
