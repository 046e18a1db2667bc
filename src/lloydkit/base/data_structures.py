"""
Core data structures for the lloydkit clustering engine.

Points are immutable; clusters own the set of points currently assigned to
them; a cluster set groups clusters together with the distance function
and remembers which cluster every point was assigned to.
"""

from typing import Optional, List, Dict, Union, Iterator
from dataclasses import dataclass
import uuid
import numpy as np
import torch
from torch import Tensor

from .interfaces import DistanceFunction


@dataclass(frozen=True, eq=False)
class Point:
    """A point to cluster: an identifier plus a 1D coordinate tensor."""

    id: str
    array: Tensor
    label: Optional[str] = None

    @property
    def dimension(self) -> int:
        return self.array.shape[0]

    @staticmethod
    def to_points(X: Union[Tensor, np.ndarray, list],
                  dtype: torch.dtype = torch.float32) -> List['Point']:
        """Wrap each row of an (n, d) matrix into a Point.

        Point ids are the row indices as strings.
        """
        if isinstance(X, Tensor):
            X = X.to(dtype=dtype)
        else:
            X = torch.as_tensor(np.asarray(X), dtype=dtype)
        if X.dim() == 1:
            X = X.unsqueeze(1)
        return [Point(id=str(i), array=X[i]) for i in range(X.shape[0])]

    def __repr__(self) -> str:
        return f"Point(id={self.id!r}, array={self.array.tolist()})"


@dataclass(frozen=True)
class PointClassification:
    """Result of assigning one point to its nearest cluster."""
    cluster: 'Cluster'
    distance_from_center: float
    new_location: bool


class Cluster:
    """A cluster center plus the points currently assigned to it."""

    def __init__(self, center: Tensor, id: Optional[str] = None,
                 label: Optional[str] = None):
        """
        Args:
            center: (d,) tensor with the cluster center
            id: Cluster identifier (random if None)
            label: Optional human readable label
        """
        self.id = id if id is not None else uuid.uuid4().hex
        self.label = label
        self.center = center
        self._points: Dict[str, Point] = {}

    @property
    def points(self) -> List[Point]:
        return list(self._points.values())

    @property
    def point_count(self) -> int:
        return len(self._points)

    def is_empty(self) -> bool:
        return not self._points

    def add_point(self, point: Point) -> None:
        self._points[point.id] = point

    def get_point(self, point_id: str) -> Optional[Point]:
        return self._points.get(point_id)

    def remove_point(self, point_id: str) -> Optional[Point]:
        return self._points.pop(point_id, None)

    def remove_points(self) -> None:
        self._points.clear()

    def points_tensor(self) -> Tensor:
        """Stack member coordinates into an (m, d) tensor."""
        if not self._points:
            return self.center.new_zeros((0, self.center.shape[0]))
        return torch.stack([p.array for p in self._points.values()])

    def copy_without_points(self) -> 'Cluster':
        return Cluster(self.center.clone(), id=self.id, label=self.label)

    def __repr__(self) -> str:
        return (f"Cluster(id={self.id!r}, points={self.point_count}, "
                f"center={self.center.tolist()})")


class ClusterSet:
    """Ordered collection of clusters sharing one distance function.

    Besides the clusters themselves the set keeps ``point_distribution``,
    the cluster id every classified point currently belongs to, and
    ``previous_distribution``, the assignment of the snapshot it was
    derived from. Comparing the two tells how many points moved.
    """

    def __init__(self, distance_function: DistanceFunction,
                 previous_distribution: Optional[Dict[str, str]] = None):
        self.distance_function = distance_function
        self.clusters: List[Cluster] = []
        self.point_distribution: Dict[str, str] = {}
        self.previous_distribution: Dict[str, str] = dict(previous_distribution or {})

    @property
    def cluster_count(self) -> int:
        return len(self.clusters)

    @property
    def centers(self) -> Tensor:
        """(k, d) tensor of cluster centers in cluster order."""
        return torch.stack([c.center for c in self.clusters])

    def __len__(self) -> int:
        return len(self.clusters)

    def __iter__(self) -> Iterator[Cluster]:
        return iter(self.clusters)

    def add_new_cluster_with_center(self, center: Union[Point, Tensor]) -> Cluster:
        """Create a cluster centered on a point (or raw coordinates)."""
        array = center.array if isinstance(center, Point) else center
        cluster = Cluster(array.clone())
        self.clusters.append(cluster)
        return cluster

    def get_cluster(self, cluster_id: str) -> Optional[Cluster]:
        for cluster in self.clusters:
            if cluster.id == cluster_id:
                return cluster
        return None

    def cluster_of(self, point: Point) -> Optional[Cluster]:
        cluster_id = self.point_distribution.get(point.id)
        return self.get_cluster(cluster_id) if cluster_id is not None else None

    def nearest_cluster(self, point: Point) -> PointClassification:
        """Find the cluster whose center is closest to a point."""
        if not self.clusters:
            raise ValueError("Cluster set has no clusters")
        distances = self.distance_function.pairwise(point.array.unsqueeze(0), self.centers)[0]
        idx = int(torch.argmin(distances).item())
        cluster = self.clusters[idx]
        return PointClassification(
            cluster=cluster,
            distance_from_center=distances[idx].item(),
            new_location=self.previous_distribution.get(point.id) != cluster.id
        )

    def classify_point(self, point: Point, move_to_cluster: bool = True) -> PointClassification:
        """Assign a point to its nearest cluster.

        Args:
            point: Point to classify
            move_to_cluster: If False only report the nearest cluster

        Returns:
            The classification of the point
        """
        classification = self.nearest_cluster(point)
        if move_to_cluster:
            self.assign_point(point, classification.cluster)
        return classification

    def assign_point(self, point: Point, cluster: Cluster) -> None:
        """Move a point into ``cluster``, detaching it from any other one."""
        current = self.cluster_of(point)
        if current is not None and current is not cluster:
            current.remove_point(point.id)
        cluster.add_point(point)
        self.point_distribution[point.id] = cluster.id

    def remove_points(self) -> None:
        """Detach every point from every cluster."""
        for cluster in self.clusters:
            cluster.remove_points()
        self.previous_distribution = self.point_distribution
        self.point_distribution = {}

    def remove_empty_clusters(self, keep: int = 0) -> List[Cluster]:
        """Drop clusters without points.

        Args:
            keep: Minimum number of clusters that must remain; empty
                clusters beyond what this floor allows are kept, last
                ones first.

        Returns:
            The removed clusters
        """
        empty = [c for c in self.clusters if c.is_empty()]
        removable = max(0, min(len(empty), self.cluster_count - keep))
        removed = empty[:removable]
        removed_ids = {c.id for c in removed}
        self.clusters = [c for c in self.clusters if c.id not in removed_ids]
        return removed

    def without_points(self) -> 'ClusterSet':
        """Return a new snapshot with the same centers and no members."""
        snapshot = ClusterSet(self.distance_function,
                              previous_distribution=self.point_distribution)
        snapshot.clusters = [c.copy_without_points() for c in self.clusters]
        return snapshot

    def labels_for(self, points: List[Point]) -> Tensor:
        """Index (in cluster order) of the cluster owning each point, -1 if none."""
        index = {c.id: k for k, c in enumerate(self.clusters)}
        return torch.tensor(
            [index.get(self.point_distribution.get(p.id), -1) for p in points],
            dtype=torch.long
        )

    def __repr__(self) -> str:
        return (f"ClusterSet(clusters={self.cluster_count}, "
                f"distance_function={self.distance_function!r})")
