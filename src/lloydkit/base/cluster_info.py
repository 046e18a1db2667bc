"""
Per-iteration statistics about clusters.

A ClusterSetInfo is taken right after points have been classified and is
never modified afterwards; dropping the stats of pruned clusters yields a
new snapshot.
"""

from typing import Dict, Iterable, List, Mapping, Optional
from dataclasses import dataclass, field
from types import MappingProxyType
import math

from .data_structures import Cluster


@dataclass(frozen=True)
class ClusterInfo:
    """Distances from each member point to the center of one cluster."""

    cluster_id: str
    point_distances_from_center: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'point_distances_from_center',
                           MappingProxyType(dict(self.point_distances_from_center)))

    @property
    def point_count(self) -> int:
        return len(self.point_distances_from_center)

    @property
    def total_point_distance_from_center(self) -> float:
        return math.fsum(self.point_distances_from_center.values())

    @property
    def average_point_distance_from_center(self) -> float:
        if not self.point_distances_from_center:
            return 0.0
        return self.total_point_distance_from_center / self.point_count

    @property
    def max_point_distance_from_center(self) -> float:
        return max(self.point_distances_from_center.values(), default=0.0)

    @property
    def point_distance_from_center_variance(self) -> float:
        if self.point_count == 0:
            return 0.0
        mean = self.average_point_distance_from_center
        return math.fsum((d - mean) ** 2 for d in self.point_distances_from_center.values()) / self.point_count

    def points_farther_from_center_than(self, max_distance: float) -> List[str]:
        """Ids of member points lying farther than ``max_distance`` from the center."""
        return [pid for pid, d in self.point_distances_from_center.items() if d > max_distance]

    def farthest_point_id(self) -> Optional[str]:
        if not self.point_distances_from_center:
            return None
        return max(self.point_distances_from_center, key=self.point_distances_from_center.get)


@dataclass(frozen=True)
class ClusterSetInfo:
    """Snapshot of all cluster statistics for one iteration.

    Attributes:
        cluster_infos: Stats keyed by cluster id, in cluster order
        point_location_change: Number of points whose cluster changed
            compared to the previous iteration
    """

    cluster_infos: Mapping[str, ClusterInfo] = field(default_factory=dict)
    point_location_change: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'cluster_infos', MappingProxyType(dict(self.cluster_infos)))

    @property
    def cluster_count(self) -> int:
        return len(self.cluster_infos)

    @property
    def point_count(self) -> int:
        return sum(info.point_count for info in self.cluster_infos.values())

    def get_cluster_info(self, cluster_id: str) -> Optional[ClusterInfo]:
        return self.cluster_infos.get(cluster_id)

    def _all_distances(self) -> List[float]:
        return [d for info in self.cluster_infos.values()
                for d in info.point_distances_from_center.values()]

    @property
    def total_point_distance_from_center(self) -> float:
        return math.fsum(self._all_distances())

    @property
    def average_point_distance_from_center(self) -> float:
        count = self.point_count
        return self.total_point_distance_from_center / count if count else 0.0

    @property
    def point_distance_from_cluster_variance(self) -> float:
        distances = self._all_distances()
        if not distances:
            return 0.0
        mean = math.fsum(distances) / len(distances)
        return math.fsum((d - mean) ** 2 for d in distances) / len(distances)

    @property
    def point_location_change_rate(self) -> float:
        count = self.point_count
        return self.point_location_change / count if count else 0.0

    def most_spread_out(self, count: int) -> List[ClusterInfo]:
        """The ``count`` clusters with the largest total distance to their center."""
        ranked = sorted(self.cluster_infos.values(),
                        key=lambda info: (info.total_point_distance_from_center,
                                          info.point_distance_from_center_variance),
                        reverse=True)
        return ranked[:max(0, count)]

    def remove_cluster_infos(self, clusters: Iterable[Cluster]) -> 'ClusterSetInfo':
        """Return a copy without the stats of the given clusters."""
        removed = {c.id for c in clusters}
        kept: Dict[str, ClusterInfo] = {
            cid: info for cid, info in self.cluster_infos.items() if cid not in removed
        }
        return ClusterSetInfo(cluster_infos=kept,
                              point_location_change=self.point_location_change)
