import pytest
import torch

from lloydkit import (
    Point, ClusterSet, EuclideanDistance, ClusteringOptimization, ClusteringOptimizationType
)
from lloydkit.base.interfaces import DistanceFunction
from lloydkit.utils import (
    new_executor, map_chunks, map_items,
    classify_points, refresh_cluster_centers, compute_cluster_set_info,
    compute_square_distances_from_nearest_cluster, split_clusters,
    split_most_spread_out_clusters,
    split_clusters_where_average_distance_from_center_greater_than,
    split_clusters_where_maximum_distance_from_center_greater_than,
    split_clusters_where_point_count_greater_than, apply_optimization
)

from data_gen import make_two_triples


class NaNDistance(DistanceFunction):
    def pairwise(self, points, centers):
        return torch.full((points.shape[0], centers.shape[0]), float("nan"))


def _pt(pid, *coords):
    return Point(pid, torch.tensor(coords, dtype=torch.float32))


@pytest.fixture
def executor():
    pool = new_executor(2)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def triples_set():
    """Two clusters centered on the first point of each triple."""
    points = make_two_triples()
    cs = ClusterSet(EuclideanDistance())
    cs.add_new_cluster_with_center(points[0])
    cs.add_new_cluster_with_center(points[3])
    return cs, points


def test_map_chunks_preserves_order(executor):
    chunks = map_chunks(executor, lambda start, stop: list(range(start, stop)), 10, 3)
    assert chunks == [[0, 1, 2], [3, 4, 5], [6, 7, 8], [9]]
    assert map_chunks(None, lambda start, stop: stop - start, 0, 4) == []
    with pytest.raises(ValueError):
        map_chunks(None, lambda start, stop: None, 3, 0)


def test_map_items_runs_inline_without_executor():
    assert map_items(None, lambda x: x * 2, [1, 2, 3]) == [2, 4, 6]


def test_new_executor_rejects_empty_pool():
    with pytest.raises(ValueError):
        new_executor(0)


def test_classify_points_groups_triples(triples_set, executor):
    cs, points = triples_set
    info = classify_points(cs, points, executor, chunk_size=2)

    assert info.point_count == 6
    assert info.point_location_change == 6
    assert {p.id for p in cs.clusters[0].points} == {"a0", "a1", "a2"}
    assert {p.id for p in cs.clusters[1].points} == {"b0", "b1", "b2"}
    first = info.get_cluster_info(cs.clusters[0].id)
    assert first.point_distances_from_center["a0"] == pytest.approx(0.0)
    assert first.point_distances_from_center["a1"] == pytest.approx(0.1)


def test_classify_points_counts_only_moved_points(triples_set):
    cs, points = triples_set
    classify_points(cs, points)
    snapshot = cs.without_points()
    info = classify_points(snapshot, points)
    assert info.point_location_change == 0


def test_classify_points_reports_empty_clusters(triples_set):
    cs, points = triples_set
    far = cs.add_new_cluster_with_center(torch.tensor([100.0, 100.0]))
    info = classify_points(cs, points)
    assert info.cluster_count == 3
    assert info.get_cluster_info(far.id).point_count == 0


def test_classify_points_without_clusters_fails():
    with pytest.raises(ValueError):
        classify_points(ClusterSet(EuclideanDistance()), [_pt("p", 0.0)])


def test_non_finite_distances_raise():
    cs = ClusterSet(NaNDistance())
    cs.add_new_cluster_with_center(torch.zeros(1))
    with pytest.raises(FloatingPointError):
        classify_points(cs, [_pt("p", 1.0)])


def test_refresh_moves_centers_to_means(triples_set, executor):
    cs, points = triples_set
    empty = cs.add_new_cluster_with_center(torch.tensor([50.0, 50.0]))
    info = classify_points(cs, points)
    refresh_cluster_centers(cs, info, executor)

    assert cs.clusters[0].center.tolist() == pytest.approx([0.1 / 3, 0.1 / 3])
    assert cs.clusters[1].center.tolist() == pytest.approx([10.0 + 0.1 / 3, 10.0 + 0.1 / 3])
    assert empty.center.tolist() == [50.0, 50.0]


def test_compute_cluster_set_info_measures_members(triples_set):
    cs, points = triples_set
    classify_points(cs, points)
    info = compute_cluster_set_info(cs)
    assert info.point_count == 6
    assert info.point_location_change == 0
    assert info.total_point_distance_from_center == pytest.approx(0.4, abs=1e-5)


def test_square_distances_never_grow(triples_set):
    cs, points = triples_set
    rest = points[1:3] + points[4:]
    start = torch.full((4,), 1e-4, dtype=torch.float64)
    d = compute_square_distances_from_nearest_cluster(cs, rest, start)
    assert d.dtype == torch.float64
    assert d.tolist() == pytest.approx([1e-4] * 4)

    d = compute_square_distances_from_nearest_cluster(
        cs, rest, torch.full((4,), 1.0, dtype=torch.float64))
    assert d.tolist() == pytest.approx([0.01] * 4, rel=1e-4)


def test_split_clusters_uses_farthest_member():
    cs = ClusterSet(EuclideanDistance())
    cluster = cs.add_new_cluster_with_center(torch.zeros(1))
    for pid, x in [("p0", 0.0), ("p1", 1.0), ("p2", 5.0)]:
        cs.assign_point(_pt(pid, x), cluster)

    assert split_clusters(cs, [cluster]) == 1
    assert cs.cluster_count == 2
    assert cs.clusters[1].center.tolist() == [5.0]
    # Original cluster keeps its center and members
    assert cluster.center.tolist() == [0.0]
    assert cluster.point_count == 3


def test_split_skips_singletons_and_duplicates():
    cs = ClusterSet(EuclideanDistance())
    single = cs.add_new_cluster_with_center(torch.zeros(1))
    cs.assign_point(_pt("s", 0.0), single)
    dup = cs.add_new_cluster_with_center(torch.ones(1))
    cs.assign_point(_pt("d0", 1.0), dup)
    cs.assign_point(_pt("d1", 1.0), dup)

    assert split_clusters(cs, [single, dup]) == 0
    assert cs.cluster_count == 2


def test_split_most_spread_out_respects_count(executor):
    cs = ClusterSet(EuclideanDistance())
    points = []
    for k, offset in enumerate([0.0, 100.0, 200.0]):
        cs.add_new_cluster_with_center(torch.tensor([offset]))
        width = float(k + 1)
        points += [_pt(f"c{k}a", offset), _pt(f"c{k}b", offset + width)]
    info = classify_points(cs, points)

    assert split_most_spread_out_clusters(cs, info, 0) == 0
    assert split_most_spread_out_clusters(cs, info, 2, executor) == 2
    new_centers = sorted(c.center.item() for c in cs.clusters[3:])
    # Widest clusters are the last two
    assert new_centers == [102.0, 203.0]


def test_split_most_spread_out_passes_over_unsplittable():
    cs = ClusterSet(EuclideanDistance())
    wide = cs.add_new_cluster_with_center(torch.zeros(1))
    narrow = cs.add_new_cluster_with_center(torch.tensor([100.0]))
    # The widest cluster has a single member and cannot be split
    info = classify_points(cs, [_pt("w", 40.0), _pt("n0", 100.0), _pt("n1", 101.0)])
    assert wide.point_count == 1 and narrow.point_count == 2

    assert split_most_spread_out_clusters(cs, info, 1) == 1
    assert cs.clusters[2].center.tolist() == [101.0]


def _threshold_set():
    cs = ClusterSet(EuclideanDistance())
    tight = cs.add_new_cluster_with_center(torch.zeros(1))
    loose = cs.add_new_cluster_with_center(torch.tensor([100.0]))
    points = [_pt("t0", 0.0), _pt("t1", 0.5),
              _pt("l0", 100.0), _pt("l1", 104.0), _pt("l2", 98.0)]
    info = classify_points(cs, points)
    return cs, info, tight, loose


def test_split_where_average_distance_greater_than():
    cs, info, tight, loose = _threshold_set()
    assert split_clusters_where_average_distance_from_center_greater_than(cs, info, 1.0) == 1
    assert cs.clusters[-1].center.tolist() == [104.0]


def test_split_where_maximum_distance_greater_than():
    cs, info, tight, loose = _threshold_set()
    assert split_clusters_where_maximum_distance_from_center_greater_than(cs, info, 0.25) == 2
    assert cs.cluster_count == 4


def test_split_where_point_count_greater_than():
    cs, info, tight, loose = _threshold_set()
    assert split_clusters_where_point_count_greater_than(cs, info, 2) == 1
    assert split_clusters_where_point_count_greater_than(cs, info, 3) == 0


@pytest.mark.parametrize("optimization_type, value, changed", [
    (ClusteringOptimizationType.MINIMIZE_AVERAGE_POINT_TO_CENTER_DISTANCE, 10.0, False),
    (ClusteringOptimizationType.MINIMIZE_AVERAGE_POINT_TO_CENTER_DISTANCE, 1.0, True),
    (ClusteringOptimizationType.MINIMIZE_MAXIMUM_POINT_TO_CENTER_DISTANCE, 3.0, True),
    (ClusteringOptimizationType.MINIMIZE_PER_CLUSTER_POINT_COUNT, 5, False),
])
def test_apply_optimization(optimization_type, value, changed):
    cs, info, _, _ = _threshold_set()
    optimization = ClusteringOptimization(optimization_type, value)
    assert apply_optimization(optimization, cs, info) is changed
    assert (cs.cluster_count > 2) is changed
