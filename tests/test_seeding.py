import pytest
import torch

from lloydkit import KMeansPlusPlusSeeder, EuclideanDistance, Point, InvalidInputError
from lloydkit.utils import new_executor

from data_gen import make_points, make_two_triples, make_blobs


def _center_rows(cluster_set):
    return {tuple(c.center.tolist()) for c in cluster_set}


def test_seeds_requested_count(rng):
    X, _ = make_blobs(n_per=30, seed=1)
    points = make_points(X)
    cs = KMeansPlusPlusSeeder(torch.Generator().manual_seed(0)).seed(points, 5, EuclideanDistance())
    assert cs.cluster_count == 5
    assert all(c.is_empty() for c in cs)


def test_centers_are_distinct_input_points(generator):
    points = make_points(torch.arange(20, dtype=torch.float32).reshape(10, 2))
    cs = KMeansPlusPlusSeeder(generator).seed(points, 6, EuclideanDistance())
    inputs = {tuple(p.array.tolist()) for p in points}
    centers = _center_rows(cs)
    assert len(centers) == 6
    assert centers <= inputs


def test_fewer_points_than_clusters(generator):
    points = make_points(torch.randn(5, 3, generator=generator))
    cs = KMeansPlusPlusSeeder(generator).seed(points, 10, EuclideanDistance())
    assert cs.cluster_count == 5


def test_single_point(generator):
    points = make_points(torch.ones(1, 2))
    cs = KMeansPlusPlusSeeder(generator).seed(points, 3, EuclideanDistance())
    assert cs.cluster_count == 1
    assert cs.centers.tolist() == [[1.0, 1.0]]


def test_identical_points_still_give_distinct_seeds(generator):
    # All distances are 0, so every draw takes the first remaining point
    points = make_points(torch.zeros(4, 2))
    cs = KMeansPlusPlusSeeder(generator).seed(points, 3, EuclideanDistance())
    assert cs.cluster_count == 3


def test_seeding_does_not_modify_points(generator):
    points = make_two_triples()
    before = [p.id for p in points]
    KMeansPlusPlusSeeder(generator).seed(points, 2, EuclideanDistance())
    assert [p.id for p in points] == before


def test_two_seeds_on_two_triples_usually_split_them():
    points = make_two_triples()
    hits = 0
    for seed in range(20):
        cs = KMeansPlusPlusSeeder(torch.Generator().manual_seed(seed)).seed(
            points, 2, EuclideanDistance())
        sides = {c.center[0].item() > 5 for c in cs}
        hits += len(sides) == 2
    assert hits >= 18


def test_same_generator_seed_same_centers():
    points = make_points(torch.randn(50, 2, generator=torch.Generator().manual_seed(3)))
    a = KMeansPlusPlusSeeder(torch.Generator().manual_seed(9)).seed(points, 4, EuclideanDistance())
    b = KMeansPlusPlusSeeder(torch.Generator().manual_seed(9)).seed(points, 4, EuclideanDistance())
    assert torch.equal(a.centers, b.centers)


def test_executor_does_not_change_result():
    points = make_points(torch.randn(300, 2, generator=torch.Generator().manual_seed(4)))
    inline = KMeansPlusPlusSeeder(torch.Generator().manual_seed(2)).seed(points, 4, EuclideanDistance())
    pool = new_executor(3)
    try:
        pooled = KMeansPlusPlusSeeder(torch.Generator().manual_seed(2)).seed(
            points, 4, EuclideanDistance(), pool)
    finally:
        pool.shutdown()
    assert torch.equal(inline.centers, pooled.centers)


def test_invalid_requests():
    seeder = KMeansPlusPlusSeeder(torch.Generator().manual_seed(0))
    with pytest.raises(InvalidInputError):
        seeder.seed(make_points(torch.zeros(2, 1)), 0, EuclideanDistance())
    with pytest.raises(ValueError):
        seeder.seed([], 2, EuclideanDistance())
