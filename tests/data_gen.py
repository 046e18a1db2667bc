# tests/data_gen.py
"""
Tiny synthetic-data generators reused across the lloydkit test suite.

    >>> X, y = make_blobs(n_per=50, centers=[[0, 0], [5, 5]])
    >>> X.shape, y.shape
    ((100, 2), (100,))
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
import numpy as np
import torch

from lloydkit import Point

NDArray = np.ndarray


def make_blobs(
    n_per: int = 100,
    centers: Optional[Sequence[Sequence[float]]] = None,
    scale: float = 0.3,
    seed: Optional[int] = 0,
) -> Tuple[NDArray, NDArray]:
    """
    Isotropic Gaussian blobs, one per center, stacked in center order.

    Returns
    -------
    X : (n_per * k, d) float32
    y : (n_per * k,) int64 ground-truth blob index
    """
    if centers is None:
        centers = [[0.0, 0.0], [6.0, 0.0], [0.0, 6.0]]
    centers = np.asarray(centers, dtype=np.float64)
    rng = np.random.default_rng(seed)

    X = np.vstack([rng.normal(loc=c, scale=scale, size=(n_per, centers.shape[1])) for c in centers])
    y = np.repeat(np.arange(len(centers)), n_per)
    return X.astype(np.float32), y.astype(np.int64)


def make_two_triples() -> List[Point]:
    """
    Six 2D points: a tight triple near (0, 0) and another near (10, 10).

    Ids are "a0".."a2" for the first triple and "b0".."b2" for the second.
    """
    coords = {
        "a0": [0.0, 0.0], "a1": [0.1, 0.0], "a2": [0.0, 0.1],
        "b0": [10.0, 10.0], "b1": [10.1, 10.0], "b2": [10.0, 10.1],
    }
    return [Point(pid, torch.tensor(c, dtype=torch.float32)) for pid, c in coords.items()]


def make_points(X, prefix: str = "p") -> List[Point]:
    """Wrap rows of X into points with ids ``{prefix}{row}``."""
    X = torch.as_tensor(np.asarray(X), dtype=torch.float32)
    return [Point(f"{prefix}{i}", X[i]) for i in range(X.shape[0])]
