# tests/utils.py
"""
Small, reusable helpers used across the lloydkit test suite.

Functions:
- groups_of(cluster_set): member ids of every cluster, as a set of frozensets.
- perm_invariant_accuracy(y_pred, y_true): best accuracy over label permutations.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import json
import itertools
import time
from contextlib import contextmanager
from typing import Any, Dict, FrozenSet, Set

import numpy as np


def groups_of(cluster_set) -> Set[FrozenSet[str]]:
    """Member ids per non-empty cluster; independent of cluster order and ids."""
    return {frozenset(p.id for p in c.points) for c in cluster_set if not c.is_empty()}


def perm_invariant_accuracy(y_pred, y_true) -> float:
    """
    Best accuracy over all relabelings of y_pred.

    Only meant for small label counts (K <= 6).
    """
    y_pred = np.asarray(y_pred)
    y_true = np.asarray(y_true)
    if y_pred.shape != y_true.shape:
        raise ValueError(f"Shape mismatch: {y_pred.shape} vs {y_true.shape}")
    labels = np.unique(np.concatenate([y_pred, y_true]))
    best = 0.0
    for perm in itertools.permutations(labels):
        mapping = dict(zip(labels, perm))
        mapped = np.array([mapping[v] for v in y_pred])
        best = max(best, float(np.mean(mapped == y_true)))
    return best


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Output
    ------
    [timing] fit {"n":400,"K":3} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.
    """
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"), default=repr)
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
