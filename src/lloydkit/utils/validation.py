"""
Input validation utilities.

Provides functions for validating points and configuration values before
clustering, including data type conversion and sanity checks.
"""

from typing import Optional, Union, List, Sequence
import torch
from torch import Tensor
import numpy as np

from ..base.data_structures import Point
from ..base.exceptions import InvalidInputError


def validate_data(X: Union[Tensor, np.ndarray, list],
                 dtype: torch.dtype = torch.float32,
                 ensure_finite: bool = True,
                 ensure_min_samples: int = 1) -> Tensor:
    """Validate and convert input data to a 2D tensor.

    Args:
        X: Input data (tensor, numpy array, or list)
        dtype: Target data type
        ensure_finite: Whether to check for inf/nan
        ensure_min_samples: Minimum number of samples required

    Returns:
        Validated (n, d) tensor

    Raises:
        InvalidInputError: If validation fails
    """
    if isinstance(X, Tensor):
        X = X.to(dtype=dtype)
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(X).to(dtype=dtype)
    elif isinstance(X, list):
        X = torch.tensor(X, dtype=dtype)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if X.dim() == 1:
        X = X.unsqueeze(1)
    elif X.dim() != 2:
        raise InvalidInputError(f"Expected 2D array, got {X.dim()}D")

    n_samples = X.shape[0]
    if n_samples < ensure_min_samples:
        raise InvalidInputError(f"Found {n_samples} samples, but need at least "
                                f"{ensure_min_samples}")

    if ensure_finite:
        if torch.isnan(X).any():
            raise InvalidInputError("Input contains NaN values")
        if torch.isinf(X).any():
            raise InvalidInputError("Input contains infinite values")

    return X


def validate_points(points: Union[Sequence[Point], Tensor, np.ndarray]) -> List[Point]:
    """Check a working point set before a run.

    Matrices are wrapped into points first. Every point must have a unique
    id, a 1D finite coordinate tensor, and the same dimension as the rest.
    Coordinates are brought to one floating dtype: integer or bool points
    become float32, mixed float widths are promoted to the widest.

    Raises:
        InvalidInputError: If the point set is empty or inconsistent
    """
    if isinstance(points, (Tensor, np.ndarray)):
        return Point.to_points(validate_data(points))

    points = list(points)
    if not points:
        raise InvalidInputError("Cannot cluster an empty point set")

    for point in points:
        if not isinstance(point, Point):
            raise TypeError(f"Expected Point, got {type(point)}")
        if point.array.dim() != 1:
            raise InvalidInputError(f"Point {point.id!r} is not a 1D vector")

    dimension = points[0].dimension
    dtype = torch.float32
    seen = set()
    for point in points:
        if point.dimension != dimension:
            raise InvalidInputError(f"Point {point.id!r} has dimension {point.dimension}, "
                                    f"expected {dimension}")
        if point.array.is_floating_point():
            dtype = torch.promote_types(dtype, point.array.dtype)
        if not torch.isfinite(point.array).all():
            raise InvalidInputError(f"Point {point.id!r} has non-finite coordinates")
        if point.id in seen:
            raise InvalidInputError(f"Duplicate point id {point.id!r}")
        seen.add(point.id)

    return [p if p.array.dtype == dtype else Point(p.id, p.array.to(dtype), p.label)
            for p in points]


def check_cluster_count(n_clusters: int, name: str = 'initial_cluster_count') -> None:
    """Validate a configured cluster count.

    Unlike a classic k-means check, a count above the number of points is
    allowed: seeding then simply stops with one cluster per point.

    Raises:
        InvalidInputError: If invalid
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, int):
        raise TypeError(f"{name} must be int, got {type(n_clusters)}")

    if n_clusters <= 0:
        raise InvalidInputError(f"{name} must be positive, got {n_clusters}")


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> torch.Generator:
    """Create generator from random state.

    Args:
        random_state: Seed, generator, or None for a non-deterministic seed

    Returns:
        Generator
    """
    if random_state is None:
        generator = torch.Generator()
        generator.seed()
        return generator
    elif isinstance(random_state, bool):
        raise TypeError("random_state must be int or Generator, got bool")
    elif isinstance(random_state, int):
        generator = torch.Generator()
        generator.manual_seed(random_state)
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")
