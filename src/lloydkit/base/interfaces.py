"""
Core interfaces for the lloydkit clustering engine.

This module defines the abstract base classes the engine's pluggable parts
must implement: the distance function used to compare points with cluster
centers and the termination condition consulted after every iteration.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from torch import Tensor

if TYPE_CHECKING:
    from ..iteration.history import IterationHistory


class DistanceFunction(ABC):
    """Abstract base class for point-to-center distances.

    Implementations work on batches so the bulk-numeric helpers can
    compute a whole distance matrix in one call.
    """

    @abstractmethod
    def pairwise(self, points: Tensor, centers: Tensor) -> Tensor:
        """Compute distances between every point and every center.

        Args:
            points: (n, d) tensor of points
            centers: (k, d) tensor of cluster centers

        Returns:
            (n, k) tensor of non-negative distances
        """
        pass

    def __call__(self, a: Tensor, b: Tensor) -> float:
        """Distance between two single vectors."""
        return self.pairwise(a.unsqueeze(0), b.unsqueeze(0))[0, 0].item()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class TerminationCondition(ABC):
    """Abstract base class for loop termination predicates.

    A condition only reads the iteration history; it keeps no state of its
    own so the same instance can be shared between runs.
    """

    @abstractmethod
    def is_satisfied(self, history: 'IterationHistory') -> bool:
        """Check whether refinement may stop.

        Args:
            history: Iteration history of the current run

        Returns:
            True if the loop is allowed to stop, False otherwise
        """
        pass
