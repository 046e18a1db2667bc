"""
Iteration bookkeeping for the refine loop.

Every iteration of a run leaves exactly one IterationInfo behind. The
history is what termination conditions and optimization policies look at
when deciding what to do next.
"""

from typing import Iterator, List, Optional
from dataclasses import dataclass
import time

from ..base.cluster_info import ClusterSetInfo


@dataclass(frozen=True)
class IterationInfo:
    """Snapshot of one iteration.

    Attributes:
        index: Iteration number, 0 for the seeding step
        cluster_set_info: Cluster statistics taken after classification
        strategy_applied: Whether pruning, splitting or optimization
            changed the cluster structure during this iteration
    """
    index: int
    cluster_set_info: ClusterSetInfo
    strategy_applied: bool = False


class IterationHistory:
    """Append-only, index-ordered log of IterationInfo records.

    Record ``i`` is stored at position ``i``. A history returned by
    ``extended`` shares the committed records of its parent and is read-only.
    """

    def __init__(self):
        self._infos: List[IterationInfo] = []
        # Views only see the first _size shared records plus their own pending one
        self._size = 0
        self._pending: Optional[IterationInfo] = None
        self._is_view = False
        self.started_at = time.monotonic()

    def record(self, info: IterationInfo) -> None:
        """Append the record of a new iteration.

        Raises:
            ValueError: If the index does not follow the most recent one,
                or if this history is a view made by ``extended``
        """
        if self._is_view:
            raise ValueError("Cannot record into an extended history view")
        self._check_next(info)
        self._infos.append(info)
        self._size += 1

    def extended(self, info: IterationInfo) -> 'IterationHistory':
        """A read-only view of this history with ``info`` appended; self is untouched.

        Lets policies look at the iteration in progress before it is
        committed. The committed records are shared, not copied.
        """
        self._check_next(info)
        view = IterationHistory()
        if self._pending is None:
            view._infos = self._infos
        else:
            view._infos = self._infos[:self._size] + [self._pending]
        view._size = len(self)
        view._pending = info
        view._is_view = True
        view.started_at = self.started_at
        return view

    def _check_next(self, info: IterationInfo) -> None:
        expected = len(self)
        if expected == 0 and info.index != 0:
            raise ValueError(f"History must start at iteration 0, got {info.index}")
        if info.index != expected:
            raise ValueError(f"Expected iteration {expected}, got {info.index}")

    def _get(self, index: int) -> Optional[IterationInfo]:
        if 0 <= index < self._size:
            return self._infos[index]
        if index == self._size:
            return self._pending
        return None

    @property
    def iteration_count(self) -> int:
        """Index of the most recent iteration (0 right after seeding)."""
        return max(len(self) - 1, 0)

    @property
    def most_recent_iteration_info(self) -> Optional[IterationInfo]:
        if not len(self):
            return None
        return self._get(len(self) - 1)

    @property
    def most_recent_cluster_set_info(self) -> Optional[ClusterSetInfo]:
        info = self.most_recent_iteration_info
        return info.cluster_set_info if info is not None else None

    @property
    def elapsed(self) -> float:
        """Seconds since the history was created."""
        return time.monotonic() - self.started_at

    def get(self, index: int) -> Optional[IterationInfo]:
        return self._get(index)

    def __getitem__(self, index: int) -> IterationInfo:
        info = self._get(index)
        if info is None:
            raise KeyError(index)
        return info

    def __len__(self) -> int:
        return self._size + (1 if self._pending is not None else 0)

    def __iter__(self) -> Iterator[IterationInfo]:
        for index in range(len(self)):
            yield self._get(index)

    def __repr__(self) -> str:
        return f"IterationHistory(iterations={len(self)})"
