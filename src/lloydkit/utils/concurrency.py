"""
Worker pool helpers for the bulk-numeric steps.

The engine owns one executor for its whole lifetime; these helpers only
fan work out over it and block until every task has finished.
"""

from typing import Callable, List, Optional, TypeVar
from concurrent.futures import Executor, ThreadPoolExecutor
import os

T = TypeVar('T')


def default_worker_count() -> int:
    """Number of workers used when none is requested."""
    return max(1, os.cpu_count() or 1)


def new_executor(n_workers: Optional[int] = None) -> ThreadPoolExecutor:
    """Create the worker pool an engine keeps for its lifetime.

    Args:
        n_workers: Pool size (None for one worker per CPU)

    Returns:
        A thread pool; torch releases the GIL inside its kernels
    """
    if n_workers is None:
        n_workers = default_worker_count()
    if n_workers < 1:
        raise ValueError(f"n_workers must be positive, got {n_workers}")
    return ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix='lloydkit')


def map_chunks(executor: Optional[Executor],
               task: Callable[[int, int], T],
               n_items: int,
               chunk_size: int) -> List[T]:
    """Run ``task(start, stop)`` over consecutive index ranges.

    Results come back in range order. Without an executor the chunks run
    inline on the calling thread.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    bounds = [(start, min(start + chunk_size, n_items))
              for start in range(0, n_items, chunk_size)]
    if executor is None or len(bounds) <= 1:
        return [task(start, stop) for start, stop in bounds]
    futures = [executor.submit(task, start, stop) for start, stop in bounds]
    return [future.result() for future in futures]


def map_items(executor: Optional[Executor],
              task: Callable[..., T],
              items: List) -> List[T]:
    """Run ``task(item)`` for every item and wait for all of them."""
    if executor is None or len(items) <= 1:
        return [task(item) for item in items]
    futures = [executor.submit(task, item) for item in items]
    return [future.result() for future in futures]
