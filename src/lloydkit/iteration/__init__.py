"""Iteration history consumed by termination conditions and strategies."""

from .history import IterationInfo, IterationHistory

__all__ = [
    'IterationInfo',
    'IterationHistory'
]
