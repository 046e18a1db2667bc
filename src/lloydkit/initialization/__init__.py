"""Seeding strategies for the initial cluster set."""

from .kmeans_plusplus import KMeansPlusPlusSeeder

__all__ = [
    'KMeansPlusPlusSeeder'
]
