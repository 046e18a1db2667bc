"""Ready-made clustering front ends."""

from .kmeans import KMeansClustering
from .builder import ClusteringBuilder, create_kmeans

__all__ = [
    'KMeansClustering',
    'ClusteringBuilder',
    'create_kmeans'
]
