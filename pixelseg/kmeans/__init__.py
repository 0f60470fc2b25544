"""
K-Means clustering module for image segmentation.
"""

from .kmeans import (
    KMeansConfig,
    KMeansResult,
    KMeansClusterer,
    kmeans_plusplus_init,
    cluster_kmeans
)

__all__ = [
    'KMeansConfig',
    'KMeansResult',
    'KMeansClusterer',
    'kmeans_plusplus_init',
    'cluster_kmeans',
]
