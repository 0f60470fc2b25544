"""
Color-space distance helpers.

All distances are Euclidean over 3-channel color vectors. Matrix versions
go through scipy's cdist, which evaluates every pair directly instead of
using the dot-product expansion.
"""

from typing import Tuple
import numpy as np
from scipy.spatial.distance import cdist


ASSIGN_CHUNK_SIZE = 65536
"""Pixels processed per block when labeling a full image."""


def euclidean_distance(p: np.ndarray, q: np.ndarray) -> float:
    """Euclidean distance between two color vectors."""
    diff = np.asarray(p, dtype=np.float64) - np.asarray(q, dtype=np.float64)
    return float(np.sqrt(np.sum(diff ** 2)))


def squared_euclidean_distance(p: np.ndarray, q: np.ndarray) -> float:
    """Squared Euclidean distance between two color vectors."""
    diff = np.asarray(p, dtype=np.float64) - np.asarray(q, dtype=np.float64)
    return float(np.sum(diff ** 2))


def pairwise_distances(
    a: np.ndarray,
    b: np.ndarray,
    squared: bool = False
) -> np.ndarray:
    """
    Distance matrix between two sets of color vectors.

    Args:
        a: Colors, shape (N, 3)
        b: Colors, shape (M, 3)
        squared: Return squared distances instead

    Returns:
        distances: Matrix of shape (N, M)
    """
    metric = 'sqeuclidean' if squared else 'euclidean'
    return cdist(
        np.asarray(a, dtype=np.float64),
        np.asarray(b, dtype=np.float64),
        metric=metric
    )


def nearest_centroid(
    pixels: np.ndarray,
    centroids: np.ndarray,
    squared: bool = False
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Assign each pixel to its closest centroid.

    Ties go to the lowest centroid id. Pixels are processed in blocks so
    that a large image never materializes the whole (N, K) matrix.

    Args:
        pixels: Colors, shape (N, 3)
        centroids: Cluster centers, shape (K, 3), K >= 1
        squared: Report squared distances instead

    Returns:
        labels: Closest centroid id per pixel, shape (N,)
        distances: Distance to that centroid, shape (N,)
    """
    n = len(pixels)
    labels = np.empty(n, dtype=np.int64)
    distances = np.empty(n, dtype=np.float64)

    for start in range(0, n, ASSIGN_CHUNK_SIZE):
        stop = min(start + ASSIGN_CHUNK_SIZE, n)
        block = pairwise_distances(pixels[start:stop], centroids, squared=squared)
        # argmin returns the first minimum
        block_labels = np.argmin(block, axis=1)
        labels[start:stop] = block_labels
        distances[start:stop] = block[np.arange(stop - start), block_labels]

    return labels, distances
