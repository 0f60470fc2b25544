"""
Clustering result container and engine interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple
import numpy as np

from .image_buffer import ImageBuffer


NOISE_LABEL = -1
"""Label of pixels that belong to no cluster (DBSCAN only)."""

MID_GRAY = (128.0, 128.0, 128.0)
"""Fallback color for clusters without members and for empty mode sets."""


# ============================================================================
# Results
# ============================================================================

@dataclass
class ClusteringResult:
    """
    Full-image partition produced by a clustering engine.
    """
    labels: np.ndarray
    """Cluster id per pixel (or NOISE_LABEL). Shape: (H*W,)"""

    centroids: np.ndarray
    """Color of each cluster, row i is cluster i. Shape: (n_clusters, 3)"""

    @property
    def n_clusters(self) -> int:
        """Number of clusters (rows of the centroid list)."""
        return len(self.centroids)

    @property
    def n_noise(self) -> int:
        """Number of pixels labeled as noise."""
        return int(np.sum(self.labels == NOISE_LABEL))

    def reshape_labels(self, shape: Tuple[int, int]) -> np.ndarray:
        """
        Reshape flat labels to 2D image shape.

        Args:
            shape: (H, W) image dimensions

        Returns:
            labels_2d: (H, W) cluster labels
        """
        return self.labels.reshape(shape)


# ============================================================================
# Abstract Base Class (Interface)
# ============================================================================

class BaseClusterer(ABC):
    """
    Abstract base class for pixel clustering engines.

    Implementations:
    - KMeansClusterer: k-means++ seeded Lloyd iteration with restarts
    - DBSCANClusterer: sampled density-based region growing
    - MeanShiftClusterer: sampled mode seeking

    All implementations:
    1. Validate parameters when their config is built
    2. Validate the buffer before any computation
    3. Return a ClusteringResult covering every pixel of the image
    """

    def __init__(self, config):
        """
        Initialize clusterer.

        Args:
            config: Engine-specific configuration
        """
        self.config = config

    @abstractmethod
    def fit_predict(self, buffer: ImageBuffer) -> ClusteringResult:
        """
        Cluster the pixels of an image.

        Args:
            buffer: RGBA image buffer

        Returns:
            result: Full-image labels and centroids

        Raises:
            InvalidParameter: If the buffer or parameters are malformed
        """
        pass


def cluster_means(
    pixels: np.ndarray,
    labels: np.ndarray,
    n_clusters: int,
    previous: np.ndarray
) -> np.ndarray:
    """
    Mean color of each cluster.

    Builds a new centroid array; a cluster with no members takes its row
    from `previous`.

    Args:
        pixels: Colors, shape (N, 3)
        labels: Cluster id per pixel, shape (N,)
        n_clusters: Number of clusters
        previous: Fallback rows, shape (n_clusters, 3)

    Returns:
        centroids: shape (n_clusters, 3)
    """
    centroids = np.array(previous, dtype=np.float64, copy=True)

    for k in range(n_clusters):
        members = pixels[labels == k]
        if len(members) > 0:
            centroids[k] = members.mean(axis=0)

    return centroids
