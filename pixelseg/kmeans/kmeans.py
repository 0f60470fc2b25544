"""
K-Means Clustering for Image Segmentation

k-means++ seeding followed by a short, bounded Lloyd iteration on a strided
pixel subset, restarted several times. The restart with the lowest inertia
labels the full image.

Objective Function: J(V) = Σ Σ ||xn - vl||²
"""

from dataclasses import dataclass
import logging
from typing import Optional, Tuple
import numpy as np

from ..common.base import BaseClusterer, ClusteringResult, cluster_means
from ..common.distance import nearest_centroid, pairwise_distances
from ..common.errors import InvalidParameter
from ..common.image_buffer import ImageBuffer
from ..common.sampling import (
    RandomStateLike,
    kmeans_stride,
    resolve_random_state,
    strided_sample_indices,
)


logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class KMeansConfig:
    """
    Configuration for K-means clustering.
    """
    n_clusters: int = 5
    """Number of clusters (k parameter). Must be in [1, total pixels]."""

    max_iter: int = 5
    """Maximum Lloyd iterations per restart."""

    n_init: int = 10
    """Number of times k-means runs with different centroid seeds.
    Best result (lowest inertia) is kept."""

    random_state: RandomStateLike = 42
    """Seed (re-applied on every call) or a shared RandomState."""

    def __post_init__(self):
        """Validate configuration parameters."""
        if not isinstance(self.n_clusters, (int, np.integer)):
            raise InvalidParameter(
                f"n_clusters must be an integer, got {type(self.n_clusters).__name__}"
            )
        if self.n_clusters < 1:
            raise InvalidParameter(f"n_clusters must be >= 1, got {self.n_clusters}")
        if self.max_iter < 1:
            raise InvalidParameter(f"max_iter must be >= 1, got {self.max_iter}")
        if self.n_init < 1:
            raise InvalidParameter(f"n_init must be >= 1, got {self.n_init}")


# ============================================================================
# Results
# ============================================================================

@dataclass
class KMeansResult(ClusteringResult):
    """
    Results from k-means clustering.
    """
    inertia: float = 0.0
    """Objective J(V) of the winning restart, measured on the training subset."""

    n_iter: int = 0
    """Lloyd iterations run by the winning restart."""


# ============================================================================
# Initialization
# ============================================================================

def kmeans_plusplus_init(
    pixels: np.ndarray,
    n_clusters: int,
    rng: np.random.RandomState
) -> np.ndarray:
    """
    Choose initial centroids with k-means++.

    The first centroid is a uniformly chosen pixel. Each following centroid
    is drawn with probability proportional to the squared distance to the
    nearest centroid chosen so far, by walking the cumulative weight sum.

    Args:
        pixels: Training colors, shape (N, 3)
        n_clusters: Number of centroids to choose
        rng: Random generator

    Returns:
        centroids: shape (n_clusters, 3)
    """
    n = len(pixels)
    centroids = np.empty((n_clusters, pixels.shape[1]), dtype=np.float64)

    first = int(np.floor(rng.random_sample() * n))
    centroids[0] = pixels[first]

    closest_sq = pairwise_distances(pixels, centroids[:1], squared=True)[:, 0]

    for i in range(1, n_clusters):
        cumulative = np.cumsum(closest_sq)
        target = rng.random_sample() * cumulative[-1]

        # First pixel whose running weight reaches the target
        idx = int(np.searchsorted(cumulative, target, side='left'))
        idx = min(idx, n - 1)
        centroids[i] = pixels[idx]

        new_sq = pairwise_distances(pixels, centroids[i:i + 1], squared=True)[:, 0]
        closest_sq = np.minimum(closest_sq, new_sq)

    return centroids


# ============================================================================
# Clusterer
# ============================================================================

class KMeansClusterer(BaseClusterer):
    """
    K-means clustering for image segmentation.

    The process:
    1. Take every 4th pixel (every 8th on images above 10,000 pixels)
    2. Seed centroids with k-means++
    3. Run up to max_iter Lloyd iterations, stopping when no label changes
    4. Repeat n_init times and keep the centroids with the lowest inertia
    5. Label every pixel of the image with its nearest centroid

    A centroid whose cluster loses all members keeps its previous value.

    Example:
        >>> config = KMeansConfig(n_clusters=5)
        >>> result = KMeansClusterer(config).fit_predict(buffer)
        >>> labels_2d = result.reshape_labels(buffer.shape)
        >>> print(f"Inertia: {result.inertia:.2f}")
    """

    def __init__(self, config: Optional[KMeansConfig] = None):
        """
        Initialize k-means clusterer.

        Args:
            config: Configuration parameters. If None, uses defaults.
        """
        super().__init__(config or KMeansConfig())

    def _lloyd(
        self,
        pixels: np.ndarray,
        centroids: np.ndarray
    ) -> Tuple[np.ndarray, float, int]:
        """
        Run one bounded Lloyd optimization.

        Labels start at 0, so a first pass that puts everything in cluster 0
        stops immediately. Inertia is taken from the last assignment pass.

        Returns:
            centroids: Final centroids, shape (k, 3)
            inertia: Sum of squared assignment distances
            n_iter: Iterations performed
        """
        k = len(centroids)
        labels = np.zeros(len(pixels), dtype=np.int64)
        inertia = 0.0
        n_iter = 0

        for _ in range(self.config.max_iter):
            n_iter += 1
            new_labels, sq_dists = nearest_centroid(pixels, centroids, squared=True)
            inertia = float(np.sum(sq_dists))

            changed = bool(np.any(new_labels != labels))
            labels = new_labels
            if not changed:
                break

            centroids = cluster_means(pixels, labels, k, previous=centroids)

        return centroids, inertia, n_iter

    def fit_predict(self, buffer: ImageBuffer) -> KMeansResult:
        """
        Fit k-means on a strided pixel subset and label the full image.

        Args:
            buffer: RGBA image buffer

        Returns:
            result: KMeansResult with full-image labels and best centroids

        Raises:
            InvalidParameter: If n_clusters exceeds the pixel count
        """
        if not isinstance(buffer, ImageBuffer):
            raise InvalidParameter(f"Expected an ImageBuffer, got {type(buffer).__name__}")

        k = self.config.n_clusters
        n_pixels = buffer.n_pixels
        if k > n_pixels:
            raise InvalidParameter(
                f"n_clusters must be <= number of pixels ({n_pixels}), got {k}"
            )

        rng = resolve_random_state(self.config.random_state)

        all_pixels = buffer.rgb()
        train = all_pixels[strided_sample_indices(n_pixels, kmeans_stride(n_pixels))]

        best_centroids = None
        best_inertia = np.inf
        best_n_iter = 0

        for run in range(self.config.n_init):
            initial = kmeans_plusplus_init(train, k, rng)
            centroids, inertia, n_iter = self._lloyd(train, initial)
            logger.debug("k-means restart %d: inertia=%.3f after %d iterations",
                         run, inertia, n_iter)

            if inertia < best_inertia or best_centroids is None:
                best_centroids = centroids
                best_inertia = inertia
                best_n_iter = n_iter

        labels, _ = nearest_centroid(all_pixels, best_centroids)

        return KMeansResult(
            labels=labels,
            centroids=best_centroids,
            inertia=best_inertia,
            n_iter=best_n_iter
        )


def cluster_kmeans(
    buffer: ImageBuffer,
    k: int,
    random_state: RandomStateLike = 42
) -> KMeansResult:
    """
    Partition an image into k color clusters.

    Args:
        buffer: RGBA image buffer
        k: Number of clusters, 1 <= k <= width * height
        random_state: Seed or shared generator

    Returns:
        result: Full-image labels and k centroids

    Raises:
        InvalidParameter: If the buffer or k is invalid
    """
    config = KMeansConfig(n_clusters=k, random_state=random_state)
    return KMeansClusterer(config).fit_predict(buffer)
