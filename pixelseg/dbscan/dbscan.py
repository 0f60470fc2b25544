"""
Sampled DBSCAN for Image Segmentation

Density-based region growing over a random pixel sample, followed by a
full-image backfill: every pixel joins the nearest sample-derived centroid
if it lies within epsilon of it, and is noise otherwise.

The backfill does not re-run density reachability on the full image. A
pixel reachable through dense regions but far from its cluster's mean color
ends up as noise.
"""

from collections import deque
from dataclasses import dataclass
import logging
from typing import Optional
import numpy as np

from ..common.base import BaseClusterer, ClusteringResult, MID_GRAY, NOISE_LABEL
from ..common.distance import nearest_centroid, pairwise_distances
from ..common.errors import InvalidParameter
from ..common.image_buffer import ImageBuffer
from ..common.sampling import RandomStateLike, sample_pixel_indices


logger = logging.getLogger(__name__)

UNVISITED = -2
"""Region-growing state of a sample not yet examined. Never returned."""


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class DBSCANConfig:
    """
    Configuration for sampled DBSCAN.

    Attributes:
        epsilon: Neighborhood radius in slider units (UI range ~0.1-2.0)
        min_samples: Neighbors (excluding the point itself) needed for a core point
        max_samples: Number of pixels sampled for region growing
        epsilon_scale: Color-distance units per epsilon unit
        random_state: Seed (re-applied on every call) or a shared RandomState
    """
    epsilon: float = 0.5
    min_samples: int = 5
    max_samples: int = 2000
    epsilon_scale: float = 100.0
    random_state: RandomStateLike = 42

    def __post_init__(self):
        """Validate configuration parameters."""
        if not self.epsilon > 0:
            raise InvalidParameter(f"epsilon must be > 0, got {self.epsilon}")
        if not self.min_samples > 0:
            raise InvalidParameter(f"min_samples must be > 0, got {self.min_samples}")
        if self.max_samples < 1:
            raise InvalidParameter(f"max_samples must be >= 1, got {self.max_samples}")
        if not self.epsilon_scale > 0:
            raise InvalidParameter(f"epsilon_scale must be > 0, got {self.epsilon_scale}")

    @property
    def epsilon_scaled(self) -> float:
        """Epsilon in color-distance units (0-441 range)."""
        return self.epsilon * self.epsilon_scale


# ============================================================================
# Region growing
# ============================================================================

def grow_regions(neighbors: list, min_samples: int) -> np.ndarray:
    """
    Classic DBSCAN labeling from precomputed neighbor lists.

    Points with fewer than min_samples neighbors are provisionally noise.
    A core point starts a new cluster that grows breadth-first; noise points
    reached from a core point are reclaimed as border points but not
    expanded.

    Args:
        neighbors: neighbors[i] is the array of point ids within epsilon of i
        min_samples: Core point threshold

    Returns:
        labels: Cluster id or NOISE_LABEL per point
    """
    n = len(neighbors)
    labels = np.full(n, UNVISITED, dtype=np.int64)
    cluster_id = 0

    for i in range(n):
        if labels[i] != UNVISITED:
            continue
        if len(neighbors[i]) < min_samples:
            labels[i] = NOISE_LABEL
            continue

        labels[i] = cluster_id
        queue = deque(neighbors[i])
        queued = set(neighbors[i].tolist())

        while queue:
            idx = queue.popleft()
            if labels[idx] == NOISE_LABEL:
                labels[idx] = cluster_id
            if labels[idx] != UNVISITED:
                continue

            labels[idx] = cluster_id
            if len(neighbors[idx]) >= min_samples:
                for nb in neighbors[idx].tolist():
                    if nb not in queued:
                        queued.add(nb)
                        queue.append(nb)

        cluster_id += 1

    return labels


# ============================================================================
# Clusterer
# ============================================================================

class DBSCANClusterer(BaseClusterer):
    """
    DBSCAN over a pixel sample with epsilon-gated full-image backfill.

    Example:
        >>> config = DBSCANConfig(epsilon=0.5, min_samples=5)
        >>> result = DBSCANClusterer(config).fit_predict(buffer)
        >>> print(f"{result.n_clusters} clusters, {result.n_noise} noise pixels")
    """

    def __init__(self, config: Optional[DBSCANConfig] = None):
        super().__init__(config or DBSCANConfig())

    def fit_predict(self, buffer: ImageBuffer) -> ClusteringResult:
        """
        Cluster a pixel sample and backfill the full image.

        Args:
            buffer: RGBA image buffer

        Returns:
            result: Labels (cluster id or NOISE_LABEL) and one centroid per
                    discovered cluster. No clusters means an empty (0, 3)
                    centroid array and all-noise labels.
        """
        if not isinstance(buffer, ImageBuffer):
            raise InvalidParameter(f"Expected an ImageBuffer, got {type(buffer).__name__}")

        eps = self.config.epsilon_scaled
        all_pixels = buffer.rgb()

        sample_idx = sample_pixel_indices(
            buffer.n_pixels,
            min(self.config.max_samples, buffer.n_pixels),
            self.config.random_state
        )
        sampled = all_pixels[sample_idx]

        # Brute-force neighbor queries, a point is not its own neighbor
        within = pairwise_distances(sampled, sampled) <= eps
        np.fill_diagonal(within, False)
        neighbors = [np.flatnonzero(row) for row in within]

        sample_labels = grow_regions(neighbors, self.config.min_samples)
        n_clusters = int(sample_labels.max()) + 1

        centroids = np.empty((n_clusters, 3), dtype=np.float64)
        for c in range(n_clusters):
            members = sampled[sample_labels == c]
            centroids[c] = members.mean(axis=0) if len(members) else MID_GRAY

        if n_clusters == 0:
            labels = np.full(buffer.n_pixels, NOISE_LABEL, dtype=np.int64)
        else:
            labels, dists = nearest_centroid(all_pixels, centroids)
            labels[dists > eps] = NOISE_LABEL

        logger.debug("DBSCAN found %d clusters in %d samples (%d sample noise)",
                     n_clusters, len(sampled),
                     int(np.sum(sample_labels == NOISE_LABEL)))

        return ClusteringResult(labels=labels, centroids=centroids)


def cluster_dbscan(
    buffer: ImageBuffer,
    epsilon: float,
    min_samples: int,
    random_state: RandomStateLike = 42
) -> ClusteringResult:
    """
    Density-based segmentation of an image.

    Args:
        buffer: RGBA image buffer
        epsilon: Neighborhood radius (> 0), scaled by 100 into color units
        min_samples: Core point threshold (> 0)
        random_state: Seed or shared generator

    Returns:
        result: Full-image labels and per-cluster centroids

    Raises:
        InvalidParameter: If the buffer, epsilon or min_samples is invalid
    """
    config = DBSCANConfig(
        epsilon=epsilon,
        min_samples=min_samples,
        random_state=random_state
    )
    return DBSCANClusterer(config).fit_predict(buffer)
