"""
Mean Shift Clustering for Image Segmentation

Mode seeking by repeated neighborhood averaging over a random pixel sample.
Only the first few samples are used as seeds and each seed moves at most a
few times, which keeps the cost bounded on any image. Every pixel of the
image is then labeled with its nearest mode.
"""

from dataclasses import dataclass
import logging
from typing import List, Optional
import numpy as np

from ..common.base import BaseClusterer, ClusteringResult, MID_GRAY
from ..common.distance import euclidean_distance, nearest_centroid, pairwise_distances
from ..common.errors import InvalidParameter
from ..common.image_buffer import ImageBuffer
from ..common.sampling import RandomStateLike, sample_pixel_indices


logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class MeanShiftConfig:
    """
    Configuration for mean shift mode seeking.
    """
    bandwidth: float = 1.0
    """Neighborhood size in slider units (UI range ~0.5-5.0)."""

    max_samples: int = 1000
    """Number of pixels sampled as the density estimate."""

    n_seeds: int = 50
    """Samples (taken in sample order) used as mode-search starting points."""

    max_iter: int = 3
    """Maximum shifts per seed."""

    shift_tolerance: float = 5.0
    """A seed stops once it moves less than this many color units."""

    radius_scale: float = 50.0
    """Neighborhood radius is bandwidth * radius_scale color units."""

    merge_scale: float = 30.0
    """Modes closer than bandwidth * merge_scale are duplicates."""

    random_state: RandomStateLike = 42
    """Seed (re-applied on every call) or a shared RandomState."""

    def __post_init__(self):
        """Validate configuration parameters."""
        if not self.bandwidth > 0:
            raise InvalidParameter(f"bandwidth must be > 0, got {self.bandwidth}")
        if self.max_samples < 1:
            raise InvalidParameter(f"max_samples must be >= 1, got {self.max_samples}")
        if self.n_seeds < 1:
            raise InvalidParameter(f"n_seeds must be >= 1, got {self.n_seeds}")
        if self.max_iter < 1:
            raise InvalidParameter(f"max_iter must be >= 1, got {self.max_iter}")

    @property
    def radius_sq(self) -> float:
        """Squared neighborhood radius in color units."""
        return (self.bandwidth * self.radius_scale) ** 2

    @property
    def merge_distance(self) -> float:
        """Distance under which a converged point duplicates an existing mode."""
        return self.bandwidth * self.merge_scale


# ============================================================================
# Clusterer
# ============================================================================

class MeanShiftClusterer(BaseClusterer):
    """
    Mean shift over a pixel sample with nearest-mode labeling.

    The process:
    1. Sample up to max_samples pixels
    2. Shift each of the first n_seeds samples toward the mean of its
       neighborhood, at most max_iter times
    3. Keep converged points that are not near an existing mode
    4. Label every pixel with its nearest mode

    At least one mode is always returned (mid-gray if nothing converged).

    Example:
        >>> result = MeanShiftClusterer(MeanShiftConfig(bandwidth=1.0)).fit_predict(buffer)
        >>> modes = result.centroids
    """

    def __init__(self, config: Optional[MeanShiftConfig] = None):
        super().__init__(config or MeanShiftConfig())

    def _shift(self, start: np.ndarray, sampled: np.ndarray) -> np.ndarray:
        """Move one seed toward its local density mode."""
        point = np.array(start, dtype=np.float64)

        for _ in range(self.config.max_iter):
            sq_dists = pairwise_distances(sampled, point[None, :], squared=True)[:, 0]
            neighborhood = sampled[sq_dists <= self.config.radius_sq]
            if len(neighborhood) == 0:
                break

            new_point = neighborhood.mean(axis=0)
            shift = euclidean_distance(new_point, point)
            point = new_point
            if shift < self.config.shift_tolerance:
                break

        return point

    def find_modes(self, sampled: np.ndarray) -> np.ndarray:
        """
        Seek and deduplicate density modes of a pixel sample.

        Args:
            sampled: Sample colors, shape (S, 3)

        Returns:
            modes: shape (M, 3), M >= 1
        """
        modes: List[np.ndarray] = []

        for seed in sampled[:self.config.n_seeds]:
            point = self._shift(seed, sampled)

            duplicate = any(
                euclidean_distance(mode, point) < self.config.merge_distance
                for mode in modes
            )
            if not duplicate:
                modes.append(point)

        if not modes:
            modes.append(np.array(MID_GRAY))

        return np.vstack(modes)

    def fit_predict(self, buffer: ImageBuffer) -> ClusteringResult:
        """
        Find modes on a pixel sample and label the full image.

        Args:
            buffer: RGBA image buffer

        Returns:
            result: Labels for every pixel and the mode list as centroids
        """
        if not isinstance(buffer, ImageBuffer):
            raise InvalidParameter(f"Expected an ImageBuffer, got {type(buffer).__name__}")

        all_pixels = buffer.rgb()
        sample_idx = sample_pixel_indices(
            buffer.n_pixels,
            min(self.config.max_samples, buffer.n_pixels),
            self.config.random_state
        )

        modes = self.find_modes(all_pixels[sample_idx])
        labels, _ = nearest_centroid(all_pixels, modes)

        logger.debug("Mean shift kept %d modes from %d seeds",
                     len(modes), min(self.config.n_seeds, len(sample_idx)))

        return ClusteringResult(labels=labels, centroids=modes)


def cluster_mean_shift(
    buffer: ImageBuffer,
    bandwidth: float,
    random_state: RandomStateLike = 42
) -> ClusteringResult:
    """
    Mode-seeking segmentation of an image.

    Args:
        buffer: RGBA image buffer
        bandwidth: Neighborhood size (> 0)
        random_state: Seed or shared generator

    Returns:
        result: Full-image labels and at least one mode

    Raises:
        InvalidParameter: If the buffer or bandwidth is invalid
    """
    config = MeanShiftConfig(bandwidth=bandwidth, random_state=random_state)
    return MeanShiftClusterer(config).fit_predict(buffer)
