"""
Cluster Validity Metrics

Internal quality scores for a pixel partition:
- Silhouette score, in [-1, 1], higher is better
- Davies-Bouldin index (simplified, fixed scatter), >= 0, lower is better
- Calinski-Harabasz index, >= 0, higher is better

None of these raise. Degenerate inputs (too few clusters, empty samples,
zero denominators, NaN) produce the fallback value from MetricsConfig and a
logged warning.

Pixel-based metrics score a strided sample of the image: every
n // min(max_samples, n)-th pixel, starting at pixel 0.
"""

from dataclasses import dataclass
import logging
from typing import Optional
import numpy as np
from sklearn.metrics import davies_bouldin_score

from ..common.base import ClusteringResult, NOISE_LABEL
from ..common.distance import pairwise_distances
from ..common.image_buffer import ImageBuffer
from .config import MetricsConfig


logger = logging.getLogger(__name__)

_RECOVERABLE = (ValueError, FloatingPointError, ZeroDivisionError)


# ============================================================================
# Results
# ============================================================================

@dataclass
class MetricsRecord:
    """
    Scores of one segmentation, already clamped to their valid ranges.
    """
    silhouette: float
    """Silhouette score in [-1, 1]"""

    davies_bouldin: float
    """Simplified Davies-Bouldin index, >= 0"""

    calinski_harabasz: float
    """Calinski-Harabasz index, >= 0"""

    n_segments: int
    """Number of clusters (centroids)"""

    average_segment_size: int
    """Pixels per segment, n_pixels // n_segments (0 without segments)"""

    def to_dict(self) -> dict:
        """Plain-dict view of the record."""
        return {
            "silhouette": self.silhouette,
            "davies_bouldin": self.davies_bouldin,
            "calinski_harabasz": self.calinski_harabasz,
            "n_segments": self.n_segments,
            "average_segment_size": self.average_segment_size,
        }


# ============================================================================
# Sampling helpers
# ============================================================================

def metric_sample_indices(n: int, max_samples: int) -> np.ndarray:
    """
    Strided pixel indices scored by the metrics.

    Args:
        n: Number of labeled pixels
        max_samples: Target sample size

    Returns:
        indices: 0, step, 2*step, ... with step = n // min(max_samples, n)
    """
    if n <= 0:
        return np.arange(0)
    step = max(1, n // min(max_samples, n))
    return np.arange(0, n, step)


def _sampled_pixels_and_labels(buffer: ImageBuffer, labels, max_samples: int):
    """Strided pixel colors and labels; raises ValueError on a length mismatch."""
    labels = np.asarray(labels).reshape(-1)
    if len(labels) != buffer.n_pixels:
        raise ValueError(
            f"Got {len(labels)} labels for {buffer.n_pixels} pixels"
        )

    idx = metric_sample_indices(len(labels), max_samples)
    return buffer.rgb()[idx], labels[idx].astype(np.int64)


def _finite_or_fallback(value: float, fallback: float, name: str) -> float:
    if np.isfinite(value):
        return float(value)
    logger.warning("%s evaluated to %s, using fallback %s", name, value, fallback)
    return fallback


# ============================================================================
# Silhouette
# ============================================================================

def compute_silhouette(
    buffer: ImageBuffer,
    labels: np.ndarray,
    config: Optional[MetricsConfig] = None
) -> float:
    """
    Mean silhouette over a strided pixel sample.

    For each sampled pixel:
        a = mean distance to the other sampled pixels of its cluster
        b = min over other labels of the mean distance to that label's pixels
        s = (b - a) / max(a, b), or 0 when a == 0

    Pixels alone in their cluster are not scored. Every distinct label,
    noise included, counts as a cluster.

    Args:
        buffer: Image the labels refer to
        labels: Full-image labels, shape (N,)
        config: Metrics configuration

    Returns:
        score: Mean silhouette, or 0.5 with fewer than 2 distinct labels or
               no scorable pixel
    """
    config = config or MetricsConfig()
    fallback = config.silhouette_fallback

    try:
        pixels, sampled = _sampled_pixels_and_labels(buffer, labels, config.max_samples)

        unique = np.unique(sampled)
        if len(unique) < 2:
            return fallback

        with np.errstate(divide='ignore', invalid='ignore'):
            dist = pairwise_distances(pixels, pixels)

            # membership[i, j]: pixel i carries label unique[j]
            membership = sampled[:, None] == unique[None, :]
            sums = dist @ membership.astype(np.float64)
            counts = membership.sum(axis=0)

            rows = np.arange(len(sampled))
            own = np.searchsorted(unique, sampled)
            own_counts = counts[own]
            scorable = own_counts > 1

            # Own distance sum includes the pixel itself at distance 0
            a = sums[rows, own] / (own_counts - 1)

            means = sums / counts[None, :]
            means[rows, own] = np.inf
            b = means.min(axis=1)

            s = np.where(a == 0, 0.0, (b - a) / np.maximum(a, b))

        if not np.any(scorable):
            return fallback

        score = float(np.mean(s[scorable]))
        return _finite_or_fallback(score, fallback, "Silhouette score")

    except _RECOVERABLE as exc:
        logger.warning("Silhouette score calculation failed: %s", exc)
        return fallback


# ============================================================================
# Davies-Bouldin
# ============================================================================

def compute_davies_bouldin(
    centroids: np.ndarray,
    config: Optional[MetricsConfig] = None
) -> float:
    """
    Simplified Davies-Bouldin index.

    Every cluster is given the same placeholder scatter (10 by default)
    instead of its true dispersion, so the index only reflects centroid
    separation:

        DB = (1/k) Σ_i max_{j≠i} (scatter_i + scatter_j) / d(c_i, c_j)

    Pairs of coincident centroids are skipped.

    Args:
        centroids: Cluster colors, shape (k, 3)
        config: Metrics configuration

    Returns:
        index: Simplified Davies-Bouldin index, or 1.0 with fewer than 2 centroids
    """
    config = config or MetricsConfig()
    fallback = config.davies_bouldin_fallback

    try:
        centroids = np.asarray(centroids, dtype=np.float64).reshape(-1, 3)
        k = len(centroids)
        if k < 2:
            return fallback

        dist = pairwise_distances(centroids, centroids)
        separated = dist > 0
        pair_scatter = 2.0 * config.placeholder_scatter

        with np.errstate(divide='ignore', invalid='ignore'):
            ratios = np.where(separated, pair_scatter / dist, 0.0)
        np.fill_diagonal(ratios, 0.0)

        index = float(np.mean(ratios.max(axis=1)))
        return _finite_or_fallback(index, fallback, "Davies-Bouldin index")

    except _RECOVERABLE as exc:
        logger.warning("Davies-Bouldin index calculation failed: %s", exc)
        return fallback


def compute_davies_bouldin_textbook(
    buffer: ImageBuffer,
    labels: np.ndarray,
    config: Optional[MetricsConfig] = None
) -> float:
    """
    Textbook Davies-Bouldin index on the strided pixel sample.

    Uses the true mean intra-cluster distance as scatter (scikit-learn's
    davies_bouldin_score). Noise pixels are left out.

    Args:
        buffer: Image the labels refer to
        labels: Full-image labels, shape (N,)
        config: Metrics configuration

    Returns:
        index: Davies-Bouldin index, or 1.0 when fewer than 2 clusters are sampled
    """
    config = config or MetricsConfig()
    fallback = config.davies_bouldin_fallback

    try:
        pixels, sampled = _sampled_pixels_and_labels(buffer, labels, config.max_samples)
        keep = sampled != NOISE_LABEL
        if len(np.unique(sampled[keep])) < 2:
            return fallback

        index = davies_bouldin_score(pixels[keep], sampled[keep])
        return _finite_or_fallback(index, fallback, "Davies-Bouldin index")

    except _RECOVERABLE as exc:
        logger.warning("Davies-Bouldin index calculation failed: %s", exc)
        return fallback


# ============================================================================
# Calinski-Harabasz
# ============================================================================

def compute_calinski_harabasz(
    buffer: ImageBuffer,
    centroids: np.ndarray,
    labels: np.ndarray,
    config: Optional[MetricsConfig] = None
) -> float:
    """
    Calinski-Harabasz index over a strided pixel sample.

        CH = (B / (k - 1)) / (W / (n - k))

    B sums size_i * d(c_i, grand_mean)² over clusters present in the sample,
    W sums d(pixel, c_label)² over sampled pixels with a valid label. The
    given centroids are used as cluster centers.

    Args:
        buffer: Image the labels refer to
        centroids: Cluster colors, shape (k, 3)
        labels: Full-image labels, shape (N,)
        config: Metrics configuration

    Returns:
        index: Calinski-Harabasz index, or 100 with fewer than 2 centroids,
               W == 0, or exactly as many sampled pixels as clusters.
               Fewer sampled pixels than clusters gives a negative value.
    """
    config = config or MetricsConfig()
    fallback = config.calinski_harabasz_fallback

    try:
        centroids = np.asarray(centroids, dtype=np.float64).reshape(-1, 3)
        k = len(centroids)
        if k < 2:
            return fallback

        pixels, sampled = _sampled_pixels_and_labels(buffer, labels, config.max_samples)
        n = len(pixels)
        if n == k:
            return fallback

        grand_mean = pixels.mean(axis=0)

        sizes = np.array([np.sum(sampled == i) for i in range(k)])
        centroid_sq = np.sum((centroids - grand_mean) ** 2, axis=1)
        between = float(np.sum(sizes * centroid_sq))

        valid = (sampled >= 0) & (sampled < k)
        residuals = pixels[valid] - centroids[sampled[valid]]
        within = float(np.sum(residuals ** 2))

        if within == 0:
            return fallback

        index = (between / (k - 1)) / (within / (n - k))
        return _finite_or_fallback(index, fallback, "Calinski-Harabasz index")

    except _RECOVERABLE as exc:
        logger.warning("Calinski-Harabasz index calculation failed: %s", exc)
        return fallback


# ============================================================================
# Combined evaluation
# ============================================================================

def evaluate_segmentation(
    buffer: ImageBuffer,
    result: ClusteringResult,
    config: Optional[MetricsConfig] = None
) -> MetricsRecord:
    """
    Score a clustering result and clamp each statistic to its range.

    Args:
        buffer: Image that was clustered
        result: Labels and centroids from any clustering engine
        config: Metrics configuration

    Returns:
        record: MetricsRecord with silhouette in [-1, 1] and both indices >= 0

    Example:
        >>> result = cluster_kmeans(buffer, k=4)
        >>> record = evaluate_segmentation(buffer, result)
        >>> print(f"Silhouette: {record.silhouette:.3f}")
    """
    config = config or MetricsConfig()

    silhouette = compute_silhouette(buffer, result.labels, config)
    davies_bouldin = compute_davies_bouldin(result.centroids, config)
    calinski_harabasz = compute_calinski_harabasz(
        buffer, result.centroids, result.labels, config
    )

    n_segments = result.n_clusters
    average_size = buffer.n_pixels // n_segments if n_segments else 0

    return MetricsRecord(
        silhouette=float(np.clip(silhouette, -1.0, 1.0)),
        davies_bouldin=max(0.0, davies_bouldin),
        calinski_harabasz=max(0.0, calinski_harabasz),
        n_segments=n_segments,
        average_segment_size=average_size
    )
