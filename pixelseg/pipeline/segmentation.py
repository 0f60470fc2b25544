"""
Segmentation Pipeline

Runs the selected clustering engine on an image, scores the partition and
prepares the outputs a presentation layer needs: a rendered segmentation,
per-cluster summaries and the metrics record.
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import List, Optional, Union
import numpy as np

from ..common.base import BaseClusterer, ClusteringResult
from ..common.errors import InvalidParameter
from ..common.image_buffer import ImageBuffer
from ..common.sampling import RandomStateLike
from ..dbscan import DBSCANClusterer, DBSCANConfig
from ..kmeans import KMeansClusterer, KMeansConfig
from ..mean_shift import MeanShiftClusterer, MeanShiftConfig
from ..metrics import MetricsConfig, MetricsRecord, evaluate_segmentation
from .rendering import ClusterSummary, render_segmentation, summarize_clusters


logger = logging.getLogger(__name__)


# ============================================================================
# Enums
# ============================================================================

class ClusteringMethod(Enum):
    """Available clustering algorithms."""
    KMEANS = "kmeans"
    DBSCAN = "dbscan"
    MEAN_SHIFT = "meanshift"


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class SegmentationParameters:
    """
    Parameters collected for a segmentation run.

    Only the fields of the selected method are used.
    """
    n_clusters: int = 5
    """K-means: number of clusters (UI range 2-20)."""

    bandwidth: float = 1.0
    """Mean shift: bandwidth (UI range 0.5-5.0)."""

    epsilon: float = 0.5
    """DBSCAN: neighborhood radius (UI range 0.1-2.0)."""

    min_samples: int = 5
    """DBSCAN: core point threshold (UI range 1-20)."""

    random_state: RandomStateLike = 42
    """Seed shared by sampling and k-means++ initialization."""

    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    """Metrics sampling and fallbacks."""


# ============================================================================
# Results
# ============================================================================

@dataclass
class SegmentationOutput:
    """
    Everything produced by one segmentation run.
    """
    method: ClusteringMethod
    result: ClusteringResult
    metrics: MetricsRecord
    clusters: List[ClusterSummary]
    segmented: np.ndarray
    """Palette-colored RGBA image, shape (H, W, 4)"""


# ============================================================================
# Factory Function
# ============================================================================

def create_clusterer(
    method: Union[ClusteringMethod, str],
    parameters: Optional[SegmentationParameters] = None
) -> BaseClusterer:
    """
    Build the clustering engine for a method.

    Args:
        method: ClusteringMethod or its value ("kmeans", "dbscan", "meanshift")
        parameters: Run parameters. If None, uses defaults.

    Returns:
        clusterer: Configured engine

    Raises:
        InvalidParameter: If the method is unknown or a parameter is invalid

    Example:
        >>> clusterer = create_clusterer("dbscan", SegmentationParameters(epsilon=0.8))
        >>> result = clusterer.fit_predict(buffer)
    """
    parameters = parameters or SegmentationParameters()

    try:
        method = ClusteringMethod(method)
    except ValueError:
        raise InvalidParameter(f"Unknown clustering method: {method!r}") from None

    if method == ClusteringMethod.KMEANS:
        return KMeansClusterer(KMeansConfig(
            n_clusters=parameters.n_clusters,
            random_state=parameters.random_state
        ))
    elif method == ClusteringMethod.DBSCAN:
        return DBSCANClusterer(DBSCANConfig(
            epsilon=parameters.epsilon,
            min_samples=parameters.min_samples,
            random_state=parameters.random_state
        ))
    elif method == ClusteringMethod.MEAN_SHIFT:
        return MeanShiftClusterer(MeanShiftConfig(
            bandwidth=parameters.bandwidth,
            random_state=parameters.random_state
        ))
    else:
        raise InvalidParameter(f"Unknown clustering method: {method}")


# ============================================================================
# Pipeline
# ============================================================================

def segment_image(
    buffer: ImageBuffer,
    method: Union[ClusteringMethod, str],
    parameters: Optional[SegmentationParameters] = None
) -> SegmentationOutput:
    """
    Cluster an image, score it and render the result.

    Args:
        buffer: RGBA image buffer
        method: Clustering algorithm
        parameters: Run parameters. If None, uses defaults.

    Returns:
        output: SegmentationOutput with labels, centroids, metrics, cluster
                summaries and the rendered segmentation

    Raises:
        InvalidParameter: If the buffer, method or parameters are invalid.
                          Metrics never raise.

    Example:
        >>> output = segment_image(buffer, ClusteringMethod.KMEANS,
        ...                        SegmentationParameters(n_clusters=4))
        >>> output.metrics.n_segments
        4
    """
    parameters = parameters or SegmentationParameters()
    clusterer = create_clusterer(method, parameters)
    method = ClusteringMethod(method)

    result = clusterer.fit_predict(buffer)
    metrics = evaluate_segmentation(buffer, result, parameters.metrics)

    segmented = render_segmentation(
        result.labels, buffer.width, buffer.height, result.n_clusters
    )
    clusters = summarize_clusters(result)

    logger.info(
        "Segmented %dx%d image with %s: %d clusters, silhouette=%.3f",
        buffer.width, buffer.height, method.value,
        result.n_clusters, metrics.silhouette
    )

    return SegmentationOutput(
        method=method,
        result=result,
        metrics=metrics,
        clusters=clusters,
        segmented=segmented
    )
