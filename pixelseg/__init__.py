"""
pixelseg - Unsupervised pixel clustering for color image segmentation.

Partitions the pixels of an RGBA image with k-means, DBSCAN or mean shift
and scores the partition with silhouette, Davies-Bouldin and
Calinski-Harabasz statistics.

Example:
    >>> from pixelseg import ImageBuffer, cluster_kmeans, evaluate_segmentation
    >>>
    >>> buffer = ImageBuffer.from_array(image)  # (H, W, 3) uint8
    >>> result = cluster_kmeans(buffer, k=5)
    >>> record = evaluate_segmentation(buffer, result)
"""

from .common import ImageBuffer, InvalidParameter, ClusteringResult, NOISE_LABEL
from .kmeans import cluster_kmeans
from .dbscan import cluster_dbscan
from .mean_shift import cluster_mean_shift
from .metrics import (
    compute_silhouette,
    compute_davies_bouldin,
    compute_calinski_harabasz,
    evaluate_segmentation
)
from .pipeline import ClusteringMethod, SegmentationParameters, segment_image

__version__ = "0.1.0"

__all__ = [
    'ImageBuffer',
    'InvalidParameter',
    'ClusteringResult',
    'NOISE_LABEL',
    'cluster_kmeans',
    'cluster_dbscan',
    'cluster_mean_shift',
    'compute_silhouette',
    'compute_davies_bouldin',
    'compute_calinski_harabasz',
    'evaluate_segmentation',
    'ClusteringMethod',
    'SegmentationParameters',
    'segment_image',
]
