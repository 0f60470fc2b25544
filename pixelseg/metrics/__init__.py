"""
Cluster validity metrics for pixel partitions.

Example:
    >>> from pixelseg.kmeans import cluster_kmeans
    >>> from pixelseg.metrics import evaluate_segmentation
    >>>
    >>> result = cluster_kmeans(buffer, k=5)
    >>> record = evaluate_segmentation(buffer, result)
    >>> print(record.silhouette, record.davies_bouldin, record.calinski_harabasz)
"""

from .config import MetricsConfig
from .metrics import (
    MetricsRecord,
    metric_sample_indices,
    compute_silhouette,
    compute_davies_bouldin,
    compute_davies_bouldin_textbook,
    compute_calinski_harabasz,
    evaluate_segmentation,
)

__all__ = [
    'MetricsConfig',
    'MetricsRecord',
    'metric_sample_indices',
    'compute_silhouette',
    'compute_davies_bouldin',
    'compute_davies_bouldin_textbook',
    'compute_calinski_harabasz',
    'evaluate_segmentation',
]
