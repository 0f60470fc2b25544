"""
End-to-end segmentation: clustering, scoring and rendering.
"""

from .segmentation import (
    ClusteringMethod,
    SegmentationParameters,
    SegmentationOutput,
    create_clusterer,
    segment_image
)
from .rendering import (
    ClusterSummary,
    render_segmentation,
    cluster_mask_image,
    summarize_clusters
)

__all__ = [
    'ClusteringMethod',
    'SegmentationParameters',
    'SegmentationOutput',
    'create_clusterer',
    'segment_image',
    'ClusterSummary',
    'render_segmentation',
    'cluster_mask_image',
    'summarize_clusters',
]
