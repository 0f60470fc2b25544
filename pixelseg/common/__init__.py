"""
Shared building blocks: image buffer, errors, distances, sampling, palette.
"""

from .errors import InvalidParameter
from .image_buffer import ImageBuffer
from .base import (
    NOISE_LABEL,
    MID_GRAY,
    ClusteringResult,
    BaseClusterer,
    cluster_means
)
from .distance import (
    euclidean_distance,
    squared_euclidean_distance,
    pairwise_distances,
    nearest_centroid
)
from .sampling import (
    resolve_random_state,
    deterministic_sample,
    sample_pixel_indices,
    kmeans_stride,
    strided_sample_indices
)
from .palette import generate_cluster_colors, hue_color

__all__ = [
    'InvalidParameter',
    'ImageBuffer',
    'NOISE_LABEL',
    'MID_GRAY',
    'ClusteringResult',
    'BaseClusterer',
    'cluster_means',
    'euclidean_distance',
    'squared_euclidean_distance',
    'pairwise_distances',
    'nearest_centroid',
    'resolve_random_state',
    'deterministic_sample',
    'sample_pixel_indices',
    'kmeans_stride',
    'strided_sample_indices',
    'generate_cluster_colors',
    'hue_color',
]
