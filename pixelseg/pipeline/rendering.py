"""
Label visualization helpers.

Turn a label array into RGBA images: a palette-colored segmentation and
per-cluster masks over the original pixels.
"""

from dataclasses import dataclass
from typing import List, Tuple
import numpy as np

from ..common.base import ClusteringResult, MID_GRAY, NOISE_LABEL
from ..common.image_buffer import ImageBuffer
from ..common.palette import generate_cluster_colors, hue_color


MASK_BACKGROUND_ALPHA = 50
"""Alpha of non-member pixels in a cluster mask image."""

SUMMARY_SATURATION = 0.7
"""Saturation of the swatch color reported in a ClusterSummary."""


@dataclass
class ClusterSummary:
    """
    Per-cluster statistics of a segmentation.
    """
    cluster_id: int
    size: int
    """Number of pixels labeled with this cluster"""

    centroid: Tuple[float, float, float]
    color: Tuple[int, int, int]
    """Swatch color: hue cluster_id * 360 / distinct labels, 70% saturation"""


def render_segmentation(
    labels: np.ndarray,
    width: int,
    height: int,
    n_colors: int
) -> np.ndarray:
    """
    Paint every pixel with its cluster's palette color.

    Noise pixels are black. Labels beyond the palette wrap around.

    Args:
        labels: Full-image labels, shape (H*W,)
        width: Image width
        height: Image height
        n_colors: Palette size (at least 1 is used)

    Returns:
        image: uint8 RGBA array, shape (H, W, 4), alpha 255
    """
    labels = np.asarray(labels).reshape(-1)
    palette = generate_cluster_colors(max(n_colors, 1))

    rgba = np.zeros((len(labels), 4), dtype=np.uint8)
    rgba[:, 3] = 255

    assigned = labels >= 0
    rgba[assigned, :3] = palette[labels[assigned] % len(palette)]

    return rgba.reshape(height, width, 4)


def cluster_mask_image(
    buffer: ImageBuffer,
    labels: np.ndarray,
    cluster_id: int
) -> np.ndarray:
    """
    Show one cluster over a dimmed black background.

    Member pixels keep their original color at full opacity; all other
    pixels are black with alpha 50.

    Returns:
        image: uint8 RGBA array, shape (H, W, 4)
    """
    labels = np.asarray(labels).reshape(-1)
    source = buffer.data.reshape(-1, 4)
    members = labels == cluster_id

    rgba = np.zeros_like(source)
    rgba[:, 3] = MASK_BACKGROUND_ALPHA
    rgba[members, :3] = source[members, :3]
    rgba[members, 3] = 255

    return rgba.reshape(buffer.height, buffer.width, 4)


def summarize_clusters(result: ClusteringResult) -> List[ClusterSummary]:
    """
    Size, centroid and display color of each cluster present in the labels.

    Noise is skipped. Clusters are listed in ascending id order. Swatch hues
    are spread over the distinct labels, noise included.
    """
    ids, sizes = np.unique(result.labels, return_counts=True)
    n_labels = len(ids)

    summaries = []
    for cluster_id, size in zip(ids.tolist(), sizes.tolist()):
        if cluster_id == NOISE_LABEL:
            continue

        if cluster_id < result.n_clusters:
            centroid = tuple(float(v) for v in result.centroids[cluster_id])
        else:
            centroid = MID_GRAY

        swatch = hue_color(cluster_id, n_labels, saturation=SUMMARY_SATURATION)
        color = tuple(int(v) for v in swatch)
        summaries.append(ClusterSummary(
            cluster_id=cluster_id,
            size=size,
            centroid=centroid,
            color=color
        ))

    return summaries
