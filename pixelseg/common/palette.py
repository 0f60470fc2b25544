"""
Cluster palette generation.

Evenly spaced hues at fixed saturation and lightness, one color per cluster.
"""

import colorsys
import numpy as np


PALETTE_SATURATION = 0.8
PALETTE_LIGHTNESS = 0.6


def hue_color(
    index: int,
    n_colors: int,
    saturation: float = PALETTE_SATURATION,
    lightness: float = PALETTE_LIGHTNESS
) -> np.ndarray:
    """
    RGB color at hue index * 360 / n_colors degrees.

    Hues past 360 degrees wrap around.

    Returns:
        color: uint8 array of shape (3,)
    """
    rgb = colorsys.hls_to_rgb(index / n_colors, lightness, saturation)
    # Round half up, not to even
    return np.floor(np.asarray(rgb) * 255 + 0.5).astype(np.uint8)


def generate_cluster_colors(n_colors: int) -> np.ndarray:
    """
    Deterministic RGB palette for `n_colors` labeled clusters.

    Color i has hue i * 360 / n_colors degrees.

    Args:
        n_colors: Number of colors to produce

    Returns:
        colors: uint8 array of shape (n_colors, 3)

    Example:
        >>> generate_cluster_colors(2)
        array([[235,  71,  71],
               [ 71, 235, 235]], dtype=uint8)
    """
    colors = np.zeros((max(n_colors, 0), 3), dtype=np.uint8)

    for i in range(n_colors):
        colors[i] = hue_color(i, n_colors)

    return colors
