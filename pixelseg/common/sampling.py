"""
Deterministic pixel sampling.

Clustering engines train on a subset of pixels to bound their cost on large
images. K-Means takes every n-th pixel; DBSCAN and mean shift draw a
without-replacement random subset from a seeded generator.
"""

from typing import Union
import numpy as np
from sklearn.utils import check_random_state


RandomStateLike = Union[None, int, np.random.RandomState]

LARGE_IMAGE_PIXELS = 10000
"""Images with more pixels than this use the wide k-means stride."""

LARGE_IMAGE_STRIDE = 8
SMALL_IMAGE_STRIDE = 4


def resolve_random_state(random_state: RandomStateLike) -> np.random.RandomState:
    """
    Turn a seed into a generator.

    An int always produces a freshly seeded generator, so every call that
    passes the same seed sees the same stream. A RandomState instance is
    returned as-is and keeps advancing across calls.
    """
    return check_random_state(random_state)


def deterministic_sample(
    candidates: np.ndarray,
    size: int,
    random_state: RandomStateLike = None
) -> np.ndarray:
    """
    Draw `size` entries of `candidates` without replacement.

    Shuffle-and-slice: the order of the result is the generator's
    permutation order, so it is reproducible for a given generator state.

    Args:
        candidates: 1D array of candidate values (e.g. pixel indices)
        size: Number of entries to draw, capped at len(candidates)
        random_state: Seed or generator

    Returns:
        sample: 1D array of `min(size, len(candidates))` distinct entries
    """
    candidates = np.asarray(candidates)
    size = max(0, min(int(size), len(candidates)))
    rng = resolve_random_state(random_state)

    order = rng.permutation(len(candidates))
    return candidates[order[:size]]


def sample_pixel_indices(
    n_pixels: int,
    size: int,
    random_state: RandomStateLike = None
) -> np.ndarray:
    """Random without-replacement subset of the indices 0..n_pixels-1."""
    return deterministic_sample(np.arange(n_pixels), size, random_state)


def kmeans_stride(n_pixels: int) -> int:
    """Sampling stride for k-means training: 8 on large images, else 4."""
    if n_pixels > LARGE_IMAGE_PIXELS:
        return LARGE_IMAGE_STRIDE
    return SMALL_IMAGE_STRIDE


def strided_sample_indices(n_pixels: int, stride: int) -> np.ndarray:
    """Indices 0, stride, 2*stride, ... below n_pixels."""
    if stride < 1:
        raise ValueError(f"stride must be >= 1, got {stride}")
    return np.arange(0, n_pixels, stride)
