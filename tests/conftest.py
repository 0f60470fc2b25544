"""
Pytest configuration and shared fixtures.

Image fixtures are small synthetic buffers with known color structure.
"""

import numpy as np
import pytest

from pixelseg.common import ImageBuffer


def make_buffer(rgb: np.ndarray) -> ImageBuffer:
    """Wrap an (H, W, 3) uint8 array as an ImageBuffer."""
    return ImageBuffer.from_array(np.asarray(rgb, dtype=np.uint8))


@pytest.fixture
def uniform_gray():
    """10x10 image of (128, 128, 128)."""
    return make_buffer(np.full((10, 10, 3), 128))


@pytest.fixture
def all_red_2x2():
    """2x2 image where every pixel is pure red."""
    image = np.zeros((2, 2, 3), dtype=np.uint8)
    image[:, :, 0] = 255
    return make_buffer(image)


@pytest.fixture
def two_color_image():
    """20x20 image: left half black, right half white."""
    image = np.zeros((20, 20, 3), dtype=np.uint8)
    image[:, 10:] = 255
    return make_buffer(image)


@pytest.fixture
def noisy_three_color_image():
    """
    30x40 image with three horizontal bands (red, green, blue) plus small
    per-pixel noise.
    """
    rng = np.random.default_rng(7)
    image = np.zeros((30, 40, 3), dtype=np.float64)
    image[:10] = (220, 30, 30)
    image[10:20] = (30, 200, 40)
    image[20:] = (40, 40, 210)
    image += rng.normal(0, 4, size=image.shape)
    return make_buffer(np.clip(image, 0, 255).astype(np.uint8))


@pytest.fixture
def large_random_image():
    """120x100 image of uniform random colors (12,000 pixels)."""
    rng = np.random.default_rng(11)
    return make_buffer(rng.integers(0, 256, size=(100, 120, 3)))
