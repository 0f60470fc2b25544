"""
Tests for the image buffer, distance helpers, sampler and palette.
"""

import numpy as np
import pytest

from pixelseg.common import (
    ImageBuffer,
    InvalidParameter,
    deterministic_sample,
    euclidean_distance,
    generate_cluster_colors,
    hue_color,
    kmeans_stride,
    nearest_centroid,
    pairwise_distances,
    sample_pixel_indices,
    squared_euclidean_distance,
    strided_sample_indices,
)


# ------------------------------------------------------------------
# ImageBuffer
# ------------------------------------------------------------------


def test_from_rgb_array_adds_opaque_alpha():
    image = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)
    buffer = ImageBuffer.from_array(image)

    assert buffer.width == 3
    assert buffer.height == 2
    assert buffer.n_pixels == 6
    assert buffer.shape == (2, 3)
    assert len(buffer.data) == 6 * 4
    assert np.all(buffer.to_array()[:, :, 3] == 255)


def test_rgb_drops_alpha():
    image = np.zeros((1, 2, 4), dtype=np.uint8)
    image[0, 0] = (10, 20, 30, 0)
    image[0, 1] = (40, 50, 60, 128)
    buffer = ImageBuffer.from_array(image)

    pixels = buffer.rgb()
    assert pixels.shape == (2, 3)
    assert pixels.dtype == np.float64
    np.testing.assert_array_equal(pixels, [[10, 20, 30], [40, 50, 60]])


def test_buffer_length_mismatch_rejected():
    with pytest.raises(InvalidParameter):
        ImageBuffer(width=2, height=2, data=np.zeros(15, dtype=np.uint8))


@pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 2)])
def test_non_positive_dimensions_rejected(width, height):
    with pytest.raises(InvalidParameter):
        ImageBuffer(width=width, height=height, data=np.zeros(0, dtype=np.uint8))


def test_from_array_rejects_grayscale():
    with pytest.raises(InvalidParameter):
        ImageBuffer.from_array(np.zeros((4, 4), dtype=np.uint8))


@pytest.mark.parametrize("image", [
    np.full((1, 2, 3), 300),
    np.full((1, 2, 3), -1),
    np.full((1, 2, 3), 12.5),
    np.full((1, 2, 3), np.nan),
])
def test_from_array_rejects_out_of_range_values(image):
    with pytest.raises(InvalidParameter):
        ImageBuffer.from_array(image)


def test_whole_float_values_accepted():
    buffer = ImageBuffer.from_array(np.full((1, 2, 3), 255.0))
    assert buffer.data.dtype == np.uint8
    assert np.all(buffer.data == 255)


def test_raw_data_out_of_range_rejected():
    data = np.full(2 * 2 * 4, 256, dtype=np.int64)
    with pytest.raises(InvalidParameter):
        ImageBuffer(width=2, height=2, data=data)


@pytest.mark.parametrize("width,height", [(2.0, 2), (2, 2.5), (True, 4)])
def test_non_integer_dimensions_rejected(width, height):
    with pytest.raises(InvalidParameter):
        ImageBuffer(width=width, height=height, data=np.zeros(16, dtype=np.uint8))


def test_invalid_parameter_is_value_error():
    assert issubclass(InvalidParameter, ValueError)


# ------------------------------------------------------------------
# Distances
# ------------------------------------------------------------------


def test_euclidean_distances():
    assert euclidean_distance([0, 0, 0], [3, 4, 0]) == pytest.approx(5.0)
    assert squared_euclidean_distance([0, 0, 0], [3, 4, 0]) == pytest.approx(25.0)


def test_pairwise_distances_shape_and_values():
    a = np.array([[0, 0, 0], [255, 255, 255]])
    b = np.array([[0, 0, 0]])
    dist = pairwise_distances(a, b)
    assert dist.shape == (2, 1)
    assert dist[0, 0] == 0
    assert dist[1, 0] == pytest.approx(np.sqrt(3) * 255)

    sq = pairwise_distances(a, b, squared=True)
    assert sq[1, 0] == pytest.approx(3 * 255 ** 2)


def test_nearest_centroid_ties_go_to_lowest_id():
    pixels = np.array([[0.0, 0.0, 0.0]])
    centroids = np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]])
    labels, dists = nearest_centroid(pixels, centroids)
    assert labels[0] == 0
    assert dists[0] == pytest.approx(1.0)


def test_nearest_centroid_assigns_each_pixel():
    pixels = np.array([[0, 0, 0], [250, 250, 250], [10, 0, 0]], dtype=np.float64)
    centroids = np.array([[255, 255, 255], [0, 0, 0]], dtype=np.float64)
    labels, _ = nearest_centroid(pixels, centroids)
    np.testing.assert_array_equal(labels, [1, 0, 1])


# ------------------------------------------------------------------
# Sampling
# ------------------------------------------------------------------


def test_deterministic_sample_without_replacement():
    sample = deterministic_sample(np.arange(100), 30, random_state=0)
    assert len(sample) == 30
    assert len(set(sample.tolist())) == 30
    assert all(0 <= s < 100 for s in sample)


def test_deterministic_sample_reproducible_for_seed():
    first = deterministic_sample(np.arange(500), 50, random_state=42)
    second = deterministic_sample(np.arange(500), 50, random_state=42)
    np.testing.assert_array_equal(first, second)


def test_shared_generator_advances_between_calls():
    rng = np.random.RandomState(42)
    first = deterministic_sample(np.arange(100), 10, random_state=rng)
    second = deterministic_sample(np.arange(100), 10, random_state=rng)
    assert not np.array_equal(first, second)


def test_sample_size_capped_at_candidates():
    sample = sample_pixel_indices(5, 2000, random_state=1)
    assert sorted(sample.tolist()) == [0, 1, 2, 3, 4]


def test_kmeans_stride_threshold():
    assert kmeans_stride(100) == 4
    assert kmeans_stride(10000) == 4
    assert kmeans_stride(10001) == 8


def test_strided_sample_indices():
    np.testing.assert_array_equal(strided_sample_indices(10, 4), [0, 4, 8])
    with pytest.raises(ValueError):
        strided_sample_indices(10, 0)


# ------------------------------------------------------------------
# Palette
# ------------------------------------------------------------------


def test_palette_known_colors():
    colors = generate_cluster_colors(2)
    assert colors.dtype == np.uint8
    np.testing.assert_array_equal(colors, [[235, 71, 71], [71, 235, 235]])


def test_palette_sizes():
    assert generate_cluster_colors(0).shape == (0, 3)
    colors = generate_cluster_colors(6)
    assert colors.shape == (6, 3)
    assert len({tuple(c) for c in colors.tolist()}) == 6


def test_palette_is_deterministic():
    np.testing.assert_array_equal(generate_cluster_colors(7), generate_cluster_colors(7))


def test_hue_color_saturation_and_wraparound():
    np.testing.assert_array_equal(hue_color(0, 3, saturation=0.7), [224, 82, 82])
    # Hue 360 degrees is red again
    np.testing.assert_array_equal(hue_color(2, 2, saturation=0.7), [224, 82, 82])
    np.testing.assert_array_equal(hue_color(1, 2), generate_cluster_colors(2)[1])
