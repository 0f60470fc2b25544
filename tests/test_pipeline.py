"""
Tests for the segmentation pipeline and rendering helpers.
"""

import numpy as np
import pytest

from pixelseg.common import NOISE_LABEL, ClusteringResult, InvalidParameter, ImageBuffer
from pixelseg.common.palette import generate_cluster_colors
from pixelseg.dbscan import DBSCANClusterer
from pixelseg.kmeans import KMeansClusterer
from pixelseg.mean_shift import MeanShiftClusterer
from pixelseg.pipeline import (
    ClusteringMethod,
    SegmentationParameters,
    cluster_mask_image,
    create_clusterer,
    render_segmentation,
    segment_image,
    summarize_clusters,
)


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------


@pytest.mark.parametrize("method,expected", [
    ("kmeans", KMeansClusterer),
    ("dbscan", DBSCANClusterer),
    ("meanshift", MeanShiftClusterer),
    (ClusteringMethod.MEAN_SHIFT, MeanShiftClusterer),
])
def test_create_clusterer(method, expected):
    assert isinstance(create_clusterer(method), expected)


def test_create_clusterer_passes_parameters():
    params = SegmentationParameters(n_clusters=7, random_state=3)
    clusterer = create_clusterer(ClusteringMethod.KMEANS, params)
    assert clusterer.config.n_clusters == 7
    assert clusterer.config.random_state == 3


def test_unknown_method_rejected(uniform_gray):
    with pytest.raises(InvalidParameter):
        segment_image(uniform_gray, "spectral")


def test_invalid_parameters_surface(uniform_gray):
    with pytest.raises(InvalidParameter):
        segment_image(uniform_gray, "kmeans", SegmentationParameters(n_clusters=0))
    with pytest.raises(InvalidParameter):
        segment_image(uniform_gray, "meanshift", SegmentationParameters(bandwidth=0))


# ------------------------------------------------------------------
# segment_image
# ------------------------------------------------------------------


@pytest.mark.parametrize("method", list(ClusteringMethod))
def test_segment_image_outputs(noisy_three_color_image, method):
    output = segment_image(noisy_three_color_image, method)

    assert output.method == method
    assert output.segmented.shape == (30, 40, 4)
    assert np.all(output.segmented[:, :, 3] == 255)
    assert len(output.result.labels) == noisy_three_color_image.n_pixels
    assert output.metrics.n_segments == output.result.n_clusters
    assert sum(c.size for c in output.clusters) == (
        noisy_three_color_image.n_pixels - output.result.n_noise
    )


def test_segment_image_is_reproducible(noisy_three_color_image):
    params = SegmentationParameters(n_clusters=3)
    first = segment_image(noisy_three_color_image, "kmeans", params)
    second = segment_image(noisy_three_color_image, "kmeans", params)

    np.testing.assert_array_equal(first.result.labels, second.result.labels)
    assert first.metrics == second.metrics


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------


def test_render_segmentation_noise_is_black():
    labels = np.array([0, NOISE_LABEL, 1, 0])
    image = render_segmentation(labels, width=2, height=2, n_colors=2)
    palette = generate_cluster_colors(2)

    assert image.shape == (2, 2, 4)
    np.testing.assert_array_equal(image[0, 0, :3], palette[0])
    np.testing.assert_array_equal(image[0, 1], [0, 0, 0, 255])
    np.testing.assert_array_equal(image[1, 0, :3], palette[1])


def test_render_segmentation_without_clusters():
    labels = np.full(4, NOISE_LABEL)
    image = render_segmentation(labels, width=2, height=2, n_colors=0)
    assert np.all(image[:, :, :3] == 0)


def test_cluster_mask_image():
    image = np.array([[[10, 20, 30], [40, 50, 60]]], dtype=np.uint8)
    buffer = ImageBuffer.from_array(image)
    mask = cluster_mask_image(buffer, np.array([0, 1]), cluster_id=1)

    np.testing.assert_array_equal(mask[0, 0], [0, 0, 0, 50])
    np.testing.assert_array_equal(mask[0, 1], [40, 50, 60, 255])


def test_summarize_clusters_skips_noise():
    result = ClusteringResult(
        labels=np.array([0, 0, NOISE_LABEL, 1, 1, 1]),
        centroids=np.array([[1, 2, 3], [4, 5, 6]], dtype=np.float64)
    )
    summaries = summarize_clusters(result)

    assert [s.cluster_id for s in summaries] == [0, 1]
    assert [s.size for s in summaries] == [2, 3]
    assert summaries[1].centroid == (4.0, 5.0, 6.0)
    # Three distinct labels with noise: hues 0 and 120 degrees at 70% saturation
    assert summaries[0].color == (224, 82, 82)
    assert summaries[1].color == (82, 224, 82)
