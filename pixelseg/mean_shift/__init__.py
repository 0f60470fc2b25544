"""
Mean shift clustering for image segmentation.
"""

from .mean_shift import MeanShiftConfig, MeanShiftClusterer, cluster_mean_shift

__all__ = ['MeanShiftConfig', 'MeanShiftClusterer', 'cluster_mean_shift']
