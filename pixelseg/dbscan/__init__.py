"""
Sampled DBSCAN clustering for image segmentation.
"""

from .dbscan import (
    UNVISITED,
    DBSCANConfig,
    DBSCANClusterer,
    grow_regions,
    cluster_dbscan
)

__all__ = ['UNVISITED', 'DBSCANConfig', 'DBSCANClusterer', 'grow_regions', 'cluster_dbscan']
