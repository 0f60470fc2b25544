"""
Metrics Configuration

Sampling limits and fallback values for the cluster validity statistics.
"""

from dataclasses import dataclass

from ..common.errors import InvalidParameter


@dataclass
class MetricsConfig:
    """
    Configuration for silhouette, Davies-Bouldin and Calinski-Harabasz scoring.

    Attributes:
        max_samples: Target number of pixels scored (strided sample)
        placeholder_scatter: Per-cluster scatter used by the simplified
            Davies-Bouldin index
        silhouette_fallback: Returned when the silhouette is undefined
        davies_bouldin_fallback: Returned when Davies-Bouldin is undefined
        calinski_harabasz_fallback: Returned when Calinski-Harabasz is undefined
    """
    max_samples: int = 1000
    """Pixels are scored with stride n // min(max_samples, n)"""

    placeholder_scatter: float = 10.0
    """Fixed scatter of every cluster in the simplified Davies-Bouldin index"""

    silhouette_fallback: float = 0.5
    davies_bouldin_fallback: float = 1.0
    calinski_harabasz_fallback: float = 100.0

    def __post_init__(self):
        """Validate configuration."""
        if self.max_samples <= 0:
            raise InvalidParameter(f"max_samples must be positive, got {self.max_samples}")
        if self.placeholder_scatter < 0:
            raise InvalidParameter(
                f"placeholder_scatter must be >= 0, got {self.placeholder_scatter}"
            )
