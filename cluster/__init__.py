"""Range point filtering and region clustering."""

from .filters import CropConfig, crop_range_points
from .region_clusterer import ClusterStats, cluster_range_points, shrink_rect

__all__ = ["ClusterStats", "CropConfig", "cluster_range_points", "crop_range_points", "shrink_rect"]
