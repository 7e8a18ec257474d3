"""Shared data contracts for range/camera fusion."""

from .cv_adapters import correspondences_from_cv, keypoints_from_cv, region_from_xywh
from .types import (
    DetectionRegion,
    Frame,
    Keypoint,
    KeypointCorrespondence,
    PixelRect,
    RangePoint,
    RegionMatch,
)

__all__ = [
    "DetectionRegion",
    "Frame",
    "Keypoint",
    "KeypointCorrespondence",
    "PixelRect",
    "RangePoint",
    "RegionMatch",
    "correspondences_from_cv",
    "keypoints_from_cv",
    "region_from_xywh",
]
