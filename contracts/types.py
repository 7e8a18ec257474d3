"""Core data contracts for range points, detection regions, keypoints and frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class RangePoint:
    """3D range measurement in the ego frame (x forward, y left, z up; meters)."""

    x: float
    y: float
    z: float
    reflectivity: float = 0.0


@dataclass(frozen=True)
class PixelRect:
    """Axis-aligned image rectangle; containment is half-open like cv2.Rect."""

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def contains(self, u: float, v: float) -> bool:
        return self.x <= u < self.x + self.width and self.y <= v < self.y + self.height


@dataclass(frozen=True)
class Keypoint:
    u: float
    v: float
    size: float = 0.0


@dataclass(frozen=True)
class KeypointCorrespondence:
    prev_index: int
    curr_index: int
    distance: float = 0.0


@dataclass
class DetectionRegion:
    """Detector bounding box plus the range points assigned to it by clustering."""

    region_id: int
    rect: PixelRect
    class_id: Optional[int] = None
    confidence: Optional[float] = None
    range_points: List[RangePoint] = field(default_factory=list)


@dataclass
class Frame:
    frame_index: int
    keypoints: List[Keypoint] = field(default_factory=list)
    regions: List[DetectionRegion] = field(default_factory=list)
    range_points: List[RangePoint] = field(default_factory=list)

    def __post_init__(self) -> None:
        ids = [region.region_id for region in self.regions]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Frame {self.frame_index}: region ids must be unique, got {ids}")

    def region(self, region_id: int) -> Optional[DetectionRegion]:
        for region in self.regions:
            if region.region_id == region_id:
                return region
        return None


@dataclass(frozen=True)
class RegionMatch:
    """Previous-frame region id -> current-frame region id for confident matches."""

    pairs: Dict[int, int] = field(default_factory=dict)
    support: Dict[int, int] = field(default_factory=dict)
    discarded: int = 0

    def __len__(self) -> int:
        return len(self.pairs)

    def __contains__(self, prev_id: object) -> bool:
        return prev_id in self.pairs

    def __iter__(self) -> Iterator[int]:
        return iter(self.pairs)

    def get(self, prev_id: int) -> Optional[int]:
        return self.pairs.get(prev_id)

    def items(self):
        return self.pairs.items()
