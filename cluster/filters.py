from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from contracts import RangePoint


@dataclass(frozen=True)
class CropConfig:
    """Forward corridor in front of the ego vehicle (meters)."""

    enabled: bool = True
    min_x: float = 2.0
    max_x: float = 20.0
    max_y: float = 2.0
    min_z: float = -1.5
    max_z: float = -0.9
    min_reflectivity: float = 0.1


def crop_range_points(points: Sequence[RangePoint], config: CropConfig) -> List[RangePoint]:
    if not config.enabled:
        return list(points)
    output = []
    for pt in points:
        if pt.x < config.min_x or pt.x > config.max_x:
            continue
        if abs(pt.y) > config.max_y:
            continue
        if pt.z < config.min_z or pt.z > config.max_z:
            continue
        if pt.reflectivity < config.min_reflectivity:
            continue
        output.append(pt)
    return output
