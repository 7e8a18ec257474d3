"""Assign range points to the detection regions their projections fall into."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from calib import CalibrationSet, project_points
from contracts import DetectionRegion, PixelRect, RangePoint
from log_config.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ClusterStats:
    total: int = 0
    assigned: int = 0
    outside: int = 0
    ambiguous: int = 0
    behind_camera: int = 0


def shrink_rect(rect: PixelRect, shrink_factor: float) -> PixelRect:
    """Shrink a rectangle symmetrically about its center.

    Width and height are scaled by ``1 - shrink_factor``; the origin moves
    inward by ``shrink_factor / 2`` of each dimension.
    """
    if not 0.0 <= shrink_factor < 1.0:
        raise ValueError(f"shrink_factor must be in [0, 1), got {shrink_factor}")
    return PixelRect(
        x=rect.x + shrink_factor * rect.width / 2.0,
        y=rect.y + shrink_factor * rect.height / 2.0,
        width=rect.width * (1.0 - shrink_factor),
        height=rect.height * (1.0 - shrink_factor),
    )


def cluster_range_points(
    regions: Sequence[DetectionRegion],
    points: Sequence[RangePoint],
    shrink_factor: float,
    calib: CalibrationSet,
) -> ClusterStats:
    """Populate each region's ``range_points``.

    Existing assignments are cleared first. A point is kept only when exactly
    one shrunk region contains its projection; points enclosed by no region or
    by several, and points that do not project in front of the camera, are
    dropped and counted.
    """
    shrunk: List[PixelRect] = [shrink_rect(region.rect, shrink_factor) for region in regions]
    for region in regions:
        region.range_points = []

    if not points:
        return ClusterStats()

    xyz = np.array([(pt.x, pt.y, pt.z) for pt in points], dtype=float)
    uv, valid = project_points(xyz, calib)

    assigned = outside = ambiguous = 0
    for pt, (u, v), ok in zip(points, uv, valid):
        if not ok:
            continue
        enclosing = [i for i, rect in enumerate(shrunk) if rect.contains(u, v)]
        if len(enclosing) == 1:
            regions[enclosing[0]].range_points.append(pt)
            assigned += 1
        elif enclosing:
            ambiguous += 1
        else:
            outside += 1

    stats = ClusterStats(
        total=len(points),
        assigned=assigned,
        outside=outside,
        ambiguous=ambiguous,
        behind_camera=int(len(points) - np.count_nonzero(valid)),
    )
    logger.debug(
        f"Clustered {stats.total} points into {len(regions)} regions: "
        f"{stats.assigned} assigned, {stats.outside} outside, "
        f"{stats.ambiguous} ambiguous, {stats.behind_camera} behind camera"
    )
    return stats
