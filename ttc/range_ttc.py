"""Time-to-collision from the closing rate of clustered range points."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

import numpy as np

from contracts import RangePoint
from log_config.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PERCENTILE = 0.1


class TTCStatus(str, Enum):
    OK = "OK"
    RECEDING = "RECEDING"
    STATIONARY = "STATIONARY"
    INDETERMINATE = "INDETERMINATE"


@dataclass(frozen=True)
class TTCResult:
    status: TTCStatus
    ttc_s: float
    prev_distance_m: Optional[float] = None
    curr_distance_m: Optional[float] = None
    closing_speed_mps: Optional[float] = None

    @property
    def is_valid(self) -> bool:
        return self.status is TTCStatus.OK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "ttc_s": self.ttc_s,
            "prev_distance_m": self.prev_distance_m,
            "curr_distance_m": self.curr_distance_m,
            "closing_speed_mps": self.closing_speed_mps,
        }


def near_edge_distance(points: Sequence[RangePoint], percentile: float = DEFAULT_PERCENTILE) -> float:
    """Forward distance at rank ``floor(percentile * n)`` of the x-sorted points."""
    xs = np.sort(np.fromiter((pt.x for pt in points), dtype=float, count=len(points)))
    return float(xs[int(math.floor(percentile * len(xs)))])


def compute_ttc_range(
    prev_points: Sequence[RangePoint],
    curr_points: Sequence[RangePoint],
    frame_rate_hz: float,
    percentile: float = DEFAULT_PERCENTILE,
    min_closing_m: float = 0.0,
) -> TTCResult:
    """Estimate TTC from two clusters of the same object at consecutive frames.

    Uses a low percentile of forward distance instead of the minimum so that
    isolated near-field returns do not dominate. Receding or constant distance
    gives an infinite TTC; empty clusters give NaN with INDETERMINATE status.

    Raises:
        ValueError: If frame_rate_hz is not a positive finite number or
            percentile is outside [0, 1)
    """
    if not math.isfinite(frame_rate_hz) or frame_rate_hz <= 0:
        raise ValueError(f"frame_rate_hz must be positive, got {frame_rate_hz}")
    if not 0.0 <= percentile < 1.0:
        raise ValueError(f"percentile must be in [0, 1), got {percentile}")

    if not prev_points or not curr_points:
        logger.debug(f"TTC indeterminate: {len(prev_points)} previous, {len(curr_points)} current points")
        return TTCResult(status=TTCStatus.INDETERMINATE, ttc_s=math.nan)

    prev_x = near_edge_distance(prev_points, percentile)
    curr_x = near_edge_distance(curr_points, percentile)
    delta_x = prev_x - curr_x
    delta_t = 1.0 / frame_rate_hz
    speed = delta_x / delta_t

    if abs(delta_x) <= min_closing_m:
        status = TTCStatus.STATIONARY
    elif delta_x < 0:
        status = TTCStatus.RECEDING
    else:
        ttc = curr_x / speed
        logger.debug(f"TTC {ttc:.3f}s (prev x={prev_x:.3f}m, curr x={curr_x:.3f}m, speed={speed:.3f}m/s)")
        return TTCResult(
            status=TTCStatus.OK,
            ttc_s=ttc,
            prev_distance_m=prev_x,
            curr_distance_m=curr_x,
            closing_speed_mps=speed,
        )

    logger.info(f"No collision course ({status.value}): prev x={prev_x:.3f}m, curr x={curr_x:.3f}m")
    return TTCResult(
        status=status,
        ttc_s=math.inf,
        prev_distance_m=prev_x,
        curr_distance_m=curr_x,
        closing_speed_mps=speed,
    )
