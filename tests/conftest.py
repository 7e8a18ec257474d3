"""Shared fixtures: a simple pinhole rig looking along the range sensor's x axis."""

from __future__ import annotations

import numpy as np
import pytest

from calib import CalibrationSet
from contracts import RangePoint

FOCAL_PX = 100.0
CX = 50.0
CY = 50.0


@pytest.fixture
def pinhole_calib() -> CalibrationSet:
    P = [
        [FOCAL_PX, 0.0, CX, 0.0],
        [0.0, FOCAL_PX, CY, 0.0],
        [0.0, 0.0, 1.0, 0.0],
    ]
    # Sensor (x forward, y left, z up) -> camera (x right, y down, z forward)
    RT = [
        [0.0, -1.0, 0.0, 0.0],
        [0.0, 0.0, -1.0, 0.0],
        [1.0, 0.0, 0.0, 0.0],
    ]
    return CalibrationSet(P_rect=P, R_rect=np.eye(3), RT=RT)


@pytest.fixture
def point_at():
    """Build a range point at forward distance ``depth`` that projects to (u, v)."""

    def _make(u: float, v: float, depth: float = 10.0, reflectivity: float = 0.5) -> RangePoint:
        return RangePoint(
            x=depth,
            y=-(u - CX) * depth / FOCAL_PX,
            z=-(v - CY) * depth / FOCAL_PX,
            reflectivity=reflectivity,
        )

    return _make
