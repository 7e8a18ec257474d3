"""Projection of range points into image pixel coordinates."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from calib.calibration import CalibrationSet
from contracts import RangePoint
from exceptions import GeometryError

MIN_DEPTH = 1e-6


def project(point: RangePoint, calib: CalibrationSet) -> Tuple[float, float]:
    """Project a single range point to (u, v) pixels.

    Raises:
        GeometryError: If the point lies on or behind the image plane, or the
            result is not finite
    """
    X = np.array([point.x, point.y, point.z, 1.0], dtype=float)
    Y = calib.projection @ X
    depth = float(Y[2])
    if not np.isfinite(depth) or depth <= MIN_DEPTH:
        raise GeometryError(f"Point ({point.x:.2f}, {point.y:.2f}, {point.z:.2f}) is behind the camera", depth=depth)
    u = float(Y[0] / depth)
    v = float(Y[1] / depth)
    if not (np.isfinite(u) and np.isfinite(v)):
        raise GeometryError(f"Non-finite projection ({u}, {v})", depth=depth)
    return u, v


def project_points(xyz: np.ndarray, calib: CalibrationSet) -> Tuple[np.ndarray, np.ndarray]:
    """Project an Nx3 array of points.

    Returns:
        (uv, valid) where uv is Nx2 and valid marks rows with a finite pixel in
        front of the camera. Invalid rows of uv are NaN.
    """
    xyz = np.asarray(xyz, dtype=float).reshape(-1, 3)
    homogeneous = np.hstack([xyz, np.ones((xyz.shape[0], 1), dtype=float)])
    Y = homogeneous @ calib.projection.T
    depth = Y[:, 2]
    valid = np.isfinite(depth) & (depth > MIN_DEPTH)
    uv = np.full((xyz.shape[0], 2), np.nan, dtype=float)
    uv[valid] = Y[valid, :2] / depth[valid, None]
    valid &= np.all(np.isfinite(uv), axis=1)
    return uv, valid
