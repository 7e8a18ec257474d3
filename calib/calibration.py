"""Camera/range-sensor calibration set and its loaders."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

import numpy as np
import yaml

from exceptions import InvalidCalibrationError
from log_config.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class CalibrationSet:
    """Rectified projection P (3x4), rectification R (4x4) and extrinsic RT (4x4).

    A range point X in homogeneous sensor coordinates maps to image
    coordinates through ``P @ R @ RT @ X``.
    """

    P_rect: np.ndarray
    R_rect: np.ndarray
    RT: np.ndarray
    projection: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        P = _as_matrix("P_rect", self.P_rect, {(3, 4)})
        R = _to_homogeneous("R_rect", _as_matrix("R_rect", self.R_rect, {(3, 3), (4, 4)}))
        RT = _to_homogeneous("RT", _as_matrix("RT", self.RT, {(3, 4), (4, 4)}))
        object.__setattr__(self, "P_rect", P)
        object.__setattr__(self, "R_rect", R)
        object.__setattr__(self, "RT", RT)
        object.__setattr__(self, "projection", P @ R @ RT)
        for matrix in (self.P_rect, self.R_rect, self.RT, self.projection):
            matrix.setflags(write=False)


def _as_matrix(name: str, value: Any, shapes: set) -> np.ndarray:
    try:
        matrix = np.array(value, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidCalibrationError(f"{name}: not a numeric matrix ({e})")
    if matrix.ndim == 1 and matrix.size in {rows * cols for rows, cols in shapes}:
        # Flat row-major lists as stored in KITTI calibration files
        for rows, cols in sorted(shapes):
            if rows * cols == matrix.size:
                matrix = matrix.reshape(rows, cols)
                break
    if matrix.shape not in shapes:
        expected = " or ".join(f"{r}x{c}" for r, c in sorted(shapes))
        raise InvalidCalibrationError(f"{name}: expected {expected}, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise InvalidCalibrationError(f"{name}: contains non-finite values")
    return matrix


def _to_homogeneous(name: str, matrix: np.ndarray) -> np.ndarray:
    if matrix.shape == (4, 4):
        return matrix
    out = np.eye(4, dtype=float)
    out[: matrix.shape[0], : matrix.shape[1]] = matrix
    logger.debug(f"{name}: padded {matrix.shape[0]}x{matrix.shape[1]} matrix to 4x4")
    return out


def calibration_from_dict(data: Mapping[str, Any]) -> CalibrationSet:
    """Build a CalibrationSet from a mapping with ``P_rect``, ``R_rect`` and ``RT``."""
    missing = [key for key in ("P_rect", "R_rect", "RT") if key not in data]
    if missing:
        raise InvalidCalibrationError(f"Calibration missing keys: {', '.join(missing)}")
    return CalibrationSet(P_rect=data["P_rect"], R_rect=data["R_rect"], RT=data["RT"])


def calibration_to_dict(calib: CalibrationSet) -> Dict[str, list]:
    return {
        "P_rect": calib.P_rect.tolist(),
        "R_rect": calib.R_rect.tolist(),
        "RT": calib.RT.tolist(),
    }


def load_calibration(path: Path) -> CalibrationSet:
    """Load a calibration set from a YAML file.

    The file either holds the three matrices at top level or under a
    ``calibration`` key (the application config layout).

    Raises:
        InvalidCalibrationError: If the file is missing, unparsable or malformed
    """
    if not path.exists():
        raise InvalidCalibrationError(f"Calibration file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse calibration file {path}: {e}")
        raise InvalidCalibrationError(f"Failed to parse calibration file: {e}")
    if not isinstance(data, dict):
        raise InvalidCalibrationError(f"Calibration file {path} does not contain a mapping")
    calib = calibration_from_dict(data.get("calibration", data))
    logger.info(f"Calibration loaded from {path}")
    return calib
