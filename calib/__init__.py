"""Calibration and projection module."""

from .calibration import CalibrationSet, calibration_from_dict, calibration_to_dict, load_calibration
from .projection import project, project_points

__all__ = [
    "CalibrationSet",
    "calibration_from_dict",
    "calibration_to_dict",
    "load_calibration",
    "project",
    "project_points",
]
