"""Custom exception classes for the fusion TTC core."""

from __future__ import annotations

from typing import Optional


class FusionTTCError(Exception):
    """Base exception for all fusion TTC errors."""

    pass


class GeometryError(FusionTTCError):
    """Raised when a range point cannot be projected to a usable pixel."""

    def __init__(self, message: str, depth: Optional[float] = None):
        self.depth = depth
        super().__init__(message)


class CalibrationError(FusionTTCError):
    """Base exception for calibration-related errors."""

    pass


class InvalidCalibrationError(CalibrationError):
    """Raised when calibration matrices are missing, malformed or non-finite."""

    pass


class AssociationError(FusionTTCError):
    """Base exception for region association errors."""

    pass


class InvalidCorrespondenceError(AssociationError):
    """Raised when a correspondence references a keypoint that does not exist."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class ConfigError(FusionTTCError):
    """Base exception for configuration errors."""

    pass


class InvalidConfigError(ConfigError):
    """Raised when configuration file is invalid or corrupted."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration fails schema validation."""

    def __init__(self, message: str, validation_errors: Optional[list] = None):
        self.validation_errors = validation_errors or []
        super().__init__(message)
