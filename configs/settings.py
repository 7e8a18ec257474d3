"""Configuration loading for the fusion TTC pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from calib import CalibrationSet, calibration_from_dict
from cluster import CropConfig
from configs.validator import validate_config
from exceptions import CalibrationError, ConfigError, InvalidConfigError
from log_config.logger import get_logger
from track import AssignmentPolicy

logger = get_logger(__name__)


@dataclass(frozen=True)
class ClusteringConfig:
    shrink_factor: float = 0.1


@dataclass(frozen=True)
class MatchingConfig:
    min_support: int = 1  # a match needs more votes than this
    assignment: AssignmentPolicy = AssignmentPolicy.PER_REGION


@dataclass(frozen=True)
class TTCConfig:
    frame_rate_hz: float = 10.0
    percentile: float = 0.1
    min_closing_m: float = 0.0


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_dir: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    calibration: CalibrationSet
    crop: CropConfig = field(default_factory=CropConfig)
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    ttc: TTCConfig = field(default_factory=TTCConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def config_from_dict(data: Dict[str, Any]) -> AppConfig:
    """Validate a configuration mapping and build an AppConfig.

    Raises:
        ConfigError: If configuration is invalid
    """
    validate_config(data)

    try:
        calibration = calibration_from_dict(data["calibration"])
    except CalibrationError as e:
        logger.error(f"Invalid calibration section: {e}")
        raise InvalidConfigError(f"Invalid calibration: {e}")

    try:
        matching_data = data["matching"]
        config = AppConfig(
            calibration=calibration,
            crop=CropConfig(**data["crop"]),
            clustering=ClusteringConfig(**data["clustering"]),
            matching=MatchingConfig(
                min_support=int(matching_data["min_support"]),
                assignment=AssignmentPolicy(matching_data["assignment"]),
            ),
            ttc=TTCConfig(**data["ttc"]),
            logging=LoggingConfig(**data["logging"]),
        )
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to construct configuration objects: {e}")
        raise InvalidConfigError(f"Failed to construct configuration: {e}")

    logger.info(
        f"Configuration loaded: shrink={config.clustering.shrink_factor}, "
        f"min_support={config.matching.min_support} ({config.matching.assignment.value}), "
        f"{config.ttc.frame_rate_hz}Hz"
    )
    return config


def load_config(path: Path) -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    logger.info(f"Loading configuration from {path}")
    if not path.exists():
        raise InvalidConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration: {e}")
        raise InvalidConfigError(f"Failed to parse configuration file: {e}")

    if not isinstance(data, dict):
        raise InvalidConfigError(f"Configuration file {path} does not contain a mapping")
    return config_from_dict(data)


DEFAULT_CONFIG_PATH = Path(__file__).with_name("default.yaml")

__all__ = [
    "AppConfig",
    "ClusteringConfig",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "LoggingConfig",
    "MatchingConfig",
    "TTCConfig",
    "config_from_dict",
    "load_config",
]
