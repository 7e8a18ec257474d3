"""Configuration validation using JSON Schema."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict

import jsonschema
import yaml
from jsonschema import Draft7Validator, validators

from exceptions import ConfigValidationError
from log_config.logger import get_logger

logger = get_logger(__name__)

_MATRIX = {
    "type": "array",
    "items": {
        "anyOf": [
            {"type": "number"},
            {"type": "array", "items": {"type": "number"}, "minItems": 3, "maxItems": 4},
        ]
    },
    "minItems": 3,
}

# JSON Schema for default.yaml configuration
CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["calibration"],
    "properties": {
        "calibration": {
            "type": "object",
            "required": ["P_rect", "R_rect", "RT"],
            "properties": {
                "P_rect": _MATRIX,
                "R_rect": _MATRIX,
                "RT": _MATRIX,
            },
        },
        "crop": {
            "type": "object",
            "default": {},
            "properties": {
                "enabled": {"type": "boolean", "default": True},
                "min_x": {"type": "number", "default": 2.0},
                "max_x": {"type": "number", "minimum": 0.0, "default": 20.0},
                "max_y": {"type": "number", "minimum": 0.0, "default": 2.0},
                "min_z": {"type": "number", "default": -1.5},
                "max_z": {"type": "number", "default": -0.9},
                "min_reflectivity": {"type": "number", "minimum": 0.0, "default": 0.1},
            },
        },
        "clustering": {
            "type": "object",
            "default": {},
            "properties": {
                "shrink_factor": {
                    "type": "number",
                    "minimum": 0.0,
                    "exclusiveMaximum": 1.0,
                    "default": 0.1,
                },
            },
        },
        "matching": {
            "type": "object",
            "default": {},
            "properties": {
                "min_support": {"type": "integer", "minimum": 0, "default": 1},
                "assignment": {
                    "type": "string",
                    "enum": ["per_region", "exclusive"],
                    "default": "per_region",
                },
            },
        },
        "ttc": {
            "type": "object",
            "default": {},
            "properties": {
                "frame_rate_hz": {"type": "number", "exclusiveMinimum": 0.0, "default": 10.0},
                "percentile": {
                    "type": "number",
                    "minimum": 0.0,
                    "exclusiveMaximum": 1.0,
                    "default": 0.1,
                },
                "min_closing_m": {"type": "number", "minimum": 0.0, "default": 0.0},
            },
        },
        "logging": {
            "type": "object",
            "default": {},
            "properties": {
                "level": {
                    "type": "string",
                    "enum": ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
                    "default": "INFO",
                },
                "log_dir": {"type": ["string", "null"], "default": None},
            },
        },
    },
}


def extend_with_default(validator_class):
    """Extend JSON Schema validator to set default values."""
    validate_properties = validator_class.VALIDATORS["properties"]

    def set_defaults(validator, properties, instance, schema):
        for prop, subschema in properties.items():
            if "default" in subschema and isinstance(instance, dict):
                instance.setdefault(prop, copy.deepcopy(subschema["default"]))

        for error in validate_properties(validator, properties, instance, schema):
            yield error

    return validators.extend(validator_class, {"properties": set_defaults})


DefaultValidatingValidator = extend_with_default(Draft7Validator)


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration against JSON Schema, filling in defaults.

    Args:
        config: Configuration dictionary (modified in place)

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ConfigValidationError("Configuration root must be a mapping")
    try:
        validator = DefaultValidatingValidator(CONFIG_SCHEMA)
        errors = list(validator.iter_errors(config))

        if errors:
            error_messages = []
            for error in errors:
                path = " -> ".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")

            logger.error(f"Configuration validation failed with {len(errors)} errors")
            for msg in error_messages:
                logger.error(f"  - {msg}")

            raise ConfigValidationError(
                f"Configuration validation failed with {len(errors)} error(s). See logs for details.",
                validation_errors=error_messages,
            )

        logger.debug("Configuration validation passed")

    except jsonschema.exceptions.SchemaError as e:
        logger.error(f"Invalid schema: {e}")
        raise ConfigValidationError(f"Invalid schema definition: {e}")


def validate_config_file(config_path: str) -> None:
    """Validate a YAML configuration file.

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigValidationError(f"Configuration file not found: {config_path}")

    try:
        config = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ConfigValidationError(f"Failed to parse configuration file: {e}")

    validate_config(config)


__all__ = ["validate_config", "validate_config_file", "CONFIG_SCHEMA"]
