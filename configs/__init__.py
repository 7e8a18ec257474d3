"""Configuration loading and validation."""

from configs.settings import AppConfig, DEFAULT_CONFIG_PATH, config_from_dict, load_config
from configs.validator import CONFIG_SCHEMA, validate_config, validate_config_file

__all__ = [
    "AppConfig",
    "CONFIG_SCHEMA",
    "DEFAULT_CONFIG_PATH",
    "config_from_dict",
    "load_config",
    "validate_config",
    "validate_config_file",
]
