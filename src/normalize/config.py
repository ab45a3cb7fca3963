"""
Configuration utilities for the record transform.

Provides configuration loading and validation for normalization and output.
"""

import logging
import yaml
from typing import Dict, Any
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/record_transform.yaml"


def load_normalization_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load transform configuration from YAML file.

    Values in the file are merged over the defaults, so a partial file
    only needs the settings it changes.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    defaults = get_default_normalization_config()

    try:
        config_file = Path(config_path)
        if not config_file.exists():
            logger.warning(f"Configuration file {config_path} not found, using defaults")
            return defaults

        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}

        merged = merge_configs(defaults, config)

        logger.info(f"Loaded transform configuration from {config_path}")
        return merged

    except Exception as e:
        logger.error(f"Failed to load configuration from {config_path}: {e}")
        return defaults


def get_default_normalization_config() -> Dict[str, Any]:
    """
    Get default transform configuration.

    Returns:
        Default configuration dictionary
    """
    return {
        "normalization": {
            "license": {
                "issuer_states": {}
            }
        },
        "output": {
            "indent": 2,
            "suffix": "_proposed"
        }
    }


def validate_normalization_config(config: Dict[str, Any]) -> bool:
    """
    Validate transform configuration.

    Args:
        config: Configuration dictionary

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ["normalization", "output"]

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.error(f"Missing required configuration section: {section}")
            return False

    # Validate license configuration
    license_config = config["normalization"].get("license", {})
    if not isinstance(license_config, dict):
        logger.error("normalization.license must be a mapping")
        return False

    issuer_states = license_config.get("issuer_states", {})
    if not isinstance(issuer_states, dict):
        logger.error("normalization.license.issuer_states must be a mapping")
        return False

    for issuer, code in issuer_states.items():
        if not isinstance(issuer, str) or not isinstance(code, str) or len(code) != 2:
            logger.error(f"normalization.license.issuer_states entry for '{issuer}' "
                         f"must map a name to a two-letter code")
            return False

    # Validate output configuration
    output_config = config["output"]
    indent = output_config.get("indent", 2)
    if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
        logger.error("output.indent must be a non-negative integer")
        return False

    if not isinstance(output_config.get("suffix", "_proposed"), str):
        logger.error("output.suffix must be a string")
        return False

    logger.info("Configuration validation passed")
    return True


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configuration dictionaries.

    Args:
        base_config: Base configuration
        override_config: Override configuration

    Returns:
        Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged
