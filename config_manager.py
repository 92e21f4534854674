"""
Configuration management module for the finance ledger.

Loads config.yaml and fills in defaults for every section the application
reads (database location, logging, password hashing, display).
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from exceptions import ConfigError

logger = logging.getLogger(__name__)

# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    'database': {
        'data_dir': 'data',
        'path': 'ledger.db',
    },
    'logging': {
        'level': 'WARNING',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file': None,
    },
    'security': {
        'pbkdf2_iterations': 390000,
    },
    'display': {
        'currency_symbol': '$',
        'table_format': 'simple',
    },
}

CONFIG_FILE = 'config.yaml'


def _merge_defaults(config: Dict[str, Any], defaults: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill missing keys from defaults, one level of nesting deep.

    An empty section (`logging:` with nothing under it) keeps its defaults.

    Raises:
        ConfigError: If a known section is not a mapping
    """
    merged = copy.deepcopy(defaults)
    for key, value in config.items():
        if isinstance(merged.get(key), dict):
            if value is None:
                continue
            if not isinstance(value, dict):
                raise ConfigError(
                    f"Config section '{key}' must be a mapping",
                    details={"section": key, "value": value}
                )
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    A missing file is not an error: the defaults are returned.

    Args:
        config_path: Path to the YAML file (defaults to config.yaml)

    Returns:
        Configuration dictionary with defaults for missing values

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    config_path = Path(config_path or CONFIG_FILE)
    if not config_path.exists():
        logger.info(f"Config file {config_path} not found; using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading configuration: {e}", exc_info=True)
        raise ConfigError(
            "Unable to read configuration file",
            details={"config_path": str(config_path)},
            original_error=e
        ) from e

    if not isinstance(config, dict):
        raise ConfigError(
            "Configuration file must contain a mapping",
            details={"config_path": str(config_path)}
        )

    logger.info("Configuration loaded successfully")
    return _merge_defaults(config, DEFAULT_CONFIG)


def save_config(config: Dict[str, Any], config_path: Optional[Path] = None) -> bool:
    """
    Save configuration to a YAML file, keeping settings already in the file.

    Args:
        config: Configuration dictionary to save
        config_path: Destination path (defaults to config.yaml)

    Returns:
        True if successful, False otherwise
    """
    config_path = Path(config_path or CONFIG_FILE)
    try:
        existing_config = {}
        if config_path.exists():
            with open(config_path, 'r') as f:
                existing_config = yaml.safe_load(f) or {}

        existing_config.update(config)

        with open(config_path, 'w') as f:
            yaml.safe_dump(existing_config, f, default_flow_style=False)

        logger.info("Configuration saved successfully")
        return True

    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error saving configuration: {e}", exc_info=True)
        return False
