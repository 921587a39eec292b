# file: safecookie/config.py
"""
Configuration loading for safecookie.
"""

import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml

from .crypto_errors import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "default_config.yaml")

CIPHERS = ("aes_gcm", "chacha20_poly1305")
BINDINGS = ("full", "name")
PAYLOAD_FORMATS = ("json", "yaml")


def get_default_config() -> Dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Default configuration dictionary
    """
    return {
        "safecookie": {
            "cipher": "aes_gcm",
            "binding": "full",
            "payload_format": "json",
        }
    }


def _read_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config root must be a mapping, got {type(data).__name__}")
    return data


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file, merged over the defaults.

    Args:
        config_path: Path to configuration YAML file.
                    If None, uses the packaged default_config.yaml.

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigurationError: If the file is unreadable or values are invalid
    """
    config = get_default_config()

    if config_path is None:
        if not os.path.exists(DEFAULT_CONFIG_PATH):
            logger.debug("No packaged default_config.yaml, using hardcoded defaults")
            return config
        config_path = DEFAULT_CONFIG_PATH

    loaded = _read_yaml(config_path)
    section = loaded.get("safecookie", {})
    if not isinstance(section, dict):
        raise ConfigurationError("'safecookie' section must be a mapping")
    config["safecookie"].update(section)

    validate_config(config)
    logger.debug("Loaded config from %s", config_path)
    return config


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check a configuration dictionary.

    Raises:
        ConfigurationError: On a missing section or unknown value
    """
    try:
        section = config["safecookie"]
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"Missing required config key: {e}") from e
    if not isinstance(section, dict):
        raise ConfigurationError("'safecookie' section must be a mapping")

    allowed = {
        "cipher": CIPHERS,
        "binding": BINDINGS,
        "payload_format": PAYLOAD_FORMATS,
    }
    for key, values in allowed.items():
        value = section.get(key)
        if value not in values:
            raise ConfigurationError(
                f"Invalid {key}: {value!r} (expected one of {', '.join(values)})"
            )

    unknown = set(section) - set(allowed)
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    return config


def resolve_config(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Fill a partial config dictionary with defaults and validate it."""
    if config is None:
        return get_default_config()
    merged = get_default_config()
    section = config.get("safecookie", {}) if isinstance(config, dict) else None
    if not isinstance(section, dict):
        raise ConfigurationError("'safecookie' section must be a mapping")
    merged["safecookie"].update(copy.deepcopy(section))
    return validate_config(merged)
