"""
Configuration loader for chart sampling.

Loads sampling defaults from JSON files and merges optional local overrides,
so each deployment can tune its rendering budget while keeping common values
in git.

Base file (checked into git):
  - config/sampling_config.json

Local override file (gitignored):
  - config/sampling_config.local.json

Both files carry a "sampling" object. Only known keys are used; values of the
wrong type are ignored. Set SAMPLING_CONFIG_DIR to read them from elsewhere.
"""

import json
import logging
import os
import threading
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'config')

SAMPLING_CONFIG_DEFAULTS = {
    'default_threshold': 500,   # points per rendered line
    'default_buckets': 250,     # min/max buckets, up to 2 points each
    'max_threshold': 20000,
    'value_key': 'value',
    'parallel_workers': 1,      # thread pool size for multi-series alignment
}

_POSITIVE_INT_KEYS = ('default_threshold', 'default_buckets', 'max_threshold', 'parallel_workers')

_config = None
_config_lock = threading.Lock()


def get_config_dir() -> str:
    """Directory holding the sampling config files."""
    return os.environ.get('SAMPLING_CONFIG_DIR', CONFIG_DIR)


def load_json_config(filename: str, config_dir: Optional[str] = None) -> Dict[str, Any]:
    """Load a JSON configuration file, returning {} if it is missing or invalid."""
    filepath = os.path.join(config_dir or get_config_dir(), filename)
    if not os.path.exists(filepath):
        return {}

    try:
        with open(filepath, 'r') as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Failed to load {filepath}: {e}")
        return {}


def merge_sampling_config(config: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply override values onto a sampling config.

    Args:
        config: Config dict to update in place
        overrides: Raw values read from a config file

    Returns:
        The updated config dict
    """
    for key, value in overrides.items():
        if key not in SAMPLING_CONFIG_DEFAULTS:
            logger.debug(f"Ignoring unknown sampling config key: {key}")
            continue

        if key in _POSITIVE_INT_KEYS:
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                logger.warning(f"Ignoring sampling config {key}={value!r}: expected a positive integer")
                continue
        elif not isinstance(value, str) or not value:
            logger.warning(f"Ignoring sampling config {key}={value!r}: expected a non-empty string")
            continue

        config[key] = value
    return config


def load_sampling_config(config_dir: Optional[str] = None) -> Dict[str, Any]:
    """
    Load sampling configuration with local overrides.

    Returns:
        New dict with every key of SAMPLING_CONFIG_DEFAULTS
    """
    config = SAMPLING_CONFIG_DEFAULTS.copy()
    base_config = load_json_config('sampling_config.json', config_dir)
    local_config = load_json_config('sampling_config.local.json', config_dir)

    merge_sampling_config(config, base_config.get('sampling', {}))
    merge_sampling_config(config, local_config.get('sampling', {}))
    return config


def get_sampling_config() -> Dict[str, Any]:
    """Get a copy of the process-wide sampling config, loading it on first use."""
    global _config
    with _config_lock:
        if _config is None:
            _config = load_sampling_config()
        return _config.copy()


def reload_sampling_config() -> Dict[str, Any]:
    """Re-read the config files and replace the process-wide config."""
    global _config
    with _config_lock:
        _config = load_sampling_config()
        logger.info(f"Loaded sampling config from {get_config_dir()}")
        return _config.copy()
