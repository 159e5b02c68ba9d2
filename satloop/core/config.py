"""Centralized configuration loading for satloop.

This module provides utilities for loading and accessing configuration from config.json
with support for environment variable fallbacks and default values.

Recognized keys::

    {
      "solver": {"name": "minisat22", "conflict_budget": null},
      "refine": {"max_trials": 1000}
    }
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def load_config(config_path: str = "config.json") -> Dict[str, Any]:
    """Load configuration from JSON file.

    Returns empty dict if file doesn't exist or is invalid.

    Args:
        config_path: Path to config.json file (default: "config.json")

    Returns:
        Configuration dictionary, or empty dict if file not found/invalid
    """
    path = Path(config_path)

    if not path.exists():
        return {}

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {path}: top level is not an object")
        return {}
    return data


def _coerce(value: str, default: Any) -> Any:
    """Convert an environment string to the type of the default."""
    if default is None or isinstance(default, str):
        return value
    if isinstance(default, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    try:
        return type(default)(value)
    except (TypeError, ValueError):
        logger.warning(f"Cannot convert {value!r} to {type(default).__name__}, using default")
        return default


def get_config_value(
    keys: List[str], default: Any = None, config: Optional[Dict[str, Any]] = None
) -> Any:
    """Get nested configuration value with fallback to environment variable.

    Supports key paths like ["solver", "name"] or ["refine", "max_trials"].
    Also checks environment variables as fallback (e.g., REFINE_MAX_TRIALS for
    refine.max_trials). Environment strings are converted to the default's type.

    Args:
        keys: List of keys to traverse (e.g., ["solver", "name"])
        default: Default value if key not found
        config: Optional config dict (uses load_config() if not provided)

    Returns:
        Configuration value, or default if not found
    """
    if config is None:
        config = load_config()

    value = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
            if value is None:
                break
        else:
            value = None
            break

    if value is not None:
        return value

    env_key = "_".join(k.upper() for k in keys)
    env_value = os.environ.get(env_key)
    if env_value is not None:
        return _coerce(env_value, default)

    return default
