"""
Helper Functions

Utility functions used across the projector including:
- Configuration loading/saving
- Environment overrides
- Display formatting
"""

import os
import copy
from typing import Dict, Any, List
from pathlib import Path

import yaml
from dotenv import load_dotenv

from projector.utils.logger import get_logger

logger = get_logger(__name__)

# Environment variables that override nested config keys
ENV_OVERRIDES = {
    "PROJECTOR_LOG_LEVEL": (["general", "log_level"], str),
    "PROJECTOR_LOG_FILE": (["general", "log_file"], str),
    "PROJECTOR_HURST": (["pricing", "hurst"], float),
    "PROJECTOR_DEFAULT_VOL": (["pricing", "default_vol"], float),
    "PROJECTOR_OPTION_TYPE": (["pricing", "option_type"], str),
    "PROJECTOR_NUM_POINTS": (["projection", "num_points"], int),
}


def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Missing keys are filled from the defaults, and PROJECTOR_* environment
    variables (including those in a .env file) take precedence.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    load_dotenv()
    config_file = Path(config_path)

    if not config_file.exists():
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return apply_env_overrides(get_default_config())

    try:
        with open(config_file, "r") as f:
            loaded = yaml.safe_load(f)

        logger.info(f"Configuration loaded from {config_path}")

    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load config: {e}")
        return apply_env_overrides(get_default_config())

    if not isinstance(loaded, dict):
        return apply_env_overrides(get_default_config())

    return apply_env_overrides(_merge(get_default_config(), loaded))


def save_config(config: Dict[str, Any], config_path: str = "config/config.yaml") -> bool:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        config_path: Path to save to

    Returns:
        True if saved successfully
    """
    try:
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {config_path}")
        return True

    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to save config: {e}")
        return False


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "general": {
            "log_level": "INFO",
            "log_file": None,
        },
        "pricing": {
            "option_type": "auto",
            "hurst": 0.5,
            "default_vol": 0.5,
            "use_smile": False,
        },
        "projection": {
            "num_points": 200,
            "lower_pad": 0.9,
            "upper_pad": 1.1,
        },
    }


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply PROJECTOR_* environment overrides to a config dict in place."""
    for env_var, (keys, cast) in ENV_OVERRIDES.items():
        raw = os.getenv(env_var)
        if raw is None:
            continue

        try:
            value = cast(raw)
        except ValueError:
            logger.warning(f"Ignoring {env_var}={raw!r}: expected {cast.__name__}")
            continue

        section = config
        for key in keys[:-1]:
            section = section.setdefault(key, {})
        section[keys[-1]] = value

    return config


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(value, max_val))


def format_usd(amount: float, include_sign: bool = False, decimals: int = 2) -> str:
    """
    Format a dollar amount for display.

    Args:
        amount: Amount in dollars
        include_sign: Include + for positive amounts
        decimals: Number of decimal places

    Returns:
        Formatted string (e.g., "$50.00" or "+$5.25")
    """
    sign = ""
    if include_sign and amount > 0:
        sign = "+"

    return f"{sign}${amount:,.{decimals}f}"


def format_percent(value: float, include_sign: bool = False) -> str:
    """
    Format percentage for display.

    Args:
        value: Fraction (0.05 = 5%)
        include_sign: Include + for positive values

    Returns:
        Formatted string (e.g., "5.00%" or "+2.50%")
    """
    sign = ""
    if include_sign and value > 0:
        sign = "+"

    return f"{sign}{value * 100:.2f}%"


def format_time_to_expiry(seconds: float) -> str:
    """
    Get human-readable time remaining until expiry.

    Returns:
        String like "3d 4h", "5h 12m" or "Expired"
    """
    if seconds <= 0:
        return "Expired"

    days = int(seconds // 86400)
    hours = int((seconds % 86400) // 3600)

    if days > 0:
        return f"{days}d {hours}h"

    minutes = int((seconds % 3600) // 60)
    return f"{hours}h {minutes}m"


def format_hours(seconds: float) -> str:
    """Format seconds as whole hours, e.g. "36h"."""
    return f"{round(seconds / 3600)}h"
