"""
Helper utilities for the comfort service
Common functions used across modules
"""

import json
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict

import yaml


def load_yaml(file_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file

    Args:
        file_path: Path to YAML file

    Returns:
        Dictionary with configuration
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_json(file_path: str) -> Dict[str, Any]:
    """
    Load JSON file

    Args:
        file_path: Path to JSON file

    Returns:
        Dictionary with data
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def clamp(value: float, lower: float, upper: float) -> float:
    """Limit value to the closed range [lower, upper]."""
    return max(lower, min(upper, value))


def round_half_away(value: float, decimals: int = 1) -> float:
    """
    Round half away from zero (2.25 -> 2.3, -2.25 -> -2.3)

    The value is first snapped to 9 decimal places so that binary float noise
    (70.44999999999999) rounds the same way as the decimal it stands for.

    Args:
        value: Finite number to round
        decimals: Number of decimal places

    Returns:
        Rounded float
    """
    snapped = Decimal(repr(round(value, 9)))
    quantum = Decimal(1).scaleb(-decimals)
    # ROUND_HALF_UP on Decimal rounds away from zero for both signs
    return float(snapped.quantize(quantum, rounding=ROUND_HALF_UP))


def safe_float(value, default=None, decimals=None):
    """
    Convert value to float, returning default for None, NaN or inf

    Args:
        value: Raw value
        default: Returned when value is missing or not finite
        decimals: Optional rounding (half away from zero)

    Returns:
        Float value or default
    """
    try:
        val = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(val) or math.isinf(val):
        return default
    if decimals is not None:
        return round_half_away(val, decimals)
    return val


def format_duration(seconds: float) -> str:
    """
    Format duration in human readable format

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (e.g., "2h 15m 30s")
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)
