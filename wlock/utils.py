"""
Shared utility functions for parsing and clamping

Provides common helpers for:
- String parsing: Environment variable conversion (parse_bool, parse_int, parse_float, split_csv)
- Numeric clamping used by the geometry mapper
- Battery level conversion from level/scale pairs

These utilities are used throughout wlock for configuration parsing and data handling.
"""

from __future__ import annotations


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Interpret env-style booleans."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_int(value: str | None, default: int) -> int:
    """Best-effort int parser with fallback."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_float(value: str | None, default: float) -> float:
    """Best-effort float parser with fallback."""
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def split_csv(value: str | None) -> list[str]:
    """Split comma-separated strings into trimmed tokens."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def battery_fraction(level: int | None, scale: int | None) -> float:
    """Convert a battery level/scale pair into a 0..1 fraction.

    Unknown readings (missing values or a non-positive scale) map to 0.
    """
    if level is None or scale is None or scale <= 0 or level < 0:
        return 0.0
    return clamp(level / scale, 0.0, 1.0)
