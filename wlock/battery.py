"""Battery level readings for hosts that expose a Linux power supply."""

from __future__ import annotations

import os
from pathlib import Path

from wlock.utils import battery_fraction, parse_int

POWER_SUPPLY_DIR = Path("/sys/class/power_supply")


def find_battery_device(root: Path = POWER_SUPPLY_DIR) -> Path | None:
    """Find the first power supply reporting a capacity.

    ``WLOCK_BATTERY_DEVICE`` overrides auto-detection.
    """
    env_path = os.environ.get("WLOCK_BATTERY_DEVICE")
    if env_path and (Path(env_path) / "capacity").exists():
        return Path(env_path)

    if not root.exists():
        return None
    for device in sorted(root.iterdir()):
        type_path = device / "type"
        try:
            kind = type_path.read_text(encoding="utf-8").strip() if type_path.exists() else ""
        except OSError:
            continue
        if kind.lower() == "battery" and (device / "capacity").exists():
            return device
    return None


def read_battery_fraction(device: Path | None = None) -> float:
    """Current charge as a 0..1 fraction; 0 when no battery can be read."""
    device = device or find_battery_device()
    if device is None:
        return 0.0
    try:
        raw = (device / "capacity").read_text(encoding="utf-8").strip()
    except OSError:
        return 0.0
    return battery_fraction(parse_int(raw, -1), 100)
