"""Tests for battery readings (wlock/battery.py)."""

from __future__ import annotations

import pytest
from wlock.battery import find_battery_device, read_battery_fraction


@pytest.fixture
def power_supply(tmp_path, monkeypatch):
    monkeypatch.delenv("WLOCK_BATTERY_DEVICE", raising=False)
    charger = tmp_path / "AC"
    charger.mkdir()
    (charger / "type").write_text("Mains\n", encoding="utf-8")
    battery = tmp_path / "BAT0"
    battery.mkdir()
    (battery / "type").write_text("Battery\n", encoding="utf-8")
    (battery / "capacity").write_text("64\n", encoding="utf-8")
    return tmp_path


def test_find_battery_device_skips_chargers(power_supply):
    assert find_battery_device(power_supply) == power_supply / "BAT0"


def test_find_battery_device_missing_root(tmp_path, monkeypatch):
    monkeypatch.delenv("WLOCK_BATTERY_DEVICE", raising=False)
    assert find_battery_device(tmp_path / "nope") is None


def test_env_override(power_supply, monkeypatch, tmp_path):
    monkeypatch.setenv("WLOCK_BATTERY_DEVICE", str(power_supply / "BAT0"))
    assert find_battery_device(tmp_path / "elsewhere") == power_supply / "BAT0"


def test_read_battery_fraction(power_supply):
    assert read_battery_fraction(power_supply / "BAT0") == pytest.approx(0.64)


def test_read_battery_fraction_garbage(power_supply):
    (power_supply / "BAT0" / "capacity").write_text("unknown", encoding="utf-8")
    assert read_battery_fraction(power_supply / "BAT0") == 0.0


def test_read_battery_fraction_missing_file(tmp_path):
    assert read_battery_fraction(tmp_path) == 0.0
