"""Vibration waveforms for each alert kind."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from wlock.alerts import ALERT_KINDS, AlertKind


@dataclass(frozen=True)
class VibrationPattern:
    """Alternating off/on durations in milliseconds, starting with a delay."""

    timings_ms: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.timings_ms:
            raise ValueError("Vibration pattern needs at least one timing")
        if any(timing < 0 for timing in self.timings_ms):
            raise ValueError("Vibration timings must be non-negative")

    @property
    def pulse_count(self) -> int:
        return sum(1 for timing in self.timings_ms[1::2] if timing > 0)

    @property
    def duration_ms(self) -> int:
        return sum(self.timings_ms)


def pulses(count: int, *, on_ms: int = 120, gap_ms: int = 120) -> VibrationPattern:
    """Build ``count`` evenly spaced pulses."""
    timings: list[int] = [0]
    for index in range(count):
        if index:
            timings.append(gap_ms)
        timings.append(on_ms)
    return VibrationPattern(tuple(timings))


def parse_timings(value: str | None) -> VibrationPattern | None:
    """Parse ``"0,120,80,120"`` into a pattern, or None when empty or malformed."""
    if not value:
        return None
    try:
        timings = tuple(int(part.strip()) for part in value.split(",") if part.strip())
        return VibrationPattern(timings)
    except ValueError:
        return None


@dataclass(frozen=True)
class HapticSettings:
    hour: VibrationPattern
    half_hour: VibrationPattern
    quarter_hour: VibrationPattern
    arrival: VibrationPattern

    @classmethod
    def with_defaults(cls, overrides: Mapping[AlertKind, VibrationPattern] | None = None) -> HapticSettings:
        patterns: dict[str, VibrationPattern] = {
            "hour": pulses(1, on_ms=200),
            "half_hour": pulses(2),
            "quarter_hour": pulses(3, on_ms=100, gap_ms=100),
            "arrival": pulses(5, on_ms=150, gap_ms=80),
        }
        for kind, pattern in (overrides or {}).items():
            if kind in ALERT_KINDS:
                patterns[kind] = pattern
        return cls(**patterns)

    def pattern_for(self, kind: AlertKind) -> VibrationPattern:
        return {
            "hour": self.hour,
            "half_hour": self.half_hour,
            "quarter_hour": self.quarter_hour,
            "arrival": self.arrival,
        }[kind]
