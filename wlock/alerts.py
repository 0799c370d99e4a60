"""Haptic alert decisions derived from an event countdown."""

from __future__ import annotations

from typing import Literal

from wlock.events import CountdownResult

AlertKind = Literal["hour", "half_hour", "quarter_hour", "arrival"]

ALERT_KINDS: tuple[AlertKind, ...] = ("hour", "half_hour", "quarter_hour", "arrival")

_THRESHOLDS: dict[int, AlertKind] = {
    60: "hour",
    30: "half_hour",
    15: "quarter_hour",
    0: "arrival",
}


def maybe_trigger(total_minutes_left: int, seconds_left: int) -> AlertKind | None:
    """Return the alert for a countdown sitting exactly on a marker minute.

    Only whole-minute boundaries fire. Evaluating the same second twice fires
    twice; the host ticks at most once per second.
    """
    if seconds_left != 0:
        return None
    return _THRESHOLDS.get(total_minutes_left)


def alert_for(countdown: CountdownResult | None) -> AlertKind | None:
    if countdown is None:
        return None
    return maybe_trigger(countdown.total_minutes_left, countdown.seconds_left)
