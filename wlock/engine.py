"""Per-tick composition of the resolver, alert trigger and geometry mapper."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from wlock.alerts import AlertKind, alert_for
from wlock.day_model import ensure_aware, is_weekend_instant, shift_hours
from wlock.events import CountdownResult, EventDefinition, NextEvent, find_next_event, next_event_for
from wlock.geometry import DEFAULT_WEEKDAY_COLORS, Color, RenderState, Viewport, build_render_state
from wlock.haptics import HapticSettings, VibrationPattern

LOGGER = logging.getLogger("wlock.engine")


@dataclass(frozen=True)
class FaceFrame:
    """Everything the host needs to draw one frame and buzz if required."""

    instant: datetime
    is_weekend: bool
    countdown: CountdownResult | None
    next_event: NextEvent
    alert: AlertKind | None
    vibration: VibrationPattern | None
    render: RenderState

    def to_dict(self) -> dict[str, Any]:
        return {
            "instant": self.instant.isoformat(),
            "is_weekend": self.is_weekend,
            "next_event": {"name": self.next_event.name, "countdown": self.next_event.countdown},
            "alert": self.alert,
            "render": self.render.to_dict(),
        }


class WatchFaceEngine:
    """Stateless apart from its fixed configuration; safe to call once per tick."""

    def __init__(
        self,
        events: Sequence[EventDefinition],
        *,
        weekday_colors: Sequence[Color] = DEFAULT_WEEKDAY_COLORS,
        viewport: Viewport | None = None,
        haptics: HapticSettings | None = None,
    ) -> None:
        if len(weekday_colors) != 7:
            raise ValueError("Exactly seven weekday colors are required")
        self.events: tuple[EventDefinition, ...] = tuple(events)
        self.weekday_colors: tuple[Color, ...] = tuple(weekday_colors)
        self.viewport = viewport or Viewport()
        self.haptics = haptics or HapticSettings.with_defaults()

    def tick(
        self,
        instant: datetime,
        battery_fraction: float,
        ambient_mode: bool = False,
        scrub_offset_hours: int = 0,
    ) -> FaceFrame:
        snapshot = shift_hours(ensure_aware(instant), scrub_offset_hours)
        weekend = is_weekend_instant(snapshot)
        countdown = find_next_event(snapshot, self.events, weekend)
        next_event = next_event_for(countdown, ambient_mode)
        alert = alert_for(countdown)
        if alert is not None:
            LOGGER.debug("[engine] %s alert for '%s' at %s", alert, countdown.event_name, snapshot.isoformat())
        render = build_render_state(
            snapshot,
            battery_fraction,
            self.weekday_colors,
            weekend,
            ambient_mode,
            next_event,
            self.viewport,
        )
        return FaceFrame(
            instant=snapshot,
            is_weekend=weekend,
            countdown=countdown,
            next_event=next_event,
            alert=alert,
            vibration=None if alert is None else self.haptics.pattern_for(alert),
            render=render,
        )
