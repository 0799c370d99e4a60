"""Configuration helpers for the wlock watch face."""

from __future__ import annotations

import logging
import os
import socket
from collections.abc import Mapping
from dataclasses import dataclass

from wlock.alerts import ALERT_KINDS, AlertKind
from wlock.events import EventDefinition, EventTable
from wlock.geometry import DEFAULT_WEEKDAY_COLORS, Color, Viewport
from wlock.haptics import HapticSettings, VibrationPattern, parse_timings
from wlock.utils import parse_bool, parse_float, parse_int, split_csv

LOGGER = logging.getLogger("wlock.config")

DEFAULT_LEAD_MINUTES = 90
# Alerts assume at most one evaluation per wall-clock second.
MIN_TICK_MS = 1000
DEFAULT_EVENTS = "pausa@1030,pranzo@1300,pausa@1600,uscita@1730"
DEFAULT_TOPIC_BASE = "wlock"

_DAY_SCOPES = {
    "workdays": (True, False),
    "weekdays": (True, False),
    "weekends": (False, True),
    "daily": (True, True),
}


def _strip_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def parse_event_token(token: str, default_lead: int) -> EventDefinition:
    """Parse ``name@HHMM[/lead][/workdays|weekends|daily]`` into an event.

    Raises ValueError naming the token when it cannot be parsed.
    """
    name, sep, rest = token.partition("@")
    name = name.strip()
    if not sep or not name:
        raise ValueError(f"Event '{token}' must look like name@HHMM")
    parts = [part.strip().lower() for part in rest.split("/")]
    time_text = parts[0].replace(":", "")
    if not time_text.isdigit():
        raise ValueError(f"Event '{token}' has a non-numeric trigger time")
    lead = default_lead
    scope = "workdays"
    for part in parts[1:]:
        if part.isdigit():
            lead = int(part)
        elif part in _DAY_SCOPES:
            scope = part
        else:
            raise ValueError(f"Event '{token}' has an unknown option '{part}'")
    workdays, weekends = _DAY_SCOPES[scope]
    try:
        return EventDefinition(
            name=name,
            trigger_time=int(time_text),
            lead_window_minutes=lead,
            active_on_workdays=workdays,
            active_on_weekends=weekends,
        )
    except ValueError as exc:
        raise ValueError(f"Invalid event '{token}': {exc}") from exc


def parse_event_table(value: str | None, default_lead: int = DEFAULT_LEAD_MINUTES) -> EventTable:
    return tuple(parse_event_token(token, default_lead) for token in split_csv(value))


def parse_weekday_colors(value: str | None) -> tuple[Color, ...]:
    tokens = split_csv(value)
    if not tokens:
        return DEFAULT_WEEKDAY_COLORS
    if len(tokens) != 7:
        LOGGER.warning("[config] WLOCK_WEEKDAY_COLORS needs 7 colors, got %d; using defaults", len(tokens))
        return DEFAULT_WEEKDAY_COLORS
    try:
        return tuple(Color.from_hex(token) for token in tokens)
    except ValueError as exc:
        LOGGER.warning("[config] Ignoring WLOCK_WEEKDAY_COLORS: %s", exc)
        return DEFAULT_WEEKDAY_COLORS


def _parse_haptics(source: Mapping[str, str]) -> HapticSettings:
    overrides: dict[AlertKind, VibrationPattern] = {}
    for kind in ALERT_KINDS:
        key = f"WLOCK_HAPTIC_{kind.upper()}"
        raw = source.get(key)
        pattern = parse_timings(raw)
        if pattern is not None:
            overrides[kind] = pattern
        elif raw:
            LOGGER.warning("[config] Ignoring malformed %s=%r", key, raw)
    return HapticSettings.with_defaults(overrides)


@dataclass(frozen=True)
class MqttConfig:
    host: str | None
    port: int
    username: str | None
    password: str | None
    tls_enabled: bool
    cert: str | None
    key: str | None
    ca_cert: str | None
    topic_base: str


@dataclass(frozen=True)
class WatchFaceConfig:
    hostname: str
    events: EventTable
    weekday_colors: tuple[Color, ...]
    viewport: Viewport
    tick_interval_ms: int
    haptics: HapticSettings
    mqtt: MqttConfig

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> WatchFaceConfig:
        source = env if env is not None else os.environ
        hostname = source.get("WLOCK_HOSTNAME") or socket.gethostname()

        default_lead = max(0, parse_int(source.get("WLOCK_LEAD_MINUTES"), DEFAULT_LEAD_MINUTES))
        events = parse_event_table(source.get("WLOCK_EVENTS", DEFAULT_EVENTS), default_lead)
        if not events:
            LOGGER.info("[config] No events configured; next-event display disabled")

        viewport = Viewport(
            width=max(1.0, parse_float(source.get("WLOCK_WIDTH"), 390.0)),
            height=max(1.0, parse_float(source.get("WLOCK_HEIGHT"), 390.0)),
        )

        mqtt = MqttConfig(
            host=_strip_or_none(source.get("WLOCK_MQTT_HOST")),
            port=parse_int(source.get("WLOCK_MQTT_PORT"), 1883),
            username=_strip_or_none(source.get("WLOCK_MQTT_USER")),
            password=source.get("WLOCK_MQTT_PASS"),
            tls_enabled=parse_bool(source.get("WLOCK_MQTT_TLS"), False),
            cert=_strip_or_none(source.get("WLOCK_MQTT_CERT")),
            key=_strip_or_none(source.get("WLOCK_MQTT_KEY")),
            ca_cert=_strip_or_none(source.get("WLOCK_MQTT_CA_CERT")),
            topic_base=(source.get("WLOCK_MQTT_TOPIC_BASE") or f"{DEFAULT_TOPIC_BASE}/{hostname}").strip("/"),
        )

        return WatchFaceConfig(
            hostname=hostname,
            events=events,
            weekday_colors=parse_weekday_colors(source.get("WLOCK_WEEKDAY_COLORS")),
            viewport=viewport,
            tick_interval_ms=max(MIN_TICK_MS, parse_int(source.get("WLOCK_TICK_MS"), MIN_TICK_MS)),
            haptics=_parse_haptics(source),
            mqtt=mqtt,
        )
