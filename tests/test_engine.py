"""Tests for the per-tick engine (wlock/engine.py)."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

import pytest
from wlock.engine import WatchFaceEngine
from wlock.events import NO_EVENT, EventDefinition
from wlock.geometry import DEFAULT_WEEKDAY_COLORS, Viewport
from wlock.haptics import HapticSettings, VibrationPattern


@pytest.fixture
def engine(office_events):
    return WatchFaceEngine(office_events)


def test_tick_monday_work_scenario(monday_morning):
    engine = WatchFaceEngine((EventDefinition("work", 830, 45),))
    frame = engine.tick(monday_morning, 0.5)
    assert frame.next_event.as_pair() == ("work", "30:00")
    assert frame.alert == "half_hour"
    assert frame.vibration == HapticSettings.with_defaults().half_hour
    assert not frame.is_weekend
    assert frame.render.event_countdown_text.content == "30:00"


def test_tick_without_event_suppresses_display(engine, monday_morning):
    frame = engine.tick(monday_morning.replace(hour=6), 0.5)
    assert frame.next_event == NO_EVENT
    assert frame.countdown is None
    assert frame.alert is None
    assert frame.vibration is None
    assert frame.render.event_name_text is None


def test_tick_no_alert_between_minutes(engine, monday_morning):
    frame = engine.tick(monday_morning.replace(hour=10, second=1), 0.5)
    assert frame.countdown.total_minutes_left == 29
    assert frame.alert is None


def test_tick_arrival_alert_at_trigger(engine, monday_morning):
    frame = engine.tick(monday_morning.replace(hour=13, minute=0), 0.5)
    assert frame.next_event.as_pair() == ("pranzo", "00:00")
    assert frame.alert == "arrival"
    assert frame.vibration.pulse_count == 5


def test_tick_applies_scrub_offset(engine, monday_morning):
    frame = engine.tick(monday_morning, 0.5, scrub_offset_hours=2)
    assert frame.instant == datetime(2025, 1, 13, 10, 0, tzinfo=UTC)
    assert frame.next_event.as_pair() == ("pausa", "30:00")
    assert frame.render.hour_text.content == "10"


def test_tick_scrub_across_midnight_into_weekend(engine):
    friday_night = datetime(2025, 1, 17, 23, 0, tzinfo=UTC)
    frame = engine.tick(friday_night, 0.5, scrub_offset_hours=2)
    assert frame.is_weekend
    assert len(frame.render.day_arcs) == 2


def test_tick_weekend_skips_workday_events(engine, saturday_morning):
    frame = engine.tick(saturday_morning.replace(hour=10), 0.5)
    assert frame.is_weekend
    assert frame.next_event == NO_EVENT


def test_tick_ambient_formatting(engine, monday_morning):
    frame = engine.tick(monday_morning.replace(hour=9, minute=25, second=40), 0.5, ambient_mode=True)
    assert frame.next_event.as_pair() == ("pausa", "1h 04m")
    assert frame.render.second_text is None


def test_tick_accepts_naive_instants(engine):
    frame = engine.tick(datetime(2025, 1, 13, 10, 0), 0.5)
    assert frame.instant.tzinfo is not None
    assert frame.next_event.name == "pausa"


def test_custom_haptics_and_viewport(monday_morning):
    haptics = HapticSettings.with_defaults({"half_hour": VibrationPattern((0, 400))})
    engine = WatchFaceEngine(
        (EventDefinition("work", 830, 45),),
        viewport=Viewport(454, 454),
        haptics=haptics,
    )
    frame = engine.tick(monday_morning, 1.0)
    assert frame.vibration == VibrationPattern((0, 400))
    assert frame.render.hour_text.x == 227 - 45


def test_engine_requires_seven_colors(office_events):
    with pytest.raises(ValueError):
        WatchFaceEngine(office_events, weekday_colors=DEFAULT_WEEKDAY_COLORS[:6])


def test_frame_to_dict_is_json_serializable(engine, monday_morning):
    payload = json.loads(json.dumps(engine.tick(monday_morning.replace(hour=10), 0.5).to_dict()))
    assert payload["next_event"] == {"name": "pausa", "countdown": "30:00"}
    assert payload["alert"] == "half_hour"
    assert payload["instant"] == "2025-01-13T10:00:00+00:00"


def test_alert_logged_at_debug(engine, monday_morning, caplog):
    with caplog.at_level(logging.DEBUG, logger="wlock.engine"):
        engine.tick(monday_morning.replace(hour=9, minute=30), 0.5)
    assert "[engine] hour alert for 'pausa'" in caplog.text
