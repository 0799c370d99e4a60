"""Recurring daily events and next-event resolution.

The event table is an ordered tuple of :class:`EventDefinition`. Resolution
walks it in declaration order and returns the first event whose lead window
contains the current countdown, so overlapping windows are settled by order
rather than by which event is sooner.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from wlock.day_model import start_of_day


@dataclass(frozen=True)
class EventDefinition:
    """A named daily event at a fixed local time (HHMM)."""

    name: str
    trigger_time: int
    lead_window_minutes: int
    active_on_workdays: bool = True
    active_on_weekends: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.trigger_time <= 2359:
            raise ValueError(f"Event '{self.name}': trigger time {self.trigger_time} is not HHMM")
        if self.trigger_minute >= 60:
            raise ValueError(f"Event '{self.name}': trigger time {self.trigger_time:04d} has invalid minutes")
        if self.lead_window_minutes < 0:
            raise ValueError(f"Event '{self.name}': lead window must be non-negative")

    @property
    def trigger_hour(self) -> int:
        return self.trigger_time // 100

    @property
    def trigger_minute(self) -> int:
        return self.trigger_time % 100

    def is_active(self, weekend: bool) -> bool:
        return self.active_on_weekends if weekend else self.active_on_workdays

    def trigger_instant(self, instant: datetime) -> datetime:
        """The event's trigger on the calendar day of ``instant``."""
        return start_of_day(instant) + timedelta(hours=self.trigger_hour, minutes=self.trigger_minute)


EventTable = tuple[EventDefinition, ...]


def build_event_table(events: Iterable[EventDefinition]) -> EventTable:
    return tuple(events)


@dataclass(frozen=True)
class CountdownResult:
    event_name: str
    hours_left: int
    minutes_left: int
    seconds_left: int

    @property
    def total_minutes_left(self) -> int:
        return self.hours_left * 60 + self.minutes_left


@dataclass(frozen=True)
class NextEvent:
    """Name and formatted countdown of the next event; both empty when none."""

    name: str
    countdown: str

    @property
    def is_empty(self) -> bool:
        return not self.name or not self.countdown

    def as_pair(self) -> tuple[str, str]:
        return self.name, self.countdown


NO_EVENT = NextEvent("", "")


def _decompose_offset(offset_seconds: int) -> tuple[int, int, int]:
    # Reads the offset back as a UTC wall clock, so it is only exact below one day.
    as_clock = datetime.fromtimestamp(offset_seconds, UTC)
    return as_clock.hour, as_clock.minute, as_clock.second


def countdown_to(event: EventDefinition, instant: datetime) -> CountdownResult | None:
    """Countdown from ``instant`` to today's trigger, or None once it has passed.

    The trigger is placed on the local wall clock, but the offset is measured in
    elapsed seconds, so DST transitions between now and the trigger are counted.
    """
    current = instant.replace(microsecond=0)
    offset = int(event.trigger_instant(current).timestamp() - current.timestamp())
    if offset < 0:
        return None
    hours, minutes, seconds = _decompose_offset(offset)
    return CountdownResult(
        event_name=event.name,
        hours_left=hours,
        minutes_left=minutes,
        seconds_left=seconds,
    )


def find_next_event(
    instant: datetime,
    events: Sequence[EventDefinition],
    is_weekend: bool,
) -> CountdownResult | None:
    """Return the countdown for the first active event inside its lead window."""
    for event in events:
        if not event.is_active(is_weekend):
            continue
        countdown = countdown_to(event, instant)
        if countdown is None:
            continue
        if 0 <= countdown.total_minutes_left <= event.lead_window_minutes:
            return countdown
    return None


def format_countdown(countdown: CountdownResult, ambient_mode: bool) -> str:
    """Format a countdown as ``H:MM:SS`` (hour omitted when zero) or ``Hh MMm`` in ambient mode."""
    hour_part = "" if countdown.hours_left == 0 else f"{countdown.hours_left}:"
    minute_part = f"{countdown.minutes_left:02d}:"
    if ambient_mode:
        return (hour_part.replace(":", "h ") + minute_part.replace(":", "m ")).strip()
    return f"{hour_part}{minute_part}{countdown.seconds_left:02d}"


def next_event_for(countdown: CountdownResult | None, ambient_mode: bool) -> NextEvent:
    """The displayable pair for a countdown, or the empty pair when there is none."""
    if countdown is None:
        return NO_EVENT
    return NextEvent(countdown.event_name, format_countdown(countdown, ambient_mode))


def resolve_next_event(
    instant: datetime,
    events: Sequence[EventDefinition],
    is_weekend: bool,
    ambient_mode: bool,
) -> NextEvent:
    return next_event_for(find_next_event(instant, events, is_weekend), ambient_mode)
