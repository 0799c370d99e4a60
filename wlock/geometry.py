"""Declarative draw plan for one watch face frame.

Everything here is plain data: arcs and text with positions, colors and
sizes. Angles follow the usual canvas convention, 0 degrees at three o'clock
and positive sweeps running clockwise.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Literal

from wlock.day_model import day_progress_fraction, month_abbreviation, weekday_of
from wlock.events import NextEvent
from wlock.utils import clamp

TextAlign = Literal["left", "center", "right"]


@dataclass(frozen=True)
class Color:
    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self) -> None:
        for channel in (self.red, self.green, self.blue, self.alpha):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")

    def with_alpha(self, alpha: int) -> Color:
        return Color(self.red, self.green, self.blue, alpha)

    @property
    def is_transparent(self) -> bool:
        return self.alpha == 0

    def to_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    def to_argb(self) -> int:
        return (self.alpha << 24) | (self.red << 16) | (self.green << 8) | self.blue

    @classmethod
    def from_hex(cls, value: str) -> Color:
        text = value.strip().lstrip("#")
        if len(text) == 6:
            text += "ff"
        if len(text) != 8:
            raise ValueError(f"Invalid color '{value}'")
        red, green, blue, alpha = (int(text[index : index + 2], 16) for index in range(0, 8, 2))
        return cls(red, green, blue, alpha)


WHITE = Color(255, 255, 255)
GRAY = Color(136, 136, 136)
TRANSPARENT = Color(0, 0, 0, 0)

DEFAULT_WEEKDAY_COLORS: tuple[Color, ...] = (
    Color(92, 116, 224),
    Color(252, 230, 106),
    Color(115, 206, 255),
    Color(255, 182, 193),
    Color(171, 115, 235),
    Color(252, 70, 53),
    Color(252, 186, 3),
)

ARC_MARGIN = 8.0
ARC_STROKE = 5.0
ARC_GAP_DEGREES = 1.0
PAST_DAY_ALPHA = 50
TRACK_COLOR = WHITE.with_alpha(20)
MUTED_ALPHA = 180
TOP_MARGIN = -10.0
DIGIT_SIZE = 72.0
DIGIT_SPREAD = 45.0
SMALL_TEXT_SIZE = 32.0
EVENT_NAME_SIZE = 18.0
BATTERY_RADIUS = 135.0
BATTERY_SWEEP = 45.0
BATTERY_ROTATION = 90.0 + BATTERY_SWEEP / 2
BATTERY_STROKE = 3.0
BATTERY_TRACK_COLOR = WHITE.with_alpha(40)


@dataclass(frozen=True)
class Viewport:
    width: float = 390.0
    height: float = 390.0

    @property
    def center_x(self) -> float:
        return self.width / 2

    @property
    def center_y(self) -> float:
        return self.height / 2


@dataclass(frozen=True)
class ArcSpec:
    center_x: float
    center_y: float
    radius: float
    start_angle: float
    sweep_angle: float
    color: Color
    stroke_width: float
    round_cap: bool = False


@dataclass(frozen=True)
class TextSpec:
    content: str
    x: float
    y: float
    size: float
    color: Color
    align: TextAlign = "center"


@dataclass(frozen=True)
class DayArc:
    """One weekday segment of the outer ring."""

    weekday: int
    arc: ArcSpec
    is_today: bool


@dataclass(frozen=True)
class RenderState:
    weekday: int
    is_weekend: bool
    ambient: bool
    day_progress: float
    color_of_the_day: Color
    day_tracks: tuple[ArcSpec, ...]
    day_arcs: tuple[DayArc, ...]
    battery_track: ArcSpec
    battery_fill: ArcSpec
    hour_text: TextSpec
    minute_text: TextSpec
    second_text: TextSpec | None
    date_text: TextSpec
    event_countdown_text: TextSpec | None = None
    event_name_text: TextSpec | None = None
    texts: tuple[TextSpec, ...] = field(default=(), init=False)

    def __post_init__(self) -> None:
        ordered = (
            self.hour_text,
            self.minute_text,
            self.second_text,
            self.date_text,
            self.event_countdown_text,
            self.event_name_text,
        )
        object.__setattr__(self, "texts", tuple(text for text in ordered if text is not None))

    def arcs(self) -> tuple[ArcSpec, ...]:
        """All arcs in paint order."""
        return (*self.day_tracks, *(day.arc for day in self.day_arcs), self.battery_track, self.battery_fill)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["color_of_the_day"] = self.color_of_the_day.to_hex()
        return payload


def color_for_day(weekday: int, weekday_colors: Sequence[Color] = DEFAULT_WEEKDAY_COLORS) -> Color:
    """Base color for a Monday=1 weekday; 0 is accepted as Sunday."""
    day = 7 if weekday == 0 else weekday
    return weekday_colors[day - 1]


def _day_color(day: int, today: int, weekday_colors: Sequence[Color]) -> Color:
    if day < today:
        return color_for_day(day, weekday_colors).with_alpha(PAST_DAY_ALPHA)
    if day == today:
        return color_for_day(today, weekday_colors)
    return TRANSPARENT


def build_day_arcs(
    today: int,
    progress: float,
    weekday_colors: Sequence[Color],
    is_weekend: bool,
    ambient: bool,
    viewport: Viewport,
) -> tuple[tuple[ArcSpec, ...], tuple[DayArc, ...]]:
    """Lay out the weekend (2 x 180) or workday (5 x 72) ring, starting at twelve o'clock."""
    angle = 360 / 2 if is_weekend else 360 / 5
    rotation = angle + 90 if is_weekend else -90.0
    days = range(6, 8) if is_weekend else range(1, 6)
    radius = min(viewport.center_x, viewport.center_y) - ARC_MARGIN

    tracks: list[ArcSpec] = []
    arcs: list[DayArc] = []
    for index, day in enumerate(days):
        start = rotation + index * angle
        if not ambient:
            tracks.append(
                ArcSpec(
                    center_x=viewport.center_x,
                    center_y=viewport.center_y,
                    radius=radius,
                    start_angle=start,
                    sweep_angle=angle - ARC_GAP_DEGREES,
                    color=TRACK_COLOR,
                    stroke_width=ARC_STROKE,
                )
            )
        is_today = day == today
        sweep = max(0.0, angle * progress - ARC_GAP_DEGREES) if is_today else angle - ARC_GAP_DEGREES
        arcs.append(
            DayArc(
                weekday=day,
                is_today=is_today,
                arc=ArcSpec(
                    center_x=viewport.center_x,
                    center_y=viewport.center_y,
                    radius=radius,
                    start_angle=start,
                    sweep_angle=sweep,
                    color=_day_color(day, today, weekday_colors),
                    stroke_width=ARC_STROKE,
                ),
            )
        )
    return tuple(tracks), tuple(arcs)


def build_battery_arcs(
    fraction: float,
    day_color: Color,
    ambient: bool,
    viewport: Viewport,
) -> tuple[ArcSpec, ArcSpec]:
    track = ArcSpec(
        center_x=viewport.center_x,
        center_y=viewport.center_y,
        radius=BATTERY_RADIUS,
        start_angle=BATTERY_ROTATION,
        sweep_angle=-BATTERY_SWEEP,
        color=BATTERY_TRACK_COLOR,
        stroke_width=BATTERY_STROKE,
        round_cap=True,
    )
    fill = ArcSpec(
        center_x=viewport.center_x,
        center_y=viewport.center_y,
        radius=BATTERY_RADIUS,
        start_angle=BATTERY_ROTATION,
        sweep_angle=-BATTERY_SWEEP * clamp(fraction, 0.0, 1.0),
        color=GRAY if ambient else day_color,
        stroke_width=BATTERY_STROKE,
        round_cap=True,
    )
    return track, fill


def build_render_state(
    instant: datetime,
    battery_fraction: float,
    weekday_colors: Sequence[Color],
    is_weekend: bool,
    ambient_mode: bool,
    next_event: NextEvent,
    viewport: Viewport | None = None,
) -> RenderState:
    if len(weekday_colors) != 7:
        raise ValueError("Exactly seven weekday colors are required")
    viewport = viewport or Viewport()
    cx, cy = viewport.center_x, viewport.center_y
    today = weekday_of(instant)
    progress = day_progress_fraction(instant)
    day_color = color_for_day(today, weekday_colors)
    accent = WHITE.with_alpha(MUTED_ALPHA) if ambient_mode else day_color
    no_event = next_event.is_empty
    # Recenter the digits when there is less to show below them.
    compact = ambient_mode or no_event

    tracks, day_arcs = build_day_arcs(today, progress, weekday_colors, is_weekend, ambient_mode, viewport)
    battery_track, battery_fill = build_battery_arcs(battery_fraction, day_color, ambient_mode, viewport)

    digits_y = cy + TOP_MARGIN + (30 if compact else 0)
    second_text = None
    if not ambient_mode:
        second_text = TextSpec(
            content=f"{instant.second:02d}",
            x=cx,
            y=cy + TOP_MARGIN + 45 + (40 if no_event else 0),
            size=SMALL_TEXT_SIZE,
            color=GRAY,
        )

    countdown_text = name_text = None
    if not no_event:
        countdown_text = TextSpec(
            content=next_event.countdown,
            x=cx,
            y=cy + TOP_MARGIN + 100,
            size=SMALL_TEXT_SIZE,
            color=accent,
        )
        name_text = TextSpec(
            content=next_event.name,
            x=cx,
            y=cy + TOP_MARGIN + 120,
            size=EVENT_NAME_SIZE,
            color=GRAY,
        )

    return RenderState(
        weekday=today,
        is_weekend=is_weekend,
        ambient=ambient_mode,
        day_progress=progress,
        color_of_the_day=day_color,
        day_tracks=tracks,
        day_arcs=day_arcs,
        battery_track=battery_track,
        battery_fill=battery_fill,
        hour_text=TextSpec(f"{instant.hour:02d}", cx - DIGIT_SPREAD, digits_y, DIGIT_SIZE, WHITE),
        minute_text=TextSpec(f"{instant.minute:02d}", cx + DIGIT_SPREAD, digits_y, DIGIT_SIZE, accent),
        second_text=second_text,
        date_text=TextSpec(
            content=f"{instant.day} {month_abbreviation(instant.month - 1)}",
            x=cx,
            y=cy + TOP_MARGIN - 80 + (20 if compact else 0),
            size=SMALL_TEXT_SIZE,
            color=accent,
        ),
        event_countdown_text=countdown_text,
        event_name_text=name_text,
    )
