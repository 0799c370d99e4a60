"""Calendar math shared by the resolver and the geometry mapper."""

from __future__ import annotations

from datetime import datetime, timedelta

SECONDS_PER_DAY = 24 * 60 * 60

# Day-of-week values in the platform encoding (Sunday=1 .. Saturday=7)
SUNDAY = 1
SATURDAY = 7

_MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def local_now() -> datetime:
    """Get current datetime in local timezone."""
    return datetime.now().astimezone()


def ensure_aware(dt: datetime) -> datetime:
    """Attach the local timezone to naive datetimes; aware values keep their own zone."""
    if dt.tzinfo is None:
        return dt.astimezone()
    return dt


def shift_hours(instant: datetime, hours: int) -> datetime:
    """Return a new snapshot moved by a whole number of hours."""
    if not hours:
        return instant
    return instant + timedelta(hours=hours)


def calendar_day_of_week(instant: datetime) -> int:
    """Day of week in the platform encoding, Sunday=1 .. Saturday=7."""
    return instant.isoweekday() % 7 + 1


def normalized_weekday(day_of_week: int) -> int:
    """Map a Sunday=1 day of week onto Monday=1 .. Sunday=7."""
    if not SUNDAY <= day_of_week <= SATURDAY:
        raise ValueError(f"Day of week out of range: {day_of_week}")
    if day_of_week == SUNDAY:
        return 7
    return day_of_week - 1


def weekday_of(instant: datetime) -> int:
    return normalized_weekday(calendar_day_of_week(instant))


def is_weekend(day_of_week: int) -> bool:
    """True for Saturday and Sunday, given the pre-normalization day of week."""
    return day_of_week in (SUNDAY, SATURDAY)


def is_weekend_instant(instant: datetime) -> bool:
    return is_weekend(calendar_day_of_week(instant))


def day_progress_fraction(instant: datetime) -> float:
    """Fraction of the local day elapsed at ``instant``, in [0, 1)."""
    seconds = instant.second + instant.microsecond / 1_000_000
    total = seconds + 60 * instant.minute + 3600 * instant.hour
    return total / SECONDS_PER_DAY


def month_abbreviation(month_index: int) -> str:
    """Three-letter month name for a zero-based month index, or "" when out of range."""
    if 0 <= month_index < len(_MONTH_ABBREVIATIONS):
        return _MONTH_ABBREVIATIONS[month_index]
    return ""


def start_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)
