"""
Domain models for single-day slot scheduling.

All values are immutable: mutations of a schedule return a new value, which
keeps them usable from both in-place and immutable state managers.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from datetime import date, time
from typing import Any, Dict, Iterable, Tuple

import pendulum
from pendulum import Date, DateTime

from .exceptions import ValidationError

MINUTES_PER_DAY = 24 * 60

DATE_KEY_FORMAT = "YYYY-MM-DD"

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def to_date(value: str | date) -> Date:
    """
    Convert a ``YYYY-MM-DD`` key or a date object to a pendulum ``Date``.

    Raises:
        ValidationError: If the value is not a valid calendar date
    """
    if isinstance(value, Date):
        return value
    if isinstance(value, date):
        return pendulum.date(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValidationError(f"Expected a date or {DATE_KEY_FORMAT} string, got {value!r}")

    try:
        return pendulum.from_format(value.strip(), DATE_KEY_FORMAT).date()
    except ValueError as exc:
        raise ValidationError(f"Invalid date key '{value}', expected {DATE_KEY_FORMAT}") from exc


def date_key(value: str | date) -> str:
    """Normalize a date or date string to its ``YYYY-MM-DD`` key."""
    return to_date(value).to_date_string()


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """
    Wall-clock time with minute resolution, from 00:00 up to and including 24:00.

    There is no day rollover: arithmetic leaving that range is an error.
    """
    minutes: int

    def __post_init__(self):
        if not 0 <= self.minutes <= MINUTES_PER_DAY:
            raise ValidationError(
                f"Time of day must be between 00:00 and 24:00, got {self.minutes} minutes"
            )

    @classmethod
    def of(cls, hour: int, minute: int = 0) -> "TimeOfDay":
        if not 0 <= minute <= 59:
            raise ValidationError(f"Minute must be between 0 and 59, got {minute}")
        return cls(hour * 60 + minute)

    @classmethod
    def parse(cls, value: "str | time | TimeOfDay") -> "TimeOfDay":
        """
        Parse ``HH:MM`` text (``24:00`` allowed) or a ``datetime.time``.

        Raises:
            ValidationError: If the value is not a valid time of day
        """
        if isinstance(value, TimeOfDay):
            return value
        if isinstance(value, time):
            return cls.of(value.hour, value.minute)
        if not isinstance(value, str):
            raise ValidationError(f"Expected HH:MM text, got {value!r}")

        match = _TIME_PATTERN.match(value.strip())
        if not match:
            raise ValidationError(f"Invalid time '{value}', expected HH:MM")

        return cls.of(int(match.group(1)), int(match.group(2)))

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def add(self, minutes: int) -> "TimeOfDay":
        """Return this time shifted by ``minutes``, never crossing the day boundary."""
        return TimeOfDay(self.minutes + minutes)

    def on(self, day: str | date, tz: str | None = None) -> DateTime:
        """Anchor this time to a calendar day (naive when no timezone is given)."""
        d = to_date(day)
        if tz is None:
            start_of_day = pendulum.naive(d.year, d.month, d.day)
        else:
            start_of_day = pendulum.datetime(d.year, d.month, d.day, tz=tz)
        return start_of_day.add(minutes=self.minutes)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


START_OF_DAY = TimeOfDay(0)
END_OF_DAY = TimeOfDay(MINUTES_PER_DAY)


@dataclass(frozen=True)
class TimeRange:
    """
    Half-open same-day range ``[start, end)``.

    Invariant: start must be before end. Accepts ``HH:MM`` strings for convenience.
    """
    start: TimeOfDay
    end: TimeOfDay

    def __post_init__(self):
        object.__setattr__(self, "start", TimeOfDay.parse(self.start))
        object.__setattr__(self, "end", TimeOfDay.parse(self.end))
        if self.start >= self.end:
            raise ValidationError(f"Start time {self.start} must be before end time {self.end}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TimeRange":
        try:
            return cls(start=data["start"], end=data["end"])
        except (KeyError, TypeError) as exc:
            raise ValidationError(f"Time range needs 'start' and 'end', got {data!r}") from exc

    def to_dict(self) -> Dict[str, str]:
        return {"start": str(self.start), "end": str(self.end)}

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end.minutes - self.start.minutes

    def contains(self, other: "TimeRange") -> bool:
        """Check if ``other`` lies entirely within this range (boundaries included)."""
        return other.start >= self.start and other.end <= self.end

    def intersects(self, other: "TimeRange") -> bool:
        """Check if the two half-open ranges share at least one minute."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass(frozen=True)
class TimeSlot:
    """
    A fixed-duration subdivision of a day's operating hours.

    Slots are derived on every generation call and never stored.
    """
    start_time: TimeOfDay
    end_time: TimeOfDay
    is_booked: bool = False

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start_time, end=self.end_time)

    def duration_minutes(self) -> int:
        return self.end_time.minutes - self.start_time.minutes

    def on(self, day: str | date, tz: str | None = None) -> Tuple[DateTime, DateTime]:
        """Return the slot's start and end as datetimes on ``day``."""
        return self.start_time.on(day, tz), self.end_time.on(day, tz)

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: HH:MM – HH:MM (booked|free)
        """
        status = "booked" if self.is_booked else "free"
        return f"{self.start_time} – {self.end_time} ({status})"


@dataclass(frozen=True)
class DaySchedule:
    """
    One day's operating hours, externally imposed unavailable ranges and bookings.

    Unavailable ranges are never changed by the engine; bookings are replaced
    through :meth:`with_bookings`. Ranges may extend outside the operating hours.
    """
    date: str
    operating_hours: TimeRange
    unavailable_ranges: Tuple[TimeRange, ...] = field(default_factory=tuple)
    bookings: Tuple[TimeRange, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "date", date_key(self.date))
        object.__setattr__(self, "unavailable_ranges", tuple(self.unavailable_ranges))
        object.__setattr__(self, "bookings", tuple(self.bookings))

    @classmethod
    def default(cls, day: str | date, operating_hours: TimeRange) -> "DaySchedule":
        """Create an empty schedule with the given operating hours."""
        return cls(date=day, operating_hours=operating_hours)

    @property
    def day(self) -> Date:
        return to_date(self.date)

    def with_bookings(self, bookings: Iterable[TimeRange]) -> "DaySchedule":
        return replace(self, bookings=tuple(bookings))

    def blocking_ranges(self) -> Tuple[TimeRange, ...]:
        """Unavailable ranges and bookings, merged into one collection."""
        return self.unavailable_ranges + self.bookings


class ScheduleBook(Mapping):
    """
    Immutable mapping from date key to :class:`DaySchedule`.

    Every update returns a new book; the original is left untouched.
    """

    def __init__(self, schedules: Iterable[DaySchedule] = ()):
        entries: Dict[str, DaySchedule] = {}
        for schedule in schedules:
            if schedule.date in entries:
                raise ValidationError(f"Duplicate schedule for date {schedule.date}")
            entries[schedule.date] = schedule
        self._entries = entries

    def __getitem__(self, day: str | date) -> DaySchedule:
        return self._entries[date_key(day)]

    def __contains__(self, day: object) -> bool:
        try:
            return date_key(day) in self._entries  # type: ignore[arg-type]
        except ValidationError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ScheduleBook({list(self)!r})"

    def schedules(self) -> list[DaySchedule]:
        """All schedules ordered by date."""
        return [self._entries[key] for key in self]

    def with_schedule(self, schedule: DaySchedule) -> "ScheduleBook":
        """Return a new book with ``schedule`` added or replacing its date."""
        entries = dict(self._entries)
        entries[schedule.date] = schedule
        return ScheduleBook(entries.values())

    def get_or_default(self, day: str | date, operating_hours: TimeRange) -> DaySchedule:
        """Return the stored schedule or an empty one with ``operating_hours``."""
        key = date_key(day)
        existing = self._entries.get(key)
        if existing is not None:
            return existing
        return DaySchedule.default(key, operating_hours)
