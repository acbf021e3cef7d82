"""
Shared fixtures for scheduler tests.
"""

import pytest

from timescheduler.domain.models import DaySchedule, ScheduleBook, TimeRange


@pytest.fixture
def standard_hours() -> TimeRange:
    return TimeRange(start="09:00", end="17:00")


@pytest.fixture
def monday(standard_hours) -> DaySchedule:
    """2024-03-18 with a lunch break and one afternoon booking."""
    return DaySchedule(
        date="2024-03-18",
        operating_hours=standard_hours,
        unavailable_ranges=[TimeRange("12:00", "13:00")],
        bookings=[TimeRange("14:00", "15:00")],
    )


@pytest.fixture
def book(monday, standard_hours) -> ScheduleBook:
    tuesday = DaySchedule(
        date="2024-03-19",
        operating_hours=standard_hours,
        unavailable_ranges=[TimeRange("12:00", "13:00")],
        bookings=[TimeRange("10:30", "11:30")],
    )
    return ScheduleBook([monday, tuesday])
