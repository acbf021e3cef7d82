"""
Domain layer - Pure business logic without external dependencies.
"""

from .calendar import DateEligibility, is_weekend
from .day_schedule_engine import DayScheduleEngine, LastSlotPolicy
from .exceptions import (
    BookingConflictError,
    ScheduleNotFoundError,
    ScheduleStoreError,
    SchedulerError,
    ValidationError,
)
from .interval_set import IntervalSet, overlaps
from .models import DaySchedule, ScheduleBook, TimeOfDay, TimeRange, TimeSlot

__all__ = [
    "BookingConflictError",
    "DateEligibility",
    "DaySchedule",
    "DayScheduleEngine",
    "IntervalSet",
    "LastSlotPolicy",
    "ScheduleBook",
    "ScheduleNotFoundError",
    "ScheduleStoreError",
    "SchedulerError",
    "TimeOfDay",
    "TimeRange",
    "TimeSlot",
    "ValidationError",
    "is_weekend",
    "overlaps",
]
