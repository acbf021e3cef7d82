"""
Domain-specific exception hierarchy for the time scheduler.
"""


class SchedulerError(Exception):
    """Base class for all application-level errors."""


class ValidationError(SchedulerError, ValueError):
    """Raised when a time, range, date key or selection is malformed."""


class ScheduleNotFoundError(SchedulerError, LookupError):
    """Raised when a booking targets a date that has no schedule."""

    def __init__(self, date: str):
        super().__init__(f"No schedule found for date {date}")
        self.date = date


class BookingConflictError(SchedulerError):
    """Raised when a booking would double-book time and rejection is enabled."""


class ScheduleStoreError(SchedulerError):
    """Raised when schedule data cannot be read, parsed or written."""
