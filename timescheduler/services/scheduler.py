"""
Application service owning the authoritative schedule state.

The service holds the current :class:`ScheduleBook`, the selected date and
the user's pending slot selection, and routes every booking change through
the domain-level ``DayScheduleEngine``. Mutations are serialized with a lock
so a batch confirmation is never interleaved with another writer.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import List, Optional, Protocol

from ..domain.day_schedule_engine import DayScheduleEngine
from ..domain.exceptions import ValidationError
from ..domain.models import DaySchedule, ScheduleBook, TimeRange, TimeSlot, date_key

logger = logging.getLogger(__name__)


class ScheduleStoreProtocol(Protocol):
    """Protocol describing the storage behaviour needed by the service."""

    def load(self) -> ScheduleBook:
        """Return the stored schedules."""

    def save(self, book: ScheduleBook) -> None:
        """Persist the given schedules."""


class TimeSchedulerService:
    """
    Explicit state holder for a booking UI.

    Dependency inversion toward a store protocol keeps persistence optional:
    without a store the service is purely in-memory.
    """

    def __init__(
        self,
        schedules: ScheduleBook,
        engine: DayScheduleEngine,
        default_hours: TimeRange,
        store: Optional[ScheduleStoreProtocol] = None,
    ) -> None:
        self._schedules = schedules
        self._engine = engine
        self._default_hours = default_hours
        self._store = store
        self._lock = threading.Lock()
        self._selected_date: Optional[str] = None
        self._selected_slots: List[TimeSlot] = []

    @classmethod
    def from_store(
        cls,
        store: ScheduleStoreProtocol,
        engine: DayScheduleEngine,
        default_hours: TimeRange,
    ) -> "TimeSchedulerService":
        """Create a service seeded from, and saving back to, ``store``."""
        return cls(
            schedules=store.load(),
            engine=engine,
            default_hours=default_hours,
            store=store,
        )

    @property
    def schedules(self) -> ScheduleBook:
        return self._schedules

    @property
    def selected_date(self) -> Optional[str]:
        return self._selected_date

    @property
    def selected_slots(self) -> List[TimeSlot]:
        return list(self._selected_slots)

    def schedule_for(self, day: str | date) -> DaySchedule:
        """Return the stored schedule for ``day`` or an empty default one."""
        return self._schedules.get_or_default(day, self._default_hours)

    def slots_for(self, day: str | date) -> List[TimeSlot]:
        return self._engine.generate_slots(self.schedule_for(day))

    def select_date(self, day: Optional[str | date]) -> None:
        """Select a date (or clear it with ``None``); drops any pending slot selection."""
        self._selected_date = date_key(day) if day is not None else None
        self._selected_slots = []

    def available_time_slots(self) -> List[TimeSlot]:
        """Slots for the selected date, or an empty list when none is selected."""
        if self._selected_date is None:
            return []
        return self.slots_for(self._selected_date)

    def toggle_slot(self, slot: TimeSlot) -> bool:
        """
        Add ``slot`` to the pending selection, or remove it if already selected.

        Returns:
            True if the slot is selected afterwards

        Raises:
            ValidationError: If no date is selected or the slot is booked
        """
        if self._selected_date is None:
            raise ValidationError("Select a date before selecting time slots")

        for index, selected in enumerate(self._selected_slots):
            if selected.time_range == slot.time_range:
                del self._selected_slots[index]
                return False

        current = self._find_current_slot(slot.time_range)
        if current is None:
            raise ValidationError(f"{slot.time_range} is not a slot on {self._selected_date}")
        if current.is_booked:
            raise ValidationError(f"Slot {slot.time_range} on {self._selected_date} is already booked")

        self._selected_slots.append(current)
        self._selected_slots.sort(key=lambda s: s.start_time)
        return True

    def clear_selection(self) -> None:
        self._selected_slots = []

    def confirm_selection(self) -> List[TimeRange]:
        """
        Book every selected slot as a batch of sequential bookings.

        A selected date without a stored schedule gets the default one first.

        Returns:
            The booked ranges in slot order
        """
        if self._selected_date is None or not self._selected_slots:
            return []

        day = self._selected_date
        ranges = [slot.time_range for slot in self._selected_slots]

        with self._lock:
            book = self._with_schedule(self._schedules, day)
            for booking in ranges:
                book = self._engine.add_booking(book, day, booking)
            self._commit(book)

        logger.info("Confirmed %d booking(s) on %s", len(ranges), day)
        self._selected_slots = []
        return ranges

    def ensure_schedule(self, day: str | date) -> DaySchedule:
        """Store the default schedule for ``day`` if none exists and return it."""
        with self._lock:
            book = self._with_schedule(self._schedules, day)
            if book is not self._schedules:
                self._commit(book)
        return self._schedules[day]

    def add_booking(self, day: str | date, booking: TimeRange, *, strict: bool = False) -> DaySchedule:
        """Book ``booking`` on an existing schedule and return the resulting day."""
        key = date_key(day)
        with self._lock:
            self._commit(self._engine.add_booking(self._schedules, key, booking, strict=strict))
        return self.schedule_for(key)

    def remove_booking(self, day: str | date, booking: TimeRange, *, strict: bool = False) -> DaySchedule:
        """Cancel bookings exactly matching ``booking`` and return the resulting day."""
        key = date_key(day)
        with self._lock:
            self._commit(self._engine.remove_booking(self._schedules, key, booking, strict=strict))
        return self.schedule_for(key)

    def _find_current_slot(self, time_range: TimeRange) -> Optional[TimeSlot]:
        for candidate in self.available_time_slots():
            if candidate.time_range == time_range:
                return candidate
        return None

    def _with_schedule(self, book: ScheduleBook, day: str | date) -> ScheduleBook:
        if day in book:
            return book
        logger.info("Creating default schedule for %s", date_key(day))
        return book.with_schedule(DaySchedule.default(day, self._default_hours))

    def _commit(self, book: ScheduleBook) -> None:
        if book is self._schedules:
            return
        if self._store is not None:
            self._store.save(book)
        self._schedules = book
