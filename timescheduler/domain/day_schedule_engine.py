"""
Core business logic for slot generation and booking bookkeeping.

Pure domain logic without any external dependencies (no storage, no I/O).
Every operation reads an immutable value and returns a new one.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, TypeVar

from .exceptions import BookingConflictError, ScheduleNotFoundError, ValidationError
from .interval_set import IntervalSet, overlaps
from .models import END_OF_DAY, DaySchedule, ScheduleBook, TimeOfDay, TimeRange, TimeSlot, date_key

logger = logging.getLogger(__name__)

DEFAULT_SLOT_DURATION = 30

Target = TypeVar("Target", ScheduleBook, DaySchedule)


class LastSlotPolicy(str, Enum):
    """How to end the last slot when the slot size does not divide the window."""

    OVERSHOOT = "overshoot"  # keep the full slot duration, ending past closing time
    TRUNCATE = "truncate"  # cut the last slot at closing time


class DayScheduleEngine:
    """
    Derives slot availability for a day and manages its bookings.

    Algorithm for :meth:`generate_slots`:
    1. Walk a cursor from opening time in fixed ``slot_duration`` steps
    2. Emit ``[cursor, cursor + slot_duration)`` until the cursor reaches closing time
    3. Flag a slot booked when an unavailable range or a booking fully contains it

    Booking mutations accept either a whole :class:`ScheduleBook` or a single
    :class:`DaySchedule` and return an updated value of the same type.
    """

    def __init__(
        self,
        slot_duration_minutes: int = DEFAULT_SLOT_DURATION,
        last_slot_policy: LastSlotPolicy = LastSlotPolicy.OVERSHOOT,
        reject_double_booking: bool = False,
    ):
        if slot_duration_minutes <= 0:
            raise ValidationError("slot_duration_minutes must be greater than zero")

        self.slot_duration_minutes = slot_duration_minutes
        self.last_slot_policy = LastSlotPolicy(last_slot_policy)
        self.reject_double_booking = reject_double_booking

    def generate_slots(self, schedule: DaySchedule) -> List[TimeSlot]:
        """
        Partition the operating hours into slots and flag the blocked ones.

        Returns:
            Slots ordered by start time, contiguous and non-overlapping. Empty
            when the operating window is empty.
        """
        opening = schedule.operating_hours.start
        closing = schedule.operating_hours.end
        blocking = schedule.blocking_ranges()

        slots: List[TimeSlot] = []
        cursor = opening

        while cursor < closing:
            slot_end = self._slot_end(cursor, closing)
            slot_range = TimeRange(start=cursor, end=slot_end)

            slots.append(
                TimeSlot(
                    start_time=cursor,
                    end_time=slot_end,
                    is_booked=overlaps(slot_range, blocking),
                )
            )
            cursor = slot_end

        logger.debug(
            "Generated %d slots for %s (%d booked)",
            len(slots),
            schedule.date,
            sum(1 for slot in slots if slot.is_booked),
        )
        return slots

    def add_booking(
        self,
        target: Target,
        date: str,
        booking: TimeRange,
        *,
        strict: bool = False,
    ) -> Target:
        """
        Append ``booking`` to the bookings of the schedule for ``date``.

        Overlapping bookings are accepted unless the engine was created with
        ``reject_double_booking``. An unknown date leaves ``target`` unchanged.

        Raises:
            ScheduleNotFoundError: If ``strict`` and no schedule exists for ``date``
            BookingConflictError: If double-booking rejection is enabled and
                ``booking`` intersects a booking or unavailable range
        """
        def append(schedule: DaySchedule) -> DaySchedule:
            if self.reject_double_booking:
                self._check_conflicts(schedule, booking)
            logger.debug("Adding booking %s on %s", booking, schedule.date)
            return schedule.with_bookings((*schedule.bookings, booking))

        return self._update(target, date, append, strict=strict)

    def remove_booking(
        self,
        target: Target,
        date: str,
        booking: TimeRange,
        *,
        strict: bool = False,
    ) -> Target:
        """
        Remove every booking whose start and end exactly equal ``booking``.

        No match is a no-op. An unknown date leaves ``target`` unchanged.

        Raises:
            ScheduleNotFoundError: If ``strict`` and no schedule exists for ``date``
        """
        def discard(schedule: DaySchedule) -> DaySchedule:
            remaining = [b for b in schedule.bookings if b != booking]
            if len(remaining) == len(schedule.bookings):
                logger.debug("No booking %s on %s to remove", booking, schedule.date)
                return schedule
            logger.debug("Removing booking %s on %s", booking, schedule.date)
            return schedule.with_bookings(remaining)

        return self._update(target, date, discard, strict=strict)

    def _slot_end(self, cursor: TimeOfDay, closing: TimeOfDay) -> TimeOfDay:
        end_minutes = cursor.minutes + self.slot_duration_minutes

        if self.last_slot_policy is LastSlotPolicy.TRUNCATE:
            return TimeOfDay(min(end_minutes, closing.minutes))

        # The day never rolls over, so an overshooting slot stops at midnight.
        return TimeOfDay(min(end_minutes, END_OF_DAY.minutes))

    def _update(
        self,
        target: Target,
        date: str,
        change: Callable[[DaySchedule], DaySchedule],
        *,
        strict: bool,
    ) -> Target:
        key = date_key(date)

        if isinstance(target, ScheduleBook):
            if key not in target:
                return self._missing(target, key, strict)
            return target.with_schedule(change(target[key]))

        if target.date != key:
            return self._missing(target, key, strict)
        return change(target)

    @staticmethod
    def _missing(target: Target, key: str, strict: bool) -> Target:
        if strict:
            raise ScheduleNotFoundError(key)
        logger.warning("No schedule for %s, booking change ignored", key)
        return target

    @staticmethod
    def _check_conflicts(schedule: DaySchedule, booking: TimeRange) -> None:
        conflicts = IntervalSet(schedule.blocking_ranges()).conflicts(booking)
        if conflicts:
            overlapping = ", ".join(str(r) for r in conflicts)
            raise BookingConflictError(
                f"Booking {booking} on {schedule.date} overlaps {overlapping}"
            )
