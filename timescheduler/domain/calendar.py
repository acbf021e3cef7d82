"""
Date eligibility for the calendar picker.

Decides which days a user may pick; it does not touch schedules or slots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Iterable, Iterator, Optional

import pendulum
from pendulum import Date

from .exceptions import ValidationError
from .models import to_date

WEEKEND_DAYS = (pendulum.SATURDAY, pendulum.SUNDAY)


def is_weekend(day: str | date) -> bool:
    """Styling hint only: weekends are never excluded because of this flag."""
    return to_date(day).day_of_week in WEEKEND_DAYS


@dataclass(frozen=True)
class DateEligibility:
    """
    Which calendar days are selectable.

    - ``min_date``: days before it are excluded
    - ``max_date``: days after it are excluded
    - ``available_dates``: if non-empty, only these days are eligible
    """
    min_date: Optional[Date] = None
    max_date: Optional[Date] = None
    available_dates: FrozenSet[Date] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.min_date is not None:
            object.__setattr__(self, "min_date", to_date(self.min_date))
        if self.max_date is not None:
            object.__setattr__(self, "max_date", to_date(self.max_date))
        object.__setattr__(
            self, "available_dates", frozenset(to_date(d) for d in self.available_dates)
        )

        if self.min_date and self.max_date and self.min_date > self.max_date:
            raise ValidationError(
                f"min_date {self.min_date} must not be after max_date {self.max_date}"
            )

    def is_eligible(self, day: str | date) -> bool:
        """Check whether ``day`` may be selected."""
        d = to_date(day)

        if self.min_date is not None and d < self.min_date:
            return False
        if self.max_date is not None and d > self.max_date:
            return False
        if self.available_dates:
            return d in self.available_dates
        return True

    def eligible_dates(self, start: str | date, end: str | date) -> Iterator[Date]:
        """Yield eligible days between ``start`` and ``end``, both inclusive."""
        current = to_date(start)
        last = to_date(end)

        while current <= last:
            if self.is_eligible(current):
                yield current
            current = current.add(days=1)

    @classmethod
    def from_strings(
        cls,
        min_date: Optional[str] = None,
        max_date: Optional[str] = None,
        available_dates: Iterable[str] = (),
    ) -> "DateEligibility":
        return cls(
            min_date=to_date(min_date) if min_date else None,
            max_date=to_date(max_date) if max_date else None,
            available_dates=frozenset(to_date(d) for d in available_dates),
        )
