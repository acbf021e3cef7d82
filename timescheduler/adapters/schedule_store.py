"""
YAML-backed storage for schedule books.

The engine itself never persists anything; this adapter is what the CLI uses
to load the authoritative schedules and write them back after a change.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from ..domain.exceptions import ScheduleStoreError, ValidationError
from ..domain.models import DaySchedule, ScheduleBook, TimeRange, date_key

logger = logging.getLogger(__name__)

SAMPLE_SCHEDULES_PATH = Path(__file__).parent / "sample_schedules.yaml"


def schedule_from_dict(data: Mapping[str, Any], default_hours: TimeRange) -> DaySchedule:
    """
    Build a DaySchedule from its YAML representation.

    Raises:
        ValidationError: If a date, time or range is malformed
    """
    if not isinstance(data, Mapping) or "date" not in data:
        raise ValidationError(f"Schedule entry needs a 'date', got {data!r}")

    hours = data.get("operating_hours")

    return DaySchedule(
        date=date_key(data["date"]),
        operating_hours=TimeRange.from_dict(hours) if hours else default_hours,
        unavailable_ranges=[TimeRange.from_dict(r) for r in data.get("unavailable_ranges") or []],
        bookings=[TimeRange.from_dict(r) for r in data.get("bookings") or []],
    )


def schedule_to_dict(schedule: DaySchedule) -> Dict[str, Any]:
    return {
        "date": schedule.date,
        "operating_hours": schedule.operating_hours.to_dict(),
        "unavailable_ranges": [r.to_dict() for r in schedule.unavailable_ranges],
        "bookings": [r.to_dict() for r in schedule.bookings],
    }


class YamlScheduleStore:
    """
    Reads and writes a :class:`ScheduleBook` from a YAML file.

    Times must be quoted in the file (``"12:00"``); YAML would otherwise read
    some of them as base-60 integers.
    """

    def __init__(self, path: Path, default_hours: TimeRange):
        """
        Initialize the store.

        Args:
            path: YAML file holding a top-level ``schedules`` list
            default_hours: Operating hours for entries that omit them
        """
        self.path = Path(path)
        self.default_hours = default_hours

    def load(self) -> ScheduleBook:
        """
        Load all schedules from the file.

        A missing file is an empty book.

        Raises:
            ScheduleStoreError: If the file cannot be read or an entry is malformed
        """
        if not self.path.exists():
            logger.info("Schedule file %s does not exist, starting empty", self.path)
            return ScheduleBook()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ScheduleStoreError(f"Could not read schedules from {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ScheduleStoreError(f"{self.path} must contain a mapping at the root level.")

        entries = data.get("schedules") or []
        if not isinstance(entries, list):
            raise ScheduleStoreError(f"'schedules' in {self.path} must be a list.")

        schedules: List[DaySchedule] = []
        for index, entry in enumerate(entries):
            try:
                schedules.append(schedule_from_dict(entry, self.default_hours))
            except ValidationError as exc:
                raise ScheduleStoreError(
                    f"Invalid schedule #{index + 1} in {self.path}: {exc}"
                ) from exc

        try:
            book = ScheduleBook(schedules)
        except ValidationError as exc:
            raise ScheduleStoreError(f"{self.path}: {exc}") from exc

        logger.debug("Loaded %d schedules from %s", len(book), self.path)
        return book

    def save(self, book: ScheduleBook) -> None:
        """
        Write all schedules to the file, ordered by date.

        Raises:
            ScheduleStoreError: If the file cannot be written
        """
        payload = {"schedules": [schedule_to_dict(s) for s in book.schedules()]}

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(payload, f, sort_keys=False, default_flow_style=None)
        except OSError as exc:
            raise ScheduleStoreError(f"Could not write schedules to {self.path}: {exc}") from exc

        logger.debug("Saved %d schedules to %s", len(book), self.path)
