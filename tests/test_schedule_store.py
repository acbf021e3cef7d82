"""
Tests for the YAML schedule store.
"""

from pathlib import Path

import pytest

from timescheduler.adapters.schedule_store import SAMPLE_SCHEDULES_PATH, YamlScheduleStore
from timescheduler.domain.day_schedule_engine import DayScheduleEngine
from timescheduler.domain.exceptions import ScheduleStoreError
from timescheduler.domain.models import TimeRange

DEFAULT_HOURS = TimeRange("09:00", "17:00")


def test_load_sample_week():
    """The bundled sample week holds five weekdays."""
    book = YamlScheduleStore(SAMPLE_SCHEDULES_PATH, DEFAULT_HOURS).load()

    assert list(book) == ["2024-03-18", "2024-03-19", "2024-03-20", "2024-03-21", "2024-03-22"]
    assert book["2024-03-20"].operating_hours == TimeRange("09:00", "15:00")
    assert book["2024-03-21"].unavailable_ranges[-1] == TimeRange("15:00", "17:00")


def test_missing_file_is_empty(tmp_path: Path):
    """A file that does not exist yet is an empty book."""
    book = YamlScheduleStore(tmp_path / "schedules.yaml", DEFAULT_HOURS).load()

    assert len(book) == 0


def test_save_and_reload(tmp_path: Path):
    """Saved bookings are read back unchanged."""
    engine = DayScheduleEngine()
    sample = YamlScheduleStore(SAMPLE_SCHEDULES_PATH, DEFAULT_HOURS).load()
    updated = engine.add_booking(sample, "2024-03-20", TimeRange("10:00", "10:30"))

    store = YamlScheduleStore(tmp_path / "nested" / "schedules.yaml", DEFAULT_HOURS)
    store.save(updated)

    assert store.load() == updated


def test_missing_operating_hours_use_default(tmp_path: Path):
    """Entries without operating hours get the store's default hours."""
    path = tmp_path / "schedules.yaml"
    path.write_text(
        "schedules:\n"
        "  - date: 2024-03-18\n"
        "    bookings:\n"
        "      - {start: \"09:00\", end: \"10:00\"}\n",
        encoding="utf-8",
    )

    book = YamlScheduleStore(path, DEFAULT_HOURS).load()

    assert book["2024-03-18"].operating_hours == DEFAULT_HOURS
    assert book["2024-03-18"].bookings == (TimeRange("09:00", "10:00"),)


def test_unquoted_time_is_rejected(tmp_path: Path):
    """Unquoted times that YAML reads as numbers are reported."""
    path = tmp_path / "schedules.yaml"
    path.write_text(
        "schedules:\n"
        "  - date: \"2024-03-18\"\n"
        "    unavailable_ranges:\n"
        "      - {start: 12:00, end: 13:00}\n",
        encoding="utf-8",
    )

    with pytest.raises(ScheduleStoreError, match="Invalid schedule #1"):
        YamlScheduleStore(path, DEFAULT_HOURS).load()


@pytest.mark.parametrize("content,message", [
    ("- just\n- a list\n", "mapping at the root level"),
    ("schedules: {date: x}\n", "must be a list"),
    ("schedules:\n  - bookings: []\n", "needs a 'date'"),
    ("schedules: [unclosed\n", "Could not read schedules"),
])
def test_malformed_files(tmp_path: Path, content, message):
    """Malformed files raise ScheduleStoreError."""
    path = tmp_path / "schedules.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ScheduleStoreError, match=message):
        YamlScheduleStore(path, DEFAULT_HOURS).load()


def test_duplicate_dates_rejected(tmp_path: Path):
    """Two entries for one day are rejected."""
    path = tmp_path / "schedules.yaml"
    path.write_text(
        "schedules:\n"
        "  - {date: \"2024-03-18\"}\n"
        "  - {date: \"2024-03-18\"}\n",
        encoding="utf-8",
    )

    with pytest.raises(ScheduleStoreError, match="Duplicate schedule"):
        YamlScheduleStore(path, DEFAULT_HOURS).load()
