"""
Tests for configuration loading and validation.
"""

from pathlib import Path

import pytest

from timescheduler.config import CalendarConfig, DefaultsConfig, SchedulerConfig
from timescheduler.domain.day_schedule_engine import LastSlotPolicy
from timescheduler.domain.models import TimeRange


class TestDefaultsConfig:
    """Tests for DefaultsConfig."""

    def test_defaults(self):
        """Default hours are 09:00-17:00 with 30 minute slots."""
        defaults = DefaultsConfig()

        assert defaults.slot_duration_minutes == 30
        assert defaults.get_operating_hours() == TimeRange("09:00", "17:00")

    def test_times_are_normalized(self):
        """Single-digit hours are normalized."""
        defaults = DefaultsConfig(opening_time="8:00", closing_time="24:00")

        assert defaults.opening_time == "08:00"
        assert defaults.get_operating_hours().duration_minutes() == 16 * 60

    def test_invalid_duration(self):
        """Slot duration must be positive."""
        with pytest.raises(ValueError, match="greater than zero"):
            DefaultsConfig(slot_duration_minutes=0)

    def test_invalid_time(self):
        """Out-of-day times are rejected."""
        with pytest.raises(ValueError, match="24:00"):
            DefaultsConfig(opening_time="25:00")

    def test_closing_before_opening(self):
        """The window must open before it closes."""
        with pytest.raises(ValueError, match="closing_time must be later"):
            DefaultsConfig(opening_time="17:00", closing_time="09:00")


class TestCalendarConfig:
    """Tests for CalendarConfig."""

    def test_dates_normalized_and_deduplicated(self):
        """Allow-list entries are normalized, deduplicated and ordered."""
        from datetime import date

        calendar = CalendarConfig(available_dates=["2024-03-19", date(2024, 3, 19), "2024-03-21"])

        assert calendar.available_dates == ["2024-03-19", "2024-03-21"]

    def test_invalid_date(self):
        """Malformed dates are rejected."""
        with pytest.raises(ValueError, match="Invalid date key"):
            CalendarConfig(min_date="March 1st")

    def test_inverted_bounds(self):
        """min_date after max_date is invalid."""
        with pytest.raises(ValueError, match="min_date must not be after max_date"):
            CalendarConfig(min_date="2024-04-01", max_date="2024-03-01")

    def test_get_eligibility(self):
        """The config builds an eligibility predicate."""
        eligibility = CalendarConfig(min_date="2024-03-18").get_eligibility()

        assert eligibility.is_eligible("2024-03-18")
        assert not eligibility.is_eligible("2024-03-17")


class TestSchedulerConfig:
    """Tests for SchedulerConfig."""

    def test_build_engine(self):
        """The engine follows the configured slot behaviour."""
        config = SchedulerConfig(
            defaults=DefaultsConfig(slot_duration_minutes=15),
            last_slot_policy="truncate",
            reject_double_booking=True,
        )

        engine = config.build_engine()

        assert engine.slot_duration_minutes == 15
        assert engine.last_slot_policy is LastSlotPolicy.TRUNCATE
        assert engine.reject_double_booking is True

    def test_invalid_policy(self):
        """Unknown last-slot policies are rejected."""
        with pytest.raises(ValueError):
            SchedulerConfig(last_slot_policy="pad")

    def test_load_from_yaml(self, tmp_path: Path):
        """YAML files with unquoted dates load and resolve relative paths."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "defaults:\n"
            "  slot_duration_minutes: 45\n"
            "  opening_time: \"08:00\"\n"
            "schedules_file: data/schedules.yaml\n"
            "calendar:\n"
            "  min_date: 2024-03-01\n"
            "  available_dates: [2024-03-18]\n",
            encoding="utf-8",
        )

        config = SchedulerConfig.load_from_yaml(config_path)

        assert config.defaults.slot_duration_minutes == 45
        assert config.defaults.opening_time == "08:00"
        assert config.schedules_file == tmp_path / "data" / "schedules.yaml"
        assert config.calendar.min_date == "2024-03-01"
        assert config.calendar.available_dates == ["2024-03-18"]

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        """An empty file yields the default configuration."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("", encoding="utf-8")

        config = SchedulerConfig.load_from_yaml(config_path)

        assert config.last_slot_policy is LastSlotPolicy.OVERSHOOT
        assert config.schedules_file is None

    def test_missing_file(self, tmp_path: Path):
        """A missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            SchedulerConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        """Broken YAML raises ValueError."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("defaults: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            SchedulerConfig.load_from_yaml(config_path)

    def test_non_mapping_root(self, tmp_path: Path):
        """The root of the config must be a mapping."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping at the root level"):
            SchedulerConfig.load_from_yaml(config_path)
