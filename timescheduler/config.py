"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.calendar import DateEligibility
from .domain.day_schedule_engine import DEFAULT_SLOT_DURATION, DayScheduleEngine, LastSlotPolicy
from .domain.exceptions import ValidationError
from .domain.models import TimeOfDay, TimeRange, date_key


class DefaultsConfig(BaseModel):
    """Default slot size and operating hours for days without a stored schedule."""
    slot_duration_minutes: int = DEFAULT_SLOT_DURATION
    opening_time: str = "09:00"
    closing_time: str = "17:00"

    @field_validator("slot_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure slot duration is positive."""
        if value <= 0:
            raise ValueError("slot_duration_minutes must be greater than zero")
        return value

    @field_validator("opening_time", "closing_time", mode="before")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Validate and normalize HH:MM text."""
        try:
            return str(TimeOfDay.parse(v))
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DefaultsConfig":
        """Ensure the configured window opens before it closes."""
        if TimeOfDay.parse(self.closing_time) <= TimeOfDay.parse(self.opening_time):
            raise ValueError("closing_time must be later than opening_time")
        return self

    def get_operating_hours(self) -> TimeRange:
        """Get the default operating hours as a time range."""
        return TimeRange(start=self.opening_time, end=self.closing_time)


class CalendarConfig(BaseModel):
    """Which dates the calendar picker allows."""
    min_date: Optional[str] = None
    max_date: Optional[str] = None
    available_dates: List[str] = Field(default_factory=list)

    # YAML turns unquoted dates into date objects, so normalize before type checks
    @field_validator("min_date", "max_date", mode="before")
    @classmethod
    def validate_optional_date(cls, value) -> Optional[str]:
        if value is None:
            return value
        return cls._normalize(value)

    @field_validator("available_dates", mode="before")
    @classmethod
    def validate_available_dates(cls, value) -> List[str]:
        """Normalize date keys and drop duplicates while preserving order."""
        deduped: List[str] = []
        for item in value or []:
            key = cls._normalize(item)
            if key not in deduped:
                deduped.append(key)
        return deduped

    @model_validator(mode="after")
    def validate_range_order(self) -> "CalendarConfig":
        if self.min_date and self.max_date and self.min_date > self.max_date:
            raise ValueError("min_date must not be after max_date")
        return self

    @staticmethod
    def _normalize(value) -> str:
        try:
            return date_key(value)
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    def get_eligibility(self) -> DateEligibility:
        return DateEligibility.from_strings(
            min_date=self.min_date,
            max_date=self.max_date,
            available_dates=self.available_dates,
        )


class SchedulerConfig(BaseModel):
    """Application configuration."""
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    last_slot_policy: LastSlotPolicy = LastSlotPolicy.OVERSHOOT
    reject_double_booking: bool = False
    schedules_file: Optional[Path] = None

    def build_engine(self) -> DayScheduleEngine:
        """Create a schedule engine with the configured slot behaviour."""
        return DayScheduleEngine(
            slot_duration_minutes=self.defaults.slot_duration_minutes,
            last_slot_policy=self.last_slot_policy,
            reject_double_booking=self.reject_double_booking,
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "SchedulerConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            SchedulerConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative schedule files are resolved next to the config file
        if config.schedules_file is not None and not config.schedules_file.is_absolute():
            config.schedules_file = config_path.parent / config.schedules_file

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
