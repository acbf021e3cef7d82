"""
Adapters layer - Schedule storage.
"""

from .schedule_store import SAMPLE_SCHEDULES_PATH, YamlScheduleStore

__all__ = ["SAMPLE_SCHEDULES_PATH", "YamlScheduleStore"]
