"""
Service layer helpers that own schedule state and orchestrate the engine.
"""

from .scheduler import ScheduleStoreProtocol, TimeSchedulerService

__all__ = ["ScheduleStoreProtocol", "TimeSchedulerService"]
