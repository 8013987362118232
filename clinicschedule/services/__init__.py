"""
Service layer helpers that orchestrate queries over the domain logic.
"""

from .appointment_service import AppointmentService, to_day_start
from .schedule_service import DaySchedule, ScheduleService, WeekSchedule

__all__ = ["AppointmentService", "DaySchedule", "ScheduleService", "WeekSchedule", "to_day_start"]
