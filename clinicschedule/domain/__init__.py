"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import AvailabilityCalculator
from .exceptions import DataLoadError, InvalidAppointmentError, ScheduleError
from .models import (
    Appointment,
    AppointmentType,
    DayHours,
    Doctor,
    Patient,
    PopulatedAppointment,
    ScheduleData,
    TimeRange,
    TimeSlot,
    WorkingHours,
)
from .overlap import find_overlapping, intervals_overlap, overlaps
from .stats import AppointmentStats, compute_stats
from .time_grid import generate_time_slots, generate_time_slots_for_days, week_days

__all__ = [
    "Appointment",
    "AppointmentStats",
    "AppointmentType",
    "AvailabilityCalculator",
    "DataLoadError",
    "DayHours",
    "Doctor",
    "InvalidAppointmentError",
    "Patient",
    "PopulatedAppointment",
    "ScheduleData",
    "ScheduleError",
    "TimeRange",
    "TimeSlot",
    "WorkingHours",
    "compute_stats",
    "find_overlapping",
    "generate_time_slots",
    "generate_time_slots_for_days",
    "intervals_overlap",
    "overlaps",
    "week_days",
]
