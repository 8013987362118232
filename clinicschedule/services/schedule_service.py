"""
Day and week schedule projections for calendar front ends.

The service coordinates the appointment queries, the time grid, the
availability calculation and the aggregation so that a caller rendering a
day or week view gets everything in one read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import Dict, Iterable, List, Optional

from pendulum import DateTime

from ..domain.models import Appointment, Doctor, PopulatedAppointment, TimeSlot
from ..domain.overlap import find_overlapping
from ..domain.stats import AppointmentStats, compute_stats
from ..domain.time_grid import (
    DEFAULT_STRIDE_MINUTES,
    DEFAULT_WINDOW_END,
    DEFAULT_WINDOW_START,
    generate_time_slots,
    week_days,
)
from .appointment_service import AppointmentService, to_day_start

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySchedule:
    doctor: Optional[Doctor]
    day: DateTime
    appointments: List[Appointment] = field(default_factory=list)
    populated: List[PopulatedAppointment] = field(default_factory=list)
    slots: List[TimeSlot] = field(default_factory=list)
    available_start_times: List[DateTime] = field(default_factory=list)
    stats: AppointmentStats = field(default_factory=AppointmentStats)


@dataclass(frozen=True)
class WeekSchedule:
    doctor: Optional[Doctor]
    week_start: DateTime
    week_end: DateTime
    days: List[DateTime] = field(default_factory=list)
    appointments: List[Appointment] = field(default_factory=list)
    populated: List[PopulatedAppointment] = field(default_factory=list)
    appointments_by_day: Dict[str, List[Appointment]] = field(default_factory=dict)


class ScheduleService:
    """
    Builds day and week views on top of an ``AppointmentService``.

    Grid settings default to 08:00-18:00 in 30 minute steps.
    """

    def __init__(
        self,
        appointment_service: AppointmentService,
        grid_start: time = DEFAULT_WINDOW_START,
        grid_end: time = DEFAULT_WINDOW_END,
        grid_stride_minutes: int = DEFAULT_STRIDE_MINUTES,
        slot_duration_minutes: int = 30,
    ) -> None:
        self._appointments = appointment_service
        self._grid_start = grid_start
        self._grid_end = grid_end
        self._grid_stride_minutes = grid_stride_minutes
        self._slot_duration_minutes = slot_duration_minutes

    def time_slots(self, day: date) -> List[TimeSlot]:
        """Return the configured grid for a day."""
        return generate_time_slots(
            to_day_start(day, self._appointments.timezone),
            window_start=self._grid_start,
            window_end=self._grid_end,
            stride_minutes=self._grid_stride_minutes
        )

    def day_schedule(self, doctor_id: str, day: date) -> DaySchedule:
        """
        Collect everything a day view needs for one doctor.

        An unknown doctor yields a schedule with ``doctor=None`` and empty
        collections; the grid is still returned.
        """
        day_start = to_day_start(day, self._appointments.timezone)
        slots = self.time_slots(day_start)
        doctor = self._appointments.get_doctor_by_id(doctor_id)

        if doctor is None:
            logger.info("Doctor %s not found, returning empty day schedule", doctor_id)
            return DaySchedule(doctor=None, day=day_start, slots=slots)

        appointments = self._appointments.sort_appointments_by_time(
            self._appointments.get_appointments_by_doctor_and_date(doctor_id, day_start)
        )

        return DaySchedule(
            doctor=doctor,
            day=day_start,
            appointments=appointments,
            populated=self._appointments.get_populated_appointments(appointments),
            slots=slots,
            available_start_times=self._appointments.get_available_time_slots(
                doctor_id,
                day_start,
                slot_duration_minutes=self._slot_duration_minutes
            ),
            stats=compute_stats(appointments),
        )

    def week_schedule(self, doctor_id: str, week_start: date) -> WeekSchedule:
        """
        Collect a doctor's appointments for seven days from ``week_start``.

        ``appointments_by_day`` has an entry (possibly empty) for every day,
        keyed by ISO date.
        """
        first_day = to_day_start(week_start, self._appointments.timezone)
        days = week_days(first_day)
        week_end = days[-1].end_of("day")
        doctor = self._appointments.get_doctor_by_id(doctor_id)

        if doctor is None:
            logger.info("Doctor %s not found, returning empty week schedule", doctor_id)
            return WeekSchedule(
                doctor=None,
                week_start=first_day,
                week_end=week_end,
                days=days,
                appointments_by_day={day.to_date_string(): [] for day in days},
            )

        appointments = self._appointments.sort_appointments_by_time(
            self._appointments.get_appointments_by_doctor_and_date_range(
                doctor_id, first_day, days[-1]
            )
        )

        by_day: Dict[str, List[Appointment]] = {day.to_date_string(): [] for day in days}
        for apt in appointments:
            key = apt.start_time.in_timezone(first_day.timezone).to_date_string()
            by_day.setdefault(key, []).append(apt)

        return WeekSchedule(
            doctor=doctor,
            week_start=first_day,
            week_end=week_end,
            days=days,
            appointments=appointments,
            populated=self._appointments.get_populated_appointments(appointments),
            appointments_by_day=by_day,
        )

    @staticmethod
    def appointments_for_slot(
        slot: TimeSlot,
        appointments: Iterable[Appointment]
    ) -> List[Appointment]:
        """Return the appointments that overlap a grid slot."""
        return find_overlapping(appointments, slot.start, slot.end)
