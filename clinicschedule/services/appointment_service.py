"""
Read-only query surface over an injected schedule snapshot.

``AppointmentService`` answers "which appointments exist for doctor D in
period P" and "which start times are still open for doctor D on day X".
The snapshot is passed in at construction time, so tests and callers can
substitute their own fixtures without any global state.

Unknown doctor or patient ids never raise: lookups return ``None`` and
collection queries return empty lists.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence

import pendulum
from pendulum import DateTime

from ..domain.availability import AvailabilityCalculator
from ..domain.models import (
    Appointment,
    AppointmentType,
    Doctor,
    Patient,
    PopulatedAppointment,
    ScheduleData,
)
from ..domain.overlap import find_overlapping, intervals_overlap
from ..domain.stats import AppointmentStats, appointment_duration_minutes, compute_stats

logger = logging.getLogger(__name__)


def to_day_start(day: date, timezone: str = "UTC") -> DateTime:
    """
    Normalize a day argument to the first instant of that calendar day.

    Datetimes keep their own timezone (naive ones are read in ``timezone``);
    plain dates are interpreted in ``timezone``.
    """
    if isinstance(day, datetime):
        return pendulum.instance(day, tz=timezone).start_of("day")
    return pendulum.datetime(day.year, day.month, day.day, tz=timezone)


class AppointmentService:
    """
    Query service over doctors, patients and appointments.

    All methods are side-effect free and return freshly built collections,
    so one instance can be shared between concurrent callers.
    """

    def __init__(self, data: ScheduleData, timezone: str = "UTC") -> None:
        self._data = data
        self._timezone = timezone

    @property
    def timezone(self) -> str:
        return self._timezone

    # Doctors and patients

    def get_all_doctors(self) -> List[Doctor]:
        return list(self._data.doctors)

    def get_doctor_by_id(self, doctor_id: str) -> Optional[Doctor]:
        return self._data.find_doctor(doctor_id)

    def get_all_patients(self) -> List[Patient]:
        return list(self._data.patients)

    def get_patient_by_id(self, patient_id: str) -> Optional[Patient]:
        return self._data.find_patient(patient_id)

    def get_doctors_by_specialty(self) -> Dict[str, List[Doctor]]:
        """Group doctors by specialty, keeping collection order."""
        grouped: Dict[str, List[Doctor]] = defaultdict(list)
        for doctor in self._data.doctors:
            grouped[doctor.specialty].append(doctor)
        return dict(grouped)

    # Appointment queries

    def get_appointments_by_doctor(self, doctor_id: str) -> List[Appointment]:
        return [apt for apt in self._data.appointments if apt.doctor_id == doctor_id]

    def get_appointments_by_doctor_and_date(
        self,
        doctor_id: str,
        day: date
    ) -> List[Appointment]:
        """
        Get a doctor's appointments that start on a given calendar day.

        Only the start instant is considered: an appointment starting at
        23:45 and ending after midnight belongs to its start day.
        """
        day_start = to_day_start(day, self._timezone)
        return self._filter_by_start(
            self.get_appointments_by_doctor(doctor_id),
            day_start,
            day_start.end_of("day")
        )

    def get_appointments_by_doctor_and_date_range(
        self,
        doctor_id: str,
        start_date: date,
        end_date: date
    ) -> List[Appointment]:
        """
        Get a doctor's appointments starting within a range of whole days.

        Both boundaries are widened to full calendar days regardless of the
        time of day passed in, so ``(monday, sunday)`` covers seven days.
        """
        range_start = to_day_start(start_date, self._timezone)
        range_end = to_day_start(end_date, self._timezone).end_of("day")
        return self._filter_by_start(
            self.get_appointments_by_doctor(doctor_id),
            range_start,
            range_end
        )

    @staticmethod
    def _filter_by_start(
        appointments: Iterable[Appointment],
        lower: DateTime,
        upper: DateTime
    ) -> List[Appointment]:
        matches = [apt for apt in appointments if lower <= apt.start_time <= upper]
        logger.debug(
            "%d appointment(s) start between %s and %s",
            len(matches), lower.to_iso8601_string(), upper.to_iso8601_string()
        )
        return matches

    @staticmethod
    def get_appointments_by_type(
        appointments: Iterable[Appointment],
        appointment_type: AppointmentType | str
    ) -> List[Appointment]:
        return [apt for apt in appointments if apt.type == appointment_type]

    @staticmethod
    def get_appointments_by_status(
        appointments: Iterable[Appointment],
        status: str
    ) -> List[Appointment]:
        return [apt for apt in appointments if apt.status == status]

    def get_appointments_count_by_doctor(self) -> Dict[str, int]:
        counts: Dict[str, int] = defaultdict(int)
        for apt in self._data.appointments:
            counts[apt.doctor_id] += 1
        return dict(counts)

    @staticmethod
    def sort_appointments_by_time(appointments: Iterable[Appointment]) -> List[Appointment]:
        """Sort ascending by start time; ties keep their original order."""
        return sorted(appointments, key=lambda apt: apt.start_time)

    # Populated projections

    def get_populated_appointment(self, appointment: Appointment) -> Optional[PopulatedAppointment]:
        """
        Join an appointment with its doctor and patient.

        Returns None if either lookup fails, which points at a data-integrity
        gap in the snapshot rather than a caller error.
        """
        doctor = self.get_doctor_by_id(appointment.doctor_id)
        patient = self.get_patient_by_id(appointment.patient_id)

        if doctor is None or patient is None:
            logger.debug(
                "Appointment %s references unknown doctor %s or patient %s",
                appointment.id, appointment.doctor_id, appointment.patient_id
            )
            return None

        return PopulatedAppointment(appointment=appointment, doctor=doctor, patient=patient)

    def get_populated_appointments(
        self,
        appointments: Iterable[Appointment]
    ) -> List[PopulatedAppointment]:
        """Populate many appointments, silently dropping unresolvable ones."""
        populated = (self.get_populated_appointment(apt) for apt in appointments)
        return [apt for apt in populated if apt is not None]

    # Interval helpers

    @staticmethod
    def get_appointment_duration(appointment: Appointment) -> float:
        return appointment_duration_minutes(appointment)

    @staticmethod
    def check_overlap(first: Appointment, second: Appointment) -> bool:
        """Check if two appointments overlap; back-to-back ones do not."""
        return intervals_overlap(
            first.start_time, first.end_time,
            second.start_time, second.end_time
        )

    @staticmethod
    def find_overlapping_appointments(
        appointments: Iterable[Appointment],
        time_start: DateTime,
        time_end: DateTime
    ) -> List[Appointment]:
        return find_overlapping(appointments, time_start, time_end)

    # Availability and aggregation

    def get_available_time_slots(
        self,
        doctor_id: str,
        day: date,
        slot_duration_minutes: int = 30
    ) -> List[DateTime]:
        """
        Get open appointment start times for a doctor on a given day.

        Returns an empty list for an unknown doctor or a day off.
        """
        doctor = self.get_doctor_by_id(doctor_id)
        if doctor is None:
            logger.debug("No availability for unknown doctor %s", doctor_id)
            return []

        day_start = to_day_start(day, self._timezone)
        booked = self.get_appointments_by_doctor_and_date(doctor_id, day_start)

        calculator = AvailabilityCalculator(working_hours=doctor.working_hours)
        return calculator.find_available_start_times(
            day=day_start,
            booked=booked,
            slot_duration_minutes=slot_duration_minutes
        )

    @staticmethod
    def get_appointment_stats(appointments: Sequence[Appointment]) -> AppointmentStats:
        return compute_stats(appointments)
