"""
Shared fixtures: a small clinic with two doctors and one week of bookings.

2024-11-25 is a Monday.
"""

from datetime import time

import pendulum
import pytest

from clinicschedule.domain.models import (
    Appointment,
    AppointmentType,
    DayHours,
    Doctor,
    Patient,
    ScheduleData,
    WorkingHours,
)
from clinicschedule.services.appointment_service import AppointmentService

TZ = "Europe/Berlin"


def _apt(apt_id, doctor_id, patient_id, start, end, apt_type=AppointmentType.CHECKUP, status="scheduled"):
    return Appointment(
        id=apt_id,
        doctor_id=doctor_id,
        patient_id=patient_id,
        start_time=pendulum.parse(start, tz=TZ),
        end_time=pendulum.parse(end, tz=TZ),
        type=apt_type,
        status=status,
    )


@pytest.fixture
def doctor_chen():
    return Doctor(
        id="doctor-1",
        name="Dr. Sarah Chen",
        specialty="Cardiology",
        working_hours=WorkingHours(
            monday=DayHours(time(9, 0), time(12, 0)),
            tuesday=DayHours(time(9, 0), time(17, 0)),
            wednesday=DayHours(time(9, 0), time(17, 0)),
        ),
    )


@pytest.fixture
def doctor_rodriguez():
    return Doctor(
        id="doctor-2",
        name="Dr. Michael Rodriguez",
        specialty="Pediatrics",
        working_hours=WorkingHours(monday=DayHours(time(8, 0), time(16, 0))),
    )


@pytest.fixture
def appointments():
    return (
        _apt("apt-1", "doctor-1", "patient-1", "2024-11-25 10:00", "2024-11-25 10:30"),
        _apt("apt-2", "doctor-1", "patient-2", "2024-11-27 09:00", "2024-11-27 09:30",
             AppointmentType.CONSULTATION),
        _apt("apt-3", "doctor-1", "patient-1", "2024-12-01 23:45", "2024-12-02 00:15",
             AppointmentType.FOLLOW_UP),
        _apt("apt-4", "doctor-1", "patient-2", "2024-11-27 09:00", "2024-11-27 09:45",
             AppointmentType.PROCEDURE, status="completed"),
        _apt("apt-5", "doctor-1", "patient-1", "2024-12-02 09:00", "2024-12-02 09:30"),
        _apt("apt-6", "doctor-1", "patient-2", "2024-11-24 15:00", "2024-11-24 15:30"),
        _apt("apt-7", "doctor-1", "patient-unknown", "2024-11-26 14:00", "2024-11-26 14:30"),
        _apt("apt-8", "doctor-2", "patient-1", "2024-11-25 11:00", "2024-11-25 12:00",
             AppointmentType.CONSULTATION),
    )


@pytest.fixture
def schedule_data(doctor_chen, doctor_rodriguez, appointments):
    return ScheduleData(
        doctors=(doctor_chen, doctor_rodriguez),
        patients=(
            Patient(id="patient-1", name="John Smith"),
            Patient(id="patient-2", name="Emma Wilson"),
        ),
        appointments=appointments,
    )


@pytest.fixture
def service(schedule_data):
    return AppointmentService(data=schedule_data, timezone=TZ)
