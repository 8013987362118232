"""
Domain models for doctors, patients, appointments and time ranges.

All models are immutable value types. They are built once by a data-access
collaborator (see ``clinicschedule.adapters``) and only read afterwards.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from pendulum import DateTime

from .exceptions import InvalidAppointmentError
from .overlap import intervals_overlap


WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> float:
        """Return the duration in minutes, fractions included."""
        return (self.end - self.start).total_seconds() / 60

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return intervals_overlap(self.start, self.end, other.start, other.end)

    def contains(self, instant: DateTime) -> bool:
        """Check if an instant falls inside the range (end excluded)."""
        return self.start <= instant < self.end

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class TimeSlot:
    """
    A single cell of the daily time grid.
    """
    time_range: TimeRange
    label: str  # e.g. "9:30 AM"

    @property
    def start(self) -> DateTime:
        return self.time_range.start

    @property
    def end(self) -> DateTime:
        return self.time_range.end

    def overlaps(self, start: DateTime, end: DateTime) -> bool:
        """Check if an interval (typically an appointment) touches this slot."""
        return intervals_overlap(start, end, self.start, self.end)

    def contains(self, instant: DateTime) -> bool:
        return self.time_range.contains(instant)

    def duration_minutes(self) -> float:
        return self.time_range.duration_minutes()

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Weekday, YYYY-MM-DD | h:mm A – h:mm A
        """
        start = self.start
        weekday = WEEKDAY_NAMES[start.weekday()].capitalize()
        end_label = self.end.format("h:mm A", locale="en")
        return f"{weekday}, {start.format('YYYY-MM-DD')} | {self.label} – {end_label}"


@dataclass(frozen=True)
class DayHours:
    """Opening and closing time of a single working day."""
    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Working day must open before it closes, got {self.start}-{self.end}")

    def __str__(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"


@dataclass(frozen=True)
class WorkingHours:
    """
    Weekly working hours of a doctor.

    One optional entry per weekday; ``None`` means the doctor does not
    work that day.
    """
    monday: Optional[DayHours] = None
    tuesday: Optional[DayHours] = None
    wednesday: Optional[DayHours] = None
    thursday: Optional[DayHours] = None
    friday: Optional[DayHours] = None
    saturday: Optional[DayHours] = None
    sunday: Optional[DayHours] = None

    @classmethod
    def from_mapping(cls, hours: Mapping[str, Optional[DayHours]]) -> "WorkingHours":
        """Build from a ``{"monday": DayHours(...), ...}`` mapping."""
        unknown = set(hours) - set(WEEKDAY_NAMES)
        if unknown:
            raise ValueError(f"Unknown weekday name(s): {', '.join(sorted(unknown))}")
        return cls(**dict(hours))

    def for_weekday(self, weekday: int) -> Optional[DayHours]:
        """Return the entry for a weekday index (0=Monday, 6=Sunday)."""
        return getattr(self, WEEKDAY_NAMES[weekday])

    def is_working_day(self, dt: date) -> bool:
        """Check if a given date falls on a working day."""
        return self.for_weekday(dt.weekday()) is not None

    def get_working_hours_for_day(self, day: DateTime) -> TimeRange | None:
        """
        Get the working hours range for a specific day.
        Returns None if it's not a working day.
        """
        hours = self.for_weekday(day.weekday())
        if hours is None:
            return None

        start = day.set(
            hour=hours.start.hour,
            minute=hours.start.minute,
            second=0,
            microsecond=0
        )
        end = day.set(
            hour=hours.end.hour,
            minute=hours.end.minute,
            second=0,
            microsecond=0
        )

        return TimeRange(start=start, end=end)

    def as_dict(self) -> Dict[str, Optional[DayHours]]:
        return {name: getattr(self, name) for name in WEEKDAY_NAMES}


@dataclass(frozen=True)
class Doctor:
    id: str
    name: str
    specialty: str
    email: str = ""
    phone: str = ""
    working_hours: WorkingHours = field(default_factory=WorkingHours)


@dataclass(frozen=True)
class Patient:
    id: str
    name: str
    email: str = ""
    phone: str = ""
    date_of_birth: Optional[date] = None


class AppointmentType(str, Enum):
    CHECKUP = "checkup"
    CONSULTATION = "consultation"
    FOLLOW_UP = "follow-up"
    PROCEDURE = "procedure"


@dataclass(frozen=True)
class Appointment:
    """
    A booked appointment.

    Invariant: start_time must be before end_time. Violations are rejected
    here so that overlap and duration math never sees degenerate ranges.
    """
    id: str
    doctor_id: str
    patient_id: str
    start_time: DateTime
    end_time: DateTime
    type: AppointmentType
    status: str
    notes: Optional[str] = None

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise InvalidAppointmentError(
                f"Appointment {self.id} must start before it ends "
                f"({self.start_time} >= {self.end_time})"
            )
        try:
            object.__setattr__(self, "type", AppointmentType(self.type))
        except ValueError:
            raise InvalidAppointmentError(
                f"Appointment {self.id} has unknown type {self.type!r}"
            ) from None

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start_time, end=self.end_time)

    def duration_minutes(self) -> float:
        return self.time_range.duration_minutes()


@dataclass(frozen=True)
class PopulatedAppointment:
    """An appointment joined with its resolved doctor and patient."""
    appointment: Appointment
    doctor: Doctor
    patient: Patient

    @property
    def id(self) -> str:
        return self.appointment.id

    @property
    def start_time(self) -> DateTime:
        return self.appointment.start_time

    @property
    def end_time(self) -> DateTime:
        return self.appointment.end_time

    @property
    def type(self) -> AppointmentType:
        return self.appointment.type

    @property
    def status(self) -> str:
        return self.appointment.status

    @property
    def notes(self) -> Optional[str]:
        return self.appointment.notes


@dataclass(frozen=True)
class ScheduleData:
    """
    Read-only snapshot of doctors, patients and appointments.

    Supplied by a data-access collaborator before any query runs.
    """
    doctors: Tuple[Doctor, ...] = ()
    patients: Tuple[Patient, ...] = ()
    appointments: Tuple[Appointment, ...] = ()

    def find_doctor(self, doctor_id: str) -> Doctor | None:
        for doctor in self.doctors:
            if doctor.id == doctor_id:
                return doctor
        return None

    def find_patient(self, patient_id: str) -> Patient | None:
        for patient in self.patients:
            if patient.id == patient_id:
                return patient
        return None
