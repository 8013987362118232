"""
JSON snapshot loader - the data-access collaborator of the engine.

Reads doctors, patients and appointments from a JSON document, validates
every record with pydantic and converts it into immutable domain models.

Expected document shape (camelCase keys, ``snake_case`` also accepted)::

    {
        "doctors": [{"id": "...", "name": "...", "specialty": "...",
                     "workingHours": {"monday": {"start": "09:00", "end": "17:00"}}}],
        "patients": [{"id": "...", "name": "..."}],
        "appointments": [{"id": "...", "doctorId": "...", "patientId": "...",
                          "startTime": "2024-11-25T10:00:00", "endTime": "...",
                          "type": "checkup", "status": "scheduled"}]
    }
"""

from __future__ import annotations

import json
import logging
from datetime import date, time
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

import pendulum
from pendulum import DateTime
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.exceptions import DataLoadError
from ..domain.models import (
    WEEKDAY_NAMES,
    Appointment,
    AppointmentType,
    DayHours,
    Doctor,
    Patient,
    ScheduleData,
    WorkingHours,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DayHoursRecord(_Record):
    start: time
    end: time

    def to_domain(self) -> DayHours:
        return DayHours(start=self.start, end=self.end)


class DoctorRecord(_Record):
    id: str
    name: str
    specialty: str
    email: str = ""
    phone: str = ""
    working_hours: Dict[str, Optional[DayHoursRecord]] = Field(
        default_factory=dict, alias="workingHours"
    )

    @field_validator("working_hours")
    @classmethod
    def validate_weekdays(
        cls, value: Dict[str, Optional[DayHoursRecord]]
    ) -> Dict[str, Optional[DayHoursRecord]]:
        """Normalize weekday keys to lower case and reject unknown names."""
        normalized = {day.lower(): hours for day, hours in value.items()}
        unknown = [day for day in normalized if day not in WEEKDAY_NAMES]
        if unknown:
            raise ValueError(f"Unknown weekday name(s): {', '.join(sorted(unknown))}")
        return normalized

    def to_domain(self) -> Doctor:
        hours = WorkingHours.from_mapping({
            day: record.to_domain() if record is not None else None
            for day, record in self.working_hours.items()
        })
        return Doctor(
            id=self.id,
            name=self.name,
            specialty=self.specialty,
            email=self.email,
            phone=self.phone,
            working_hours=hours,
        )


class PatientRecord(_Record):
    id: str
    name: str
    email: str = ""
    phone: str = ""
    date_of_birth: Optional[date] = Field(default=None, alias="dateOfBirth")

    def to_domain(self) -> Patient:
        return Patient(
            id=self.id,
            name=self.name,
            email=self.email,
            phone=self.phone,
            date_of_birth=self.date_of_birth,
        )


class AppointmentRecord(_Record):
    id: str
    doctor_id: str = Field(alias="doctorId")
    patient_id: str = Field(alias="patientId")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    type: AppointmentType
    status: str = "scheduled"
    notes: Optional[str] = None

    def to_domain(self, timezone: str) -> Appointment:
        """
        Build the domain appointment.

        Raises:
            ValueError: If an instant cannot be parsed or the appointment
                does not start before it ends
        """
        return Appointment(
            id=self.id,
            doctor_id=self.doctor_id,
            patient_id=self.patient_id,
            start_time=_parse_instant(self.start_time, timezone),
            end_time=_parse_instant(self.end_time, timezone),
            type=self.type,
            status=self.status,
            notes=self.notes,
        )


def _parse_instant(value: str, timezone: str) -> DateTime:
    """
    Parse an ISO 8601 string; strings without an offset are read in ``timezone``.
    """
    dt = pendulum.parse(value, tz=timezone)

    if isinstance(dt, DateTime):
        return dt

    raise ValueError(f"Could not parse datetime: {value}")


class JsonScheduleLoader:
    """
    Loads a schedule snapshot from a JSON file.

    Malformed records are logged and skipped. With ``strict=True`` the first
    malformed record aborts loading with ``DataLoadError`` instead.
    """

    def __init__(self, data_file: Path, timezone: str = "UTC", strict: bool = False):
        self.data_file = Path(data_file)
        self.timezone = timezone
        self.strict = strict

    def load(self) -> ScheduleData:
        """
        Read and parse the snapshot file.

        Raises:
            DataLoadError: If the file is missing, is not valid JSON, or
                (in strict mode) contains a malformed record
        """
        if not self.data_file.exists():
            raise DataLoadError(f"Schedule data file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as exc:
            raise DataLoadError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        return self.parse(payload)

    def parse(self, payload: Any) -> ScheduleData:
        """Convert an already decoded JSON document into ``ScheduleData``."""
        if not isinstance(payload, Mapping):
            raise DataLoadError("Schedule data must contain a mapping at the root level.")

        doctors = self._convert_all(
            payload, "doctors",
            lambda raw: DoctorRecord.model_validate(raw).to_domain()
        )
        patients = self._convert_all(
            payload, "patients",
            lambda raw: PatientRecord.model_validate(raw).to_domain()
        )
        appointments = self._convert_all(
            payload, "appointments",
            lambda raw: AppointmentRecord.model_validate(raw).to_domain(self.timezone)
        )

        logger.info(
            "Loaded %d doctor(s), %d patient(s), %d appointment(s)",
            len(doctors), len(patients), len(appointments)
        )

        return ScheduleData(
            doctors=tuple(doctors),
            patients=tuple(patients),
            appointments=tuple(appointments),
        )

    def _convert_all(
        self,
        payload: Mapping[str, Any],
        section: str,
        convert: Callable[[Any], T]
    ) -> List[T]:
        raw_items = payload.get(section, [])
        if not isinstance(raw_items, list):
            raise DataLoadError(f"'{section}' must be a list, got {type(raw_items).__name__}")

        items: List[T] = []
        seen_ids: set[str] = set()

        for index, raw in enumerate(raw_items):
            try:
                item = convert(raw)
            except (ValidationError, ValueError) as exc:
                record_id = raw.get("id", index) if isinstance(raw, Mapping) else index
                if self.strict:
                    raise DataLoadError(
                        f"Invalid record {record_id!r} in '{section}': {exc}"
                    ) from exc
                logger.warning("Skipping invalid record %r in '%s': %s", record_id, section, exc)
                continue

            if item.id in seen_ids:
                if self.strict:
                    raise DataLoadError(f"Duplicate id {item.id!r} in '{section}'")
                logger.warning("Skipping duplicate id %r in '%s'", item.id, section)
                continue

            seen_ids.add(item.id)
            items.append(item)

        return items


def load_schedule(data_file: Path, timezone: str = "UTC", strict: bool = False) -> ScheduleData:
    """Shortcut for ``JsonScheduleLoader(...).load()``."""
    return JsonScheduleLoader(data_file=data_file, timezone=timezone, strict=strict).load()
