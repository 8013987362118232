"""
Tests for domain models.
"""

import pendulum
import pytest
from datetime import time

from clinicschedule.domain.exceptions import InvalidAppointmentError
from clinicschedule.domain.models import (
    Appointment,
    AppointmentType,
    DayHours,
    Doctor,
    PopulatedAppointment,
    Patient,
    ScheduleData,
    TimeRange,
    TimeSlot,
    WorkingHours,
)


def _dt(value):
    return pendulum.parse(value, tz="Europe/Berlin")


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = _dt("2024-11-25 09:00")
        end = _dt("2024-11-25 17:00")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.duration_minutes() == 480  # 8 hours

    def test_invalid_time_range_raises_error(self):
        """Test that creating an inverted time range raises ValueError."""
        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=_dt("2024-11-25 17:00"), end=_dt("2024-11-25 09:00"))

    def test_empty_time_range_raises_error(self):
        """A zero-length range violates start < end."""
        with pytest.raises(ValueError):
            TimeRange(start=_dt("2024-11-25 09:00"), end=_dt("2024-11-25 09:00"))

    def test_fractional_duration(self):
        """Durations keep seconds as fractions of a minute."""
        tr = TimeRange(start=_dt("2024-11-25 09:00:00"), end=_dt("2024-11-25 09:10:30"))

        assert tr.duration_minutes() == 10.5

    def test_contains_excludes_end(self):
        """Half-open: the start instant is inside, the end instant is not."""
        tr = TimeRange(start=_dt("2024-11-25 09:00"), end=_dt("2024-11-25 09:30"))

        assert tr.contains(_dt("2024-11-25 09:00"))
        assert tr.contains(_dt("2024-11-25 09:29"))
        assert not tr.contains(_dt("2024-11-25 09:30"))

    def test_overlaps(self):
        """Test overlap detection."""
        tr1 = TimeRange(start=_dt("2024-11-25 09:00"), end=_dt("2024-11-25 12:00"))
        tr2 = TimeRange(start=_dt("2024-11-25 11:00"), end=_dt("2024-11-25 14:00"))
        tr3 = TimeRange(start=_dt("2024-11-25 14:00"), end=_dt("2024-11-25 17:00"))

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)
        assert not tr2.overlaps(tr3)  # back to back


class TestTimeSlot:

    def test_slot_delegates_to_range(self):
        slot = TimeSlot(
            time_range=TimeRange(start=_dt("2024-11-25 09:00"), end=_dt("2024-11-25 09:30")),
            label="9:00 AM",
        )

        assert slot.start == _dt("2024-11-25 09:00")
        assert slot.end == _dt("2024-11-25 09:30")
        assert slot.duration_minutes() == 30
        assert slot.overlaps(_dt("2024-11-25 09:15"), _dt("2024-11-25 10:00"))
        assert not slot.overlaps(_dt("2024-11-25 09:30"), _dt("2024-11-25 10:00"))

    def test_format_display(self):
        slot = TimeSlot(
            time_range=TimeRange(start=_dt("2024-11-25 09:00"), end=_dt("2024-11-25 09:30")),
            label="9:00 AM",
        )

        assert slot.format_display() == "Monday, 2024-11-25 | 9:00 AM – 9:30 AM"


class TestWorkingHours:
    """Tests for WorkingHours model."""

    def test_is_working_day(self):
        """Test working day detection."""
        working_hours = WorkingHours(
            monday=DayHours(time(9, 30), time(17, 0)),
            friday=DayHours(time(9, 30), time(13, 0)),
        )

        assert working_hours.is_working_day(_dt("2024-11-25"))  # Monday
        assert working_hours.is_working_day(_dt("2024-11-29"))  # Friday
        assert not working_hours.is_working_day(_dt("2024-11-26"))  # Tuesday
        assert not working_hours.is_working_day(_dt("2024-11-24"))  # Sunday

    def test_get_working_hours_for_day(self):
        """Test getting working hours for a specific day."""
        working_hours = WorkingHours(monday=DayHours(time(9, 30), time(17, 0)))

        work_range = working_hours.get_working_hours_for_day(_dt("2024-11-25"))

        assert work_range is not None
        assert work_range.start == _dt("2024-11-25 09:30")
        assert work_range.end == _dt("2024-11-25 17:00")

    def test_get_working_hours_for_day_off(self):
        """A weekday without an entry yields None."""
        working_hours = WorkingHours(monday=DayHours(time(9, 30), time(17, 0)))

        assert working_hours.get_working_hours_for_day(_dt("2024-11-23")) is None

    def test_from_mapping(self):
        hours = WorkingHours.from_mapping({"tuesday": DayHours(time(8, 0), time(12, 0)), "sunday": None})

        assert hours.for_weekday(1) == DayHours(time(8, 0), time(12, 0))
        assert hours.for_weekday(6) is None
        assert hours.as_dict()["monday"] is None

    def test_from_mapping_rejects_unknown_day(self):
        with pytest.raises(ValueError, match="Unknown weekday"):
            WorkingHours.from_mapping({"funday": None})

    def test_day_hours_must_open_before_closing(self):
        with pytest.raises(ValueError):
            DayHours(time(17, 0), time(9, 0))


class TestAppointment:

    def _appointment(self, start, end):
        return Appointment(
            id="apt-1",
            doctor_id="doctor-1",
            patient_id="patient-1",
            start_time=_dt(start),
            end_time=_dt(end),
            type=AppointmentType.CHECKUP,
            status="scheduled",
        )

    def test_duration(self):
        apt = self._appointment("2024-11-25 10:00", "2024-11-25 10:45")

        assert apt.duration_minutes() == 45
        assert apt.time_range == TimeRange(start=_dt("2024-11-25 10:00"), end=_dt("2024-11-25 10:45"))

    def test_end_before_start_is_rejected(self):
        with pytest.raises(InvalidAppointmentError, match="must start before it ends"):
            self._appointment("2024-11-25 10:30", "2024-11-25 10:00")

    def test_invalid_appointment_is_a_value_error(self):
        with pytest.raises(ValueError):
            self._appointment("2024-11-25 10:00", "2024-11-25 10:00")

    def test_plain_string_type_is_coerced(self):
        apt = Appointment(
            id="apt-1",
            doctor_id="doctor-1",
            patient_id="patient-1",
            start_time=_dt("2024-11-25 10:00"),
            end_time=_dt("2024-11-25 10:30"),
            type="checkup",
            status="scheduled",
        )

        assert apt.type is AppointmentType.CHECKUP

    def test_unknown_type_is_rejected(self):
        with pytest.raises(InvalidAppointmentError, match="unknown type 'surgery'"):
            Appointment(
                id="apt-1",
                doctor_id="doctor-1",
                patient_id="patient-1",
                start_time=_dt("2024-11-25 10:00"),
                end_time=_dt("2024-11-25 10:30"),
                type="surgery",
                status="scheduled",
            )

    def test_type_values(self):
        assert AppointmentType("follow-up") is AppointmentType.FOLLOW_UP
        assert [t.value for t in AppointmentType] == ["checkup", "consultation", "follow-up", "procedure"]

    def test_populated_appointment_forwards_fields(self):
        apt = self._appointment("2024-11-25 10:00", "2024-11-25 10:30")
        populated = PopulatedAppointment(
            appointment=apt,
            doctor=Doctor(id="doctor-1", name="Dr. Chen", specialty="Cardiology"),
            patient=Patient(id="patient-1", name="John Smith"),
        )

        assert populated.id == "apt-1"
        assert populated.start_time == apt.start_time
        assert populated.type is AppointmentType.CHECKUP
        assert populated.patient.name == "John Smith"


class TestScheduleData:

    def test_find_doctor_and_patient(self):
        data = ScheduleData(
            doctors=(Doctor(id="doctor-1", name="Dr. Chen", specialty="Cardiology"),),
            patients=(Patient(id="patient-1", name="John Smith"),),
        )

        assert data.find_doctor("doctor-1").name == "Dr. Chen"
        assert data.find_doctor("doctor-9") is None
        assert data.find_patient("patient-1").name == "John Smith"
        assert data.find_patient("patient-9") is None
