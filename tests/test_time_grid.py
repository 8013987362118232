"""
Tests for the calendar time grid.
"""

from datetime import time

import pendulum
import pytest

from clinicschedule.domain.time_grid import (
    generate_time_slots,
    generate_time_slots_for_days,
    week_days,
)


def _dt(value):
    return pendulum.parse(value, tz="Europe/Berlin")


class TestGenerateTimeSlots:

    def test_default_grid_has_twenty_contiguous_slots(self):
        slots = generate_time_slots(_dt("2024-11-25"))

        assert len(slots) == 20
        assert slots[0].start == _dt("2024-11-25 08:00")
        assert slots[-1].end == _dt("2024-11-25 18:00")
        for previous, current in zip(slots, slots[1:]):
            assert previous.end == current.start
            assert not previous.time_range.overlaps(current.time_range)
        assert all(slot.duration_minutes() == 30 for slot in slots)

    def test_labels_use_twelve_hour_clock(self):
        labels = [slot.label for slot in generate_time_slots(_dt("2024-11-25"))]

        assert labels[:3] == ["8:00 AM", "8:30 AM", "9:00 AM"]
        assert "12:00 PM" in labels
        assert labels[-1] == "5:30 PM"

    def test_time_of_day_of_input_is_ignored(self):
        morning = generate_time_slots(_dt("2024-11-25 00:00"))
        evening = generate_time_slots(_dt("2024-11-25 21:17"))

        assert morning == evening

    def test_trailing_partial_slot_is_dropped(self):
        slots = generate_time_slots(
            _dt("2024-11-25"),
            window_start=time(9, 0),
            window_end=time(10, 0),
            stride_minutes=25,
        )

        assert [slot.label for slot in slots] == ["9:00 AM", "9:25 AM"]
        assert slots[-1].end == _dt("2024-11-25 09:50")

    def test_invalid_stride(self):
        with pytest.raises(ValueError, match="stride_minutes"):
            generate_time_slots(_dt("2024-11-25"), stride_minutes=0)


def test_generate_time_slots_for_days_keys_by_iso_date():
    days = [_dt("2024-11-25"), _dt("2024-11-26")]

    grids = generate_time_slots_for_days(days, stride_minutes=60)

    assert list(grids) == ["2024-11-25", "2024-11-26"]
    assert len(grids["2024-11-26"]) == 10
    assert grids["2024-11-26"][0].start == _dt("2024-11-26 08:00")


def test_week_days_returns_seven_consecutive_days():
    days = week_days(_dt("2024-11-25 15:30"))

    assert len(days) == 7
    assert days[0] == _dt("2024-11-25")
    assert days[-1] == _dt("2024-12-01")
