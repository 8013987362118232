"""
Fixed-cadence time grid for calendar views.

The grid is purely a function of the calendar date: it carries no
appointment data and is regenerated identically for any date.
"""

from datetime import time
from typing import Dict, Iterable, List

from pendulum import DateTime

from .models import TimeRange, TimeSlot


DEFAULT_WINDOW_START = time(8, 0)
DEFAULT_WINDOW_END = time(18, 0)
DEFAULT_STRIDE_MINUTES = 30


def format_slot_label(instant: DateTime) -> str:
    """Format an instant as a 12-hour clock label, e.g. ``9:30 AM``."""
    return instant.format("h:mm A", locale="en")


def generate_time_slots(
    day: DateTime,
    window_start: time = DEFAULT_WINDOW_START,
    window_end: time = DEFAULT_WINDOW_END,
    stride_minutes: int = DEFAULT_STRIDE_MINUTES
) -> List[TimeSlot]:
    """
    Generate consecutive slots covering ``[window_start, window_end)`` of a day.

    A trailing partial slot is dropped when the window does not divide evenly
    by the stride. With the defaults this yields 20 half-hour slots from
    08:00 to 18:00.

    Args:
        day: Any instant on the target day (only the date and timezone are used)
        window_start: Time of day the grid opens
        window_end: Time of day the grid closes
        stride_minutes: Length of each slot

    Returns:
        Ordered list of TimeSlot objects
    """
    if stride_minutes <= 0:
        raise ValueError(f"stride_minutes must be greater than zero, got {stride_minutes}")

    midnight = day.start_of("day")
    current = midnight.set(hour=window_start.hour, minute=window_start.minute)
    closing = midnight.set(hour=window_end.hour, minute=window_end.minute)

    slots: List[TimeSlot] = []

    while True:
        slot_end = current.add(minutes=stride_minutes)
        if slot_end > closing:
            break
        slots.append(
            TimeSlot(
                time_range=TimeRange(start=current, end=slot_end),
                label=format_slot_label(current)
            )
        )
        current = slot_end

    return slots


def generate_time_slots_for_days(
    days: Iterable[DateTime],
    **grid_options
) -> Dict[str, List[TimeSlot]]:
    """Generate a grid per day, keyed by ISO date (``YYYY-MM-DD``)."""
    return {
        day.to_date_string(): generate_time_slots(day, **grid_options)
        for day in days
    }


def week_days(week_start: DateTime) -> List[DateTime]:
    """Return seven consecutive day starts beginning with ``week_start``."""
    first = week_start.start_of("day")
    return [first.add(days=offset) for offset in range(7)]
