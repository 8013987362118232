"""
Core business logic for calculating bookable appointment start times.

Pure domain logic without any external dependencies (no I/O). The caller
supplies the doctor's working hours and the appointments already booked
on the day in question.
"""

from bisect import bisect_left
from typing import List, Sequence

from pendulum import DateTime

from .models import Appointment, WorkingHours


class AvailabilityCalculator:
    """
    Calculates open appointment start times for a single doctor and day.

    Algorithm:
    1. Resolve the working window for the day's weekday (none -> no slots)
    2. Walk candidate start times from the window start in fixed steps
    3. Drop every candidate whose ``[t, t + duration)`` overlaps a booking
    4. Return the survivors in generation (ascending) order
    """

    def __init__(self, working_hours: WorkingHours):
        self.working_hours = working_hours

    def find_available_start_times(
        self,
        day: DateTime,
        booked: Sequence[Appointment],
        slot_duration_minutes: int = 30
    ) -> List[DateTime]:
        """
        Find all conflict-free start times on a day.

        A candidate is emitted as long as it starts before the end of the
        working window, even if its full duration runs past closing time.

        Args:
            day: Any instant on the target day
            booked: Conflict set, usually the doctor's appointments that day
            slot_duration_minutes: Step and length of each candidate slot

        Returns:
            Ascending list of candidate start instants
        """
        if slot_duration_minutes <= 0:
            raise ValueError(
                f"slot_duration_minutes must be greater than zero, got {slot_duration_minutes}"
            )

        window = self.working_hours.get_working_hours_for_day(day.start_of("day"))
        if window is None:
            return []

        conflicts = _ConflictSet(booked)
        available: List[DateTime] = []
        current = window.start

        while current < window.end:
            slot_end = current.add(minutes=slot_duration_minutes)
            if not conflicts.overlaps(current, slot_end):
                available.append(current)
            current = slot_end

        return available


class _ConflictSet:
    """
    Booked intervals sorted by start for binary-searched overlap checks.

    Same boundary semantics as ``intervals_overlap``: touching intervals
    do not conflict.
    """

    def __init__(self, booked: Sequence[Appointment]):
        ordered = sorted(booked, key=lambda apt: apt.start_time)
        self._starts = [apt.start_time for apt in ordered]
        self._ends = [apt.end_time for apt in ordered]
        # Running maximum of end times, so one lookup covers long bookings
        # that started well before the candidate.
        self._max_ends: List[DateTime] = []
        for end in self._ends:
            self._max_ends.append(end if not self._max_ends else max(self._max_ends[-1], end))

    def overlaps(self, start: DateTime, end: DateTime) -> bool:
        # Bookings starting at or after ``end`` cannot overlap.
        count = bisect_left(self._starts, end)
        if count == 0:
            return False
        return self._max_ends[count - 1] > start
