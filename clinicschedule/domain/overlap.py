"""
Overlap detection for half-open time intervals.

Two intervals ``[a_start, a_end)`` and ``[b_start, b_end)`` overlap when
each one starts before the other ends. Intervals sharing only a boundary
instant (back-to-back appointments) do not overlap.
"""

from datetime import datetime
from typing import Iterable, List, Protocol, TypeVar


class Interval(Protocol):
    """Anything exposing ``start`` and ``end`` instants."""

    @property
    def start(self) -> datetime: ...

    @property
    def end(self) -> datetime: ...


class Booking(Protocol):
    """Anything exposing ``start_time`` and ``end_time`` instants."""

    @property
    def start_time(self) -> datetime: ...

    @property
    def end_time(self) -> datetime: ...


B = TypeVar("B", bound=Booking)


def intervals_overlap(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime
) -> bool:
    """Return True if ``[a_start, a_end)`` and ``[b_start, b_end)`` overlap."""
    return a_start < b_end and b_start < a_end


def overlaps(a: Interval, b: Interval) -> bool:
    """Symmetric overlap predicate over two intervals."""
    return intervals_overlap(a.start, a.end, b.start, b.end)


def find_overlapping(
    bookings: Iterable[B],
    window_start: datetime,
    window_end: datetime
) -> List[B]:
    """
    Return the bookings that overlap the window ``[window_start, window_end)``.

    Input order is preserved.
    """
    return [
        booking for booking in bookings
        if intervals_overlap(booking.start_time, booking.end_time, window_start, window_end)
    ]
