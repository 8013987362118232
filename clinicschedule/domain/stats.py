"""
Read-only summary numbers over a collection of appointments.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable

from .models import Appointment


def appointment_duration_minutes(appointment: Appointment) -> float:
    """Duration of an appointment in minutes, not rounded."""
    return appointment.duration_minutes()


@dataclass(frozen=True)
class AppointmentStats:
    total: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)
    by_status: Dict[str, int] = field(default_factory=dict)
    total_duration_minutes: float = 0.0
    average_duration_minutes: float = 0.0


def compute_stats(appointments: Iterable[Appointment]) -> AppointmentStats:
    """
    Count appointments by type and status and sum up their durations.

    The average of an empty collection is defined as 0.
    """
    items = list(appointments)
    total = len(items)

    by_type = Counter(apt.type.value for apt in items)
    by_status = Counter(apt.status for apt in items)
    total_duration = sum((appointment_duration_minutes(apt) for apt in items), 0.0)

    return AppointmentStats(
        total=total,
        by_type=dict(by_type),
        by_status=dict(by_status),
        total_duration_minutes=total_duration,
        average_duration_minutes=total_duration / total if total else 0.0,
    )
