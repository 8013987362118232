"""
Domain-specific exception hierarchy for the scheduling engine.
"""


class ScheduleError(Exception):
    """Base class for all application-level errors."""


class InvalidAppointmentError(ScheduleError, ValueError):
    """Raised when an appointment does not start before it ends."""


class DataLoadError(ScheduleError):
    """Raised when schedule data cannot be read or parsed."""
