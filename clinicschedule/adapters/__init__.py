"""
Adapters layer - Loading schedule snapshots from external storage.
"""

from .json_loader import JsonScheduleLoader, load_schedule

__all__ = ["JsonScheduleLoader", "load_schedule"]
