"""
Time-related constraint checking functions.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..core.session import BusyTimeSlot


def find_conflict(start: datetime, end: datetime, busy_slots: Iterable[BusyTimeSlot],
                  buffer_minutes: int = 0) -> Optional[datetime]:
    """
    Return the buffered end of the first busy slot that overlaps [start, end), or None when the range is free.
    """
    buffer = timedelta(minutes=buffer_minutes)
    for slot in busy_slots:
        effective_start = slot.start_time - buffer
        effective_end = slot.end_time + buffer
        if start < effective_end and end > effective_start:
            return effective_end
    return None


def can_fit_session(duration_minutes: int, at: datetime, day_end: datetime,
                    busy_slots: Iterable[BusyTimeSlot], buffer_minutes: int = 0) -> bool:
    """Check if a session of the given length can start exactly at `at`."""
    if duration_minutes <= 0:
        return False
    session_end = at + timedelta(minutes=duration_minutes)
    if session_end > day_end:
        return False
    return find_conflict(at, session_end, busy_slots, buffer_minutes) is None
