"""
Free time and availability calculation for a single day.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from ..core.session import BusyTimeSlot, SessionType
from ..core.time_slot import TimeGap
from ..utils.slot_utils import busy_intervals, end_of_day, start_of_day


class AvailabilitySummary:
    """Free minutes of a day and an upper bound of how many sessions of each type fit."""
    def __init__(self, available_minutes: int, gaps: List[TimeGap], possible: Dict[SessionType, int]):
        self.available_minutes = available_minutes
        self.gaps = gaps
        self.possible = possible

    @property
    def longest_gap_minutes(self) -> int:
        return max((gap.duration_minutes for gap in self.gaps), default=0)

    @property
    def max_possible_sessions(self) -> int:
        return max(self.possible.values(), default=0)

    @property
    def formatted_available_time(self) -> str:
        hours, minutes = divmod(self.available_minutes, 60)
        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"

    def __repr__(self):
        counts = ", ".join(f"{t.value}={n}" for t, n in self.possible.items())
        return f"AvailabilitySummary({self.formatted_available_time}, {counts})"


def free_gaps(day_start: datetime, search_start: datetime, busy_slots: Iterable[BusyTimeSlot],
              day_end: Optional[datetime] = None, buffer_minutes: int = 0) -> List[TimeGap]:
    """
    Subtract the (coalesced, optionally buffered) busy intervals from
    [max(search_start, day_start), day_end) and return what is left, in order.
    """
    if day_end is None:
        day_end = end_of_day(day_start)

    gaps: List[TimeGap] = []
    cursor = max(search_start, day_start)
    for busy_start, busy_end in busy_intervals(busy_slots, buffer_minutes):
        if busy_start >= day_end:
            break
        if cursor < busy_start:
            gaps.append(TimeGap(cursor, min(busy_start, day_end)))
        if busy_end > cursor:
            cursor = busy_end
        if cursor >= day_end:
            break

    if cursor < day_end:
        gaps.append(TimeGap(cursor, day_end))
    return gaps


def calculate_availability(start_time: datetime, busy_slots: Iterable[BusyTimeSlot],
                           durations: Dict[SessionType, Tuple[int, int]],
                           day_start: Optional[datetime] = None, day_end: Optional[datetime] = None,
                           buffer_minutes: int = 0) -> AvailabilitySummary:
    """
    `durations` maps each session type to (duration, rest) in minutes. Each type's count assumes the
    whole free time went to that type alone, so the counts are independent upper bounds.
    """
    if day_start is None:
        day_start = start_of_day(start_time)
    gaps = free_gaps(day_start, start_time, busy_slots, day_end, buffer_minutes)
    available = sum(gap.duration_minutes for gap in gaps)

    possible = {
        session_type: available // max(1, duration + rest)
        for session_type, (duration, rest) in durations.items()
    }
    return AvailabilitySummary(available, gaps, possible)
