"""
Free time gap representation for the scheduling system.
"""

from datetime import datetime, timedelta


class TimeGap:
    """
    A contiguous free interval [start, end) on the target day.
    Derived from busy slots every time availability is computed; never stored.
    """
    def __init__(self, start: datetime, end: datetime):
        self.start = start
        self.end = end

    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_minutes(self) -> int:
        return int(self.duration().total_seconds() // 60)

    def fits(self, start: datetime, minutes: int) -> bool:
        """True if [start, start + minutes) lies inside this gap."""
        return self.start <= start and start + timedelta(minutes=minutes) <= self.end

    def __lt__(self, other):
        return self.start < other.start

    def __eq__(self, other):
        if not isinstance(other, TimeGap):
            return NotImplemented
        return self.start == other.start and self.end == other.end

    def __hash__(self):
        return hash((self.start, self.end))

    def __repr__(self):
        return f"TimeGap({self.start.strftime('%I:%M %p')} - {self.end.strftime('%I:%M %p')})"
