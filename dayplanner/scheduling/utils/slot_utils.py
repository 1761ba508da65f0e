"""
Interval helpers shared by the availability calculator and the placement engine.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Tuple

from ..core.session import BusyTimeSlot


def round_to_next_interval(value: datetime, interval_minutes: int) -> datetime:
    """Round up to the next interval boundary; values already on a boundary only lose their seconds."""
    clean = value.replace(second=0, microsecond=0)
    if clean < value:
        clean += timedelta(minutes=1)
    remainder = clean.minute % interval_minutes
    if remainder == 0:
        return clean
    return clean + timedelta(minutes=interval_minutes - remainder)


def start_of_day(day) -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min)


def end_of_day(day, day_end_hour: int = 24) -> datetime:
    """Boundary of the scheduling day; hour 24 means the following midnight."""
    return start_of_day(day) + timedelta(hours=day_end_hour)


def busy_intervals(busy_slots: Iterable[BusyTimeSlot], buffer_minutes: int = 0) -> List[Tuple[datetime, datetime]]:
    """
    Busy slots as (start, end) pairs widened by the buffer, sorted, with overlapping and adjacent ones merged.
    A zero-length event still blocks its instant and its buffer.
    """
    buffer = timedelta(minutes=buffer_minutes)
    widened = ((slot.start_time - buffer, slot.end_time + buffer) for slot in busy_slots)
    intervals = sorted((start, end) for start, end in widened if end >= start)

    merged: List[Tuple[datetime, datetime]] = []
    for start, end in intervals:
        if merged and start <= merged[-1][1]:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
        else:
            merged.append((start, end))
    return merged


def slots_on_day(busy_slots: Iterable[BusyTimeSlot], day: date) -> List[BusyTimeSlot]:
    """Busy slots that overlap the given calendar day."""
    day_start = start_of_day(day)
    day_end = day_start + timedelta(days=1)
    return [slot for slot in busy_slots if slot.start_time < day_end and slot.end_time > day_start]


def minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)
