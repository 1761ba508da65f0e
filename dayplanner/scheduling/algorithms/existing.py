"""
Recognize sessions that already exist on the calendar by the hashtags in their notes.
"""

from datetime import date
from typing import Iterable, Optional, Set

from ..core.constants import PLANNING_TITLE
from ..core.session import BusyTimeSlot, SessionType
from ..utils.slot_utils import slots_on_day

# First matching tag wins, so an event is never counted twice
_MATCH_ORDER = (SessionType.WORK, SessionType.SIDE, SessionType.DEEP, SessionType.PLANNING)


class ExistingSessions:
    """Per-type counts of tagged events already on the day, plus their titles."""
    def __init__(self, work: int = 0, side: int = 0, deep: int = 0, plan: int = 0,
                 titles: Optional[Set[str]] = None):
        self.work = work
        self.side = side
        self.deep = deep
        self.plan = plan
        self.titles = set(titles or ())

    def count_for(self, session_type: SessionType) -> int:
        return {
            SessionType.WORK: self.work,
            SessionType.SIDE: self.side,
            SessionType.DEEP: self.deep,
            SessionType.PLANNING: self.plan,
        }[session_type]

    @property
    def total(self) -> int:
        """Work, Side and Deep sessions; Planning is not part of the daily quota."""
        return self.work + self.side + self.deep

    def __eq__(self, other):
        if not isinstance(other, ExistingSessions):
            return NotImplemented
        return (self.work, self.side, self.deep, self.plan, self.titles) == \
            (other.work, other.side, other.deep, other.plan, other.titles)

    def __repr__(self):
        return f"ExistingSessions(work={self.work}, side={self.side}, deep={self.deep}, plan={self.plan})"


def classify_slot(slot: BusyTimeSlot) -> Optional[SessionType]:
    """Session type an event belongs to according to its notes, or None for untagged events."""
    for session_type in _MATCH_ORDER:
        if slot.has_tag(session_type.tag):
            return session_type
    return None


def count_existing_sessions(busy_slots: Iterable[BusyTimeSlot], day: date,
                            calendar_names: Optional[Iterable[str]] = None) -> ExistingSessions:
    """
    Count tagged events on `day`. When `calendar_names` is given only events on those calendars count.
    Events without a recognized hashtag are ignored even if they sit on a session calendar.
    """
    allowed = set(calendar_names) if calendar_names is not None else None
    counts = {session_type: 0 for session_type in _MATCH_ORDER}
    titles: Set[str] = set()

    for slot in slots_on_day(busy_slots, day):
        if allowed is not None and slot.calendar_name not in allowed:
            continue
        session_type = classify_slot(slot)
        if session_type is None:
            continue
        counts[session_type] += 1
        if slot.title:
            titles.add(slot.title)

    return ExistingSessions(
        work=counts[SessionType.WORK],
        side=counts[SessionType.SIDE],
        deep=counts[SessionType.DEEP],
        plan=counts[SessionType.PLANNING],
        titles=titles,
    )


def has_planning_session(busy_slots: Iterable[BusyTimeSlot], day: date, planning_name: str = PLANNING_TITLE) -> bool:
    return any(
        slot.title == planning_name or slot.has_tag(SessionType.PLANNING.tag)
        for slot in slots_on_day(busy_slots, day)
    )
