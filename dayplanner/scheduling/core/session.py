"""
Session value objects: the session types, placed sessions and busy calendar slots.
"""

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .constants import WORK_TAG, SIDE_TAG, DEEP_TAG, PLAN_TAG


class SessionType(str, enum.Enum):
    WORK = "Work"
    SIDE = "Side"
    PLANNING = "Planning"
    DEEP = "Deep"

    @property
    def default_duration(self) -> int:
        """Default length in minutes."""
        return _DEFAULT_DURATIONS[self]

    @property
    def tag(self) -> str:
        """Hashtag written into event notes, e.g. '#work'."""
        return _TAGS[self]

    @property
    def hashtag(self) -> str:
        """Hashtag without the leading '#'."""
        return self.tag.lstrip("#")


_DEFAULT_DURATIONS = {
    SessionType.WORK: 40,
    SessionType.SIDE: 30,
    SessionType.PLANNING: 15,
    SessionType.DEEP: 15,
}

_TAGS = {
    SessionType.WORK: WORK_TAG,
    SessionType.SIDE: SIDE_TAG,
    SessionType.PLANNING: PLAN_TAG,
    SessionType.DEEP: DEEP_TAG,
}

# Ids of projected sessions are derived from type and start so that
# generating the same schedule twice yields equal sessions.
_SESSION_NAMESPACE = uuid.UUID("6f1c2a4e-93d4-4b7e-9a53-2b0f4f3c8d11")


def session_id_for(session_type: SessionType, start_time: datetime) -> str:
    return str(uuid.uuid5(_SESSION_NAMESPACE, f"{session_type.value}@{start_time.isoformat()}"))


@dataclass(frozen=True)
class ScheduledSession:
    """A placed (projected) session, ready to be written to a calendar."""
    id: str
    type: SessionType
    title: str
    start_time: datetime
    end_time: datetime
    calendar_name: str
    notes: Optional[str] = None

    def __post_init__(self):
        if self.end_time <= self.start_time:
            raise ValueError(f"Session '{self.title}' must end after it starts")

    @classmethod
    def create(cls, session_type: SessionType, title: str, start_time: datetime, end_time: datetime,
               calendar_name: str) -> "ScheduledSession":
        return cls(
            id=session_id_for(session_type, start_time),
            type=session_type,
            title=title,
            start_time=start_time,
            end_time=end_time,
            calendar_name=calendar_name,
            notes=session_type.tag,
        )

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)

    @property
    def hashtag(self) -> str:
        return self.type.hashtag

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start_time < end and self.end_time > start

    def __repr__(self):
        return (f"ScheduledSession({self.type.value}, '{self.title}', "
                f"{self.start_time.strftime('%I:%M %p')} - {self.end_time.strftime('%I:%M %p')})")


@dataclass(frozen=True)
class BusyTimeSlot:
    """An existing calendar event. Read-only input to the engine."""
    id: str
    title: str
    start_time: datetime
    end_time: datetime
    calendar_name: str
    notes: Optional[str] = None

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)

    def has_tag(self, tag: str) -> bool:
        return tag.lower() in (self.notes or "").lower()

    def __repr__(self):
        return (f"BusySlot({self.start_time.strftime('%I:%M %p')} - "
                f"{self.end_time.strftime('%I:%M %p')}, {self.title})")
