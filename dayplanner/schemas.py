from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date as _date
from typing import Optional, List, Dict

from .scheduling import SchedulingConfiguration, SessionType


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Calendar times are naive local times; convert offset-aware input to match."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


# ----------------- Schedule Schemas ---------------------


class ScheduleRequest(BaseModel):
    date: _date
    start_time: Optional[datetime] = None
    configuration: Optional[SchedulingConfiguration] = None
    preset: Optional[str] = None
    include_planning: bool = True

    _local_start = field_validator("start_time")(lambda cls, v: to_local_naive(v))


class SingleSessionRequest(ScheduleRequest):
    session_type: SessionType = SessionType.PLANNING


class ScheduledSessionOut(BaseModel):
    id: str
    type: SessionType
    hashtag: str
    title: str
    start_time: datetime
    end_time: datetime
    calendar_name: str
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class ScheduleResponse(BaseModel):
    date: _date
    status: str
    message: str
    sessions: List[ScheduledSessionOut]
    requested: Dict[str, int]
    produced: Dict[str, int]
    missing: Dict[str, int]
    existing_sessions: int = 0
    created: int = 0
    failed: int = 0


class SingleSessionResponse(BaseModel):
    date: _date
    session: Optional[ScheduledSessionOut] = None
    message: str


class TimeGapOut(BaseModel):
    start: datetime
    end: datetime
    duration_minutes: int

    class Config:
        from_attributes = True


class AvailabilityOut(BaseModel):
    date: _date
    available_minutes: int
    formatted_available_time: str
    longest_gap_minutes: int
    max_possible_sessions: int
    possible: Dict[str, int]
    gaps: List[TimeGapOut]


class PresetOut(BaseModel):
    id: str
    name: str
    icon: str
    schema_version: int
    default_start_hour: int
    configuration: SchedulingConfiguration

    class Config:
        from_attributes = True


class PatternOut(BaseModel):
    name: str
    value: str
    description: str


# ----------------- Event Schemas ---------------------


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime
    calendar_name: str = "Calendar"
    notes: Optional[str] = None

    _local_times = field_validator("start_time", "end_time")(lambda cls, v: to_local_naive(v))


class EventOut(BaseModel):
    id: int
    title: str
    start_time: datetime
    end_time: datetime
    calendar_name: str
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class DeleteResult(BaseModel):
    date: _date
    deleted: int
