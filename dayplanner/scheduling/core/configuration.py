"""
Configuration value objects consumed by the scheduling engine, and the built-in presets.

Everything here is immutable: the engine reads a configuration per call and never changes it.
Callers build a new configuration (e.g. from a Preset) when settings change.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from ..algorithms.patterns import SchedulePattern
from .constants import (
    EXISTING_EVENT_BUFFER_MINUTES, PLANNING_MIN_REST_MINUTES, PLANNING_TITLE, ROUNDING_INTERVAL_MINUTES
)
from .session import SessionType

CURRENT_PRESET_SCHEMA_VERSION = 2


class CalendarMapping(BaseModel):
    work_calendar_name: str = "Work"
    side_calendar_name: str = "Side Tasks"

    class Config:
        frozen = True


class DeepSessionConfig(BaseModel):
    """Deep sessions are interleaved into the Work/Side sequence rather than part of the pattern."""
    enabled: bool = False
    session_count: int = Field(1, ge=0)
    inject_after_every: int = Field(3, ge=1)
    name: str = "Deep Session"
    duration: int = Field(15, ge=1)
    calendar_name: str = "Work"

    class Config:
        frozen = True


class SchedulingConfiguration(BaseModel):
    # Session counts
    work_session_count: int = Field(5, ge=0)
    side_session_count: int = Field(2, ge=0)

    # Session names
    work_session_name: str = "Work Session"
    side_session_name: str = "Side Session"

    # Durations (minutes)
    work_session_duration: int = Field(40, ge=1)
    side_session_duration: int = Field(30, ge=1)
    planning_duration: int = Field(15, ge=1)
    rest_duration: int = Field(20, ge=0)
    side_rest_duration: Optional[int] = Field(None, ge=0)  # None: 75% of rest_duration
    deep_rest_duration: int = Field(20, ge=0)

    # Ordering
    schedule_planning: bool = True
    pattern: SchedulePattern = SchedulePattern.ALTERNATING
    work_sessions_per_cycle: int = Field(2, ge=1)
    side_sessions_per_cycle: int = Field(1, ge=1)
    side_first: bool = False

    deep_session_config: DeepSessionConfig = Field(default_factory=DeepSessionConfig)
    calendar_mapping: CalendarMapping = Field(default_factory=CalendarMapping)

    # Placement behaviour
    aware_existing_tasks: bool = True
    flexible_side_scheduling: bool = False
    fill_gaps_with_alternate: bool = False

    # Custom task titles, drawn in order when enabled
    work_tasks: List[str] = Field(default_factory=list)
    side_tasks: List[str] = Field(default_factory=list)
    deep_tasks: List[str] = Field(default_factory=list)
    use_work_tasks: bool = False
    use_side_tasks: bool = False
    use_deep_tasks: bool = False

    # Day boundaries and granularity
    event_buffer_minutes: int = Field(EXISTING_EVENT_BUFFER_MINUTES, ge=0)
    rounding_interval_minutes: int = Field(ROUNDING_INTERVAL_MINUTES, ge=1)
    day_end_hour: int = Field(24, ge=1, le=24)

    class Config:
        frozen = True

    @property
    def side_rest(self) -> int:
        if self.side_rest_duration is not None:
            return self.side_rest_duration
        return max(5, int(self.rest_duration * 0.75))

    def duration_for(self, session_type: SessionType) -> int:
        if session_type == SessionType.WORK:
            return self.work_session_duration
        if session_type == SessionType.SIDE:
            return self.side_session_duration
        if session_type == SessionType.DEEP:
            return self.deep_session_config.duration
        return self.planning_duration

    def rest_for(self, session_type: SessionType) -> int:
        if session_type == SessionType.WORK:
            return self.rest_duration
        if session_type == SessionType.SIDE:
            return self.side_rest
        if session_type == SessionType.DEEP:
            return self.deep_rest_duration
        return max(PLANNING_MIN_REST_MINUTES, self.rest_duration // 2)

    def calendar_for(self, session_type: SessionType) -> str:
        if session_type == SessionType.SIDE:
            return self.calendar_mapping.side_calendar_name
        if session_type == SessionType.DEEP:
            return self.deep_session_config.calendar_name
        return self.calendar_mapping.work_calendar_name

    def name_for(self, session_type: SessionType) -> str:
        if session_type == SessionType.WORK:
            return self.work_session_name
        if session_type == SessionType.SIDE:
            return self.side_session_name
        if session_type == SessionType.DEEP:
            return self.deep_session_config.name
        return PLANNING_TITLE

    def task_titles_for(self, session_type: SessionType) -> List[str]:
        """Custom titles for a type, or an empty list when custom tasks are off."""
        titles = {
            SessionType.WORK: (self.use_work_tasks, self.work_tasks),
            SessionType.SIDE: (self.use_side_tasks, self.side_tasks),
            SessionType.DEEP: (self.use_deep_tasks, self.deep_tasks),
        }.get(session_type)
        if not titles or not titles[0]:
            return []
        return [t.strip() for t in titles[1] if t.strip()]

    def calendar_names(self) -> List[str]:
        """Calendars whose tagged events count as existing sessions."""
        names = [self.calendar_mapping.work_calendar_name, self.calendar_mapping.side_calendar_name]
        if self.deep_session_config.enabled and self.deep_session_config.calendar_name not in names:
            names.append(self.deep_session_config.calendar_name)
        return names


class Preset(BaseModel):
    """A named snapshot of a SchedulingConfiguration."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    icon: str = "calendar"
    schema_version: int = CURRENT_PRESET_SCHEMA_VERSION
    default_start_hour: int = Field(8, ge=0, le=23)
    configuration: SchedulingConfiguration = Field(default_factory=SchedulingConfiguration)

    @property
    def calendar_mapping(self) -> CalendarMapping:
        return self.configuration.calendar_mapping

    @classmethod
    def from_configuration(cls, name: str, configuration: SchedulingConfiguration,
                           icon: str = "calendar", default_start_hour: int = 8) -> "Preset":
        return cls(name=name, icon=icon, configuration=configuration, default_start_hour=default_start_hour)

    def is_modified(self, configuration: SchedulingConfiguration) -> bool:
        return self.configuration != configuration


def _builtin(name: str, icon: str, default_start_hour: int = 8, **settings) -> Preset:
    return Preset(
        id=str(uuid.uuid5(uuid.NAMESPACE_URL, f"dayplanner:preset:{name}")),
        name=name,
        icon=icon,
        default_start_hour=default_start_hour,
        configuration=SchedulingConfiguration(**settings),
    )


DEFAULT_PRESETS: List[Preset] = [
    _builtin("Standard Workday", "briefcase.fill",
             work_session_count=5, side_session_count=2, pattern=SchedulePattern.ALTERNATING),
    _builtin("Focus Day", "brain.head.profile",
             work_session_count=7, side_session_count=1, work_session_duration=50,
             rest_duration=10, pattern=SchedulePattern.ALL_WORK_FIRST),
    _builtin("Weekend", "sun.max.fill", default_start_hour=10,
             work_session_count=2, side_session_count=4,
             work_session_name="Weekend Work", side_session_name="Weekend Side",
             work_session_duration=30, side_session_duration=45, schedule_planning=False,
             pattern=SchedulePattern.ALL_SIDE_FIRST,
             calendar_mapping=CalendarMapping(work_calendar_name="Weekend Work",
                                              side_calendar_name="Weekend Side")),
    _builtin("Light Day", "leaf.fill",
             work_session_count=3, side_session_count=2, work_session_duration=30,
             rest_duration=30, pattern=SchedulePattern.ALTERNATING),
]


def get_preset(name: str) -> Optional[Preset]:
    for preset in DEFAULT_PRESETS:
        if preset.name.lower() == name.lower():
            return preset
    return None
