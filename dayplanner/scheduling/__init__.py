"""
Day Planner Scheduling System

Places Work, Side, Deep and Planning sessions into the free gaps of a single day.
Pure, synchronous and free of I/O, so it works the same behind the API or on its own.
"""

from .core.scheduler import SchedulingEngine, ScheduleResult, ScheduleStatus
from .core.session import SessionType, ScheduledSession, BusyTimeSlot
from .core.time_slot import TimeGap
from .core.configuration import (
    SchedulingConfiguration, DeepSessionConfig, CalendarMapping, Preset, DEFAULT_PRESETS, get_preset
)
from .core.exceptions import InvalidConfiguration
from .algorithms.patterns import SchedulePattern, generate_order
from .algorithms.availability import AvailabilitySummary, free_gaps, calculate_availability
from .algorithms.existing import ExistingSessions, count_existing_sessions, has_planning_session

# Version for future API compatibility
__version__ = "1.0.0"
