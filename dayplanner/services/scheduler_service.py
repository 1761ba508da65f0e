"""
Scheduler service that ties the calendar to the scheduling engine for one day at a time.
"""

import logging
from datetime import date, datetime, time
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from .. import config
from ..scheduling import (
    AvailabilitySummary, ScheduledSession, ScheduleResult, SchedulingConfiguration, SchedulingEngine,
    SessionType, get_preset
)
from .calendar_service import CalendarService

logger = logging.getLogger(__name__)


class SchedulerService:
    """Service to project and persist session schedules. Holds no per-user state."""

    def __init__(self, default_start_hour: int = config.DEFAULT_START_HOUR, excluded_calendars=None):
        self.default_start_hour = default_start_hour
        self.excluded_calendars = list(config.EXCLUDED_CALENDARS if excluded_calendars is None else excluded_calendars)

    def resolve_configuration(self, configuration: Optional[SchedulingConfiguration] = None,
                              preset_name: Optional[str] = None) -> Tuple[SchedulingConfiguration, int]:
        """
        Pick the configuration for a request: an explicit configuration wins over a preset,
        a preset over the defaults. Returns it with the start hour to use when none is given.
        """
        start_hour = self.default_start_hour
        if preset_name:
            preset = get_preset(preset_name)
            if preset is None:
                raise ValueError(f"Unknown preset '{preset_name}'")
            start_hour = preset.default_start_hour
            if configuration is None:
                configuration = preset.configuration
        return configuration or SchedulingConfiguration(), start_hour

    def default_start_time(self, day: date, start_time: Optional[datetime] = None,
                           start_hour: Optional[int] = None, now: Optional[datetime] = None) -> datetime:
        """The given start, else now when planning today, else the day at the default start hour."""
        if start_time is not None:
            return start_time
        now = now or datetime.now()
        if day == now.date():
            return now
        hour = self.default_start_hour if start_hour is None else start_hour
        return datetime.combine(day, time(hour=hour))

    # ================================
    # PROJECTION
    # ================================

    def preview(self, db: Session, configuration: SchedulingConfiguration, day: date,
                start_time: Optional[datetime] = None, include_planning: bool = True,
                start_hour: Optional[int] = None) -> ScheduleResult:
        """Project the day's sessions without writing anything."""
        calendar = CalendarService(db)
        busy_slots = calendar.fetch_busy_slots(day, self.excluded_calendars)

        existing = None
        if configuration.aware_existing_tasks:
            existing = calendar.count_existing_sessions(day, configuration)
        if include_planning and configuration.schedule_planning and calendar.has_planning_session(day):
            logger.debug(f"Planning session already on {day.isoformat()}, not adding another")
            include_planning = False

        engine = SchedulingEngine(configuration)
        start = self.default_start_time(day, start_time, start_hour)
        return engine.generate_schedule(start, day, busy_slots, include_planning=include_planning, existing=existing)

    def commit(self, db: Session, configuration: SchedulingConfiguration, day: date,
               start_time: Optional[datetime] = None, include_planning: bool = True,
               start_hour: Optional[int] = None) -> Tuple[ScheduleResult, int, int]:
        """Project the day's sessions and write them to the calendar. Returns (result, created, failed)."""
        result = self.preview(db, configuration, day, start_time, include_planning, start_hour)
        created, failed = CalendarService(db).create_sessions(result.sessions)
        logger.info(f"Committed schedule for {day.isoformat()}: {result.message} "
                    f"({created} created, {failed} failed)")
        return result, created, failed

    def availability(self, db: Session, configuration: SchedulingConfiguration, day: date,
                     start_time: Optional[datetime] = None, start_hour: Optional[int] = None) -> AvailabilitySummary:
        busy_slots = CalendarService(db).fetch_busy_slots(day, self.excluded_calendars)
        start = self.default_start_time(day, start_time, start_hour)
        return SchedulingEngine(configuration).calculate_availability(start, day, busy_slots)

    def project_single(self, db: Session, configuration: SchedulingConfiguration, session_type: SessionType,
                       day: date, start_time: Optional[datetime] = None,
                       start_hour: Optional[int] = None) -> Optional[ScheduledSession]:
        busy_slots = CalendarService(db).fetch_busy_slots(day, self.excluded_calendars)
        start = self.default_start_time(day, start_time, start_hour)
        return SchedulingEngine(configuration).project_single_session(session_type, start, day, busy_slots)


# Global instance
scheduler_service = SchedulerService()
