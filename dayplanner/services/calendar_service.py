"""
Calendar access for the planner: reads busy slots and writes projected sessions as event rows.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import CalendarEvent
from ..scheduling import BusyTimeSlot, ScheduledSession, SchedulingConfiguration
from ..scheduling.algorithms.existing import ExistingSessions, classify_slot
from ..scheduling.algorithms import existing as existing_sessions
from ..scheduling.utils.slot_utils import start_of_day

logger = logging.getLogger(__name__)


def to_busy_slot(event: CalendarEvent) -> BusyTimeSlot:
    return BusyTimeSlot(
        id=str(event.id),
        title=event.title,
        start_time=event.start_time,
        end_time=event.end_time,
        calendar_name=event.calendar_name,
        notes=event.notes,
    )


class CalendarService:
    """Wraps one database session. Create a new service per request."""

    def __init__(self, db: Session):
        self.db = db

    def _day_query(self, day: date):
        day_start = start_of_day(day)
        day_end = day_start + timedelta(days=1)
        return self.db.query(CalendarEvent).filter(
            CalendarEvent.start_time < day_end,
            CalendarEvent.end_time > day_start,
        )

    # ================================
    # READING
    # ================================

    def list_events(self, day: date) -> List[CalendarEvent]:
        return self._day_query(day).order_by(CalendarEvent.start_time.asc()).all()

    def fetch_busy_slots(self, day: date, excluded_calendars: Iterable[str] = ()) -> List[BusyTimeSlot]:
        """Events overlapping `day`, sorted by start, skipping the excluded calendars."""
        excluded = set(excluded_calendars)
        query = self._day_query(day)
        if excluded:
            query = query.filter(CalendarEvent.calendar_name.notin_(excluded))
        return [to_busy_slot(event) for event in query.order_by(CalendarEvent.start_time.asc()).all()]

    def count_existing_sessions(self, day: date, configuration: SchedulingConfiguration) -> ExistingSessions:
        return existing_sessions.count_existing_sessions(
            self.fetch_busy_slots(day), day, configuration.calendar_names()
        )

    def has_planning_session(self, day: date) -> bool:
        return existing_sessions.has_planning_session(self.fetch_busy_slots(day), day)

    # ================================
    # WRITING
    # ================================

    def create_event(self, title: str, start_time: datetime, end_time: datetime,
                     calendar_name: str = "Calendar", notes: Optional[str] = None) -> CalendarEvent:
        if end_time <= start_time:
            raise ValueError("Event must end after it starts")
        event = CalendarEvent(
            title=title,
            start_time=start_time,
            end_time=end_time,
            calendar_name=calendar_name,
            notes=notes,
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event

    def create_sessions(self, sessions: Iterable[ScheduledSession]) -> Tuple[int, int]:
        """
        Write one event per session, tagged with its hashtag. Returns (created, failed).
        A database error rolls the whole batch back and counts every session as failed.
        """
        sessions = list(sessions)
        if not sessions:
            return 0, 0
        try:
            for session in sessions:
                self.db.add(CalendarEvent(
                    title=session.title,
                    start_time=session.start_time,
                    end_time=session.end_time,
                    calendar_name=session.calendar_name,
                    notes=session.notes or session.type.tag,
                ))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create {len(sessions)} sessions: {e}")
            return 0, len(sessions)

        logger.info(f"Created {len(sessions)} sessions")
        return len(sessions), 0

    def delete_session_events(self, day: date, calendar_names: Iterable[str],
                              session_names: Optional[Iterable[str]] = None,
                              require_session_tag: bool = False,
                              after: Optional[datetime] = None) -> int:
        """
        Delete the day's events on the given calendars. Optionally only those starting at or
        after `after`, only those carrying a session hashtag, or only those with a listed title.
        """
        calendars = set(calendar_names)
        names = set(session_names) if session_names is not None else None
        query = self._day_query(day).filter(CalendarEvent.calendar_name.in_(calendars))
        if after is not None:
            query = query.filter(CalendarEvent.start_time >= after)

        deleted = 0
        for event in query.all():
            if names is not None and event.title not in names:
                continue
            if require_session_tag and classify_slot(to_busy_slot(event)) is None:
                continue
            self.db.delete(event)
            deleted += 1

        if deleted:
            self.db.commit()
            logger.info(f"Deleted {deleted} session events on {day.isoformat()}")
        return deleted
