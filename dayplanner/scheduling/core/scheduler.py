"""
Main scheduling engine that places sessions into the free gaps of a day.
"""

import enum
import logging
import math
from collections import deque
from datetime import date, datetime, timedelta
from typing import Deque, Dict, Iterable, List, Optional, Tuple

from .configuration import SchedulingConfiguration
from .constants import FLEXIBLE_SIDE_MIN_FRACTION, MAX_PLACEMENT_ATTEMPTS, PLANNING_TITLE
from .session import BusyTimeSlot, ScheduledSession, SessionType
from ..algorithms.availability import AvailabilitySummary, calculate_availability, free_gaps
from ..algorithms.existing import ExistingSessions
from ..algorithms.patterns import generate_order
from ..constraints.time_constraints import can_fit_session
from ..utils.slot_utils import end_of_day, minutes_between, round_to_next_interval, start_of_day

logger = logging.getLogger(__name__)

QUOTA_TYPES = (SessionType.WORK, SessionType.SIDE, SessionType.DEEP)


class ScheduleStatus(str, enum.Enum):
    COMPLETE = "complete"      # everything requested was placed
    PARTIAL = "partial"        # some sessions could not be fitted
    NO_ROOM = "no_room"        # nothing could be fitted
    QUOTA_MET = "quota_met"    # existing sessions already cover the daily quota


class ScheduleResult:
    """Sessions produced by one generate_schedule call plus what the caller needs to report on them."""
    def __init__(self, sessions: List[ScheduledSession], status: ScheduleStatus, message: str,
                 requested: Dict[SessionType, int], produced: Dict[SessionType, int], existing_total: int = 0):
        self.sessions = sessions
        self.status = status
        self.message = message
        self.requested = requested
        self.produced = produced
        self.existing_total = existing_total

    @property
    def missing(self) -> Dict[SessionType, int]:
        return {t: max(0, self.requested.get(t, 0) - self.produced.get(t, 0)) for t in SessionType}

    @property
    def quota_met(self) -> bool:
        return self.status == ScheduleStatus.QUOTA_MET

    def __iter__(self):
        return iter(self.sessions)

    def __len__(self):
        return len(self.sessions)

    def __eq__(self, other):
        if not isinstance(other, ScheduleResult):
            return NotImplemented
        return (self.sessions, self.status, self.message, self.requested, self.produced) == \
            (other.sessions, other.status, other.message, other.requested, other.produced)

    def __repr__(self):
        return f"ScheduleResult({self.status.value}, {len(self.sessions)} sessions)"


class SchedulingEngine:
    """
    Greedy, deterministic placement of Work/Side/Deep/Planning sessions into one day.

    The engine holds only its (immutable) configuration. Every call is a pure function of its
    arguments, so callers may re-run it whenever the calendar or the settings change.
    """
    def __init__(self, configuration: Optional[SchedulingConfiguration] = None):
        self.config = configuration or SchedulingConfiguration()

# ================================
# QUOTA RESOLUTION
# ================================

    def resolve_quota(self, existing: Optional[ExistingSessions] = None) -> Dict[SessionType, int]:
        """Sessions still to schedule per type, after subtracting existing ones when awareness is on."""
        deep = self.config.deep_session_config
        quota = {
            SessionType.WORK: self.config.work_session_count,
            SessionType.SIDE: self.config.side_session_count,
            SessionType.DEEP: deep.session_count if deep.enabled else 0,
        }
        if self.config.aware_existing_tasks and existing is not None:
            for session_type in QUOTA_TYPES:
                quota[session_type] = max(0, quota[session_type] - existing.count_for(session_type))
        return quota

    def build_sequence(self, quota: Dict[SessionType, int], include_planning: bool = True) -> List[SessionType]:
        """Work/Side order from the pattern, led by a Planning token when requested. Deep is injected later."""
        sequence = generate_order(
            self.config.pattern,
            quota[SessionType.WORK],
            quota[SessionType.SIDE],
            self.config.work_sessions_per_cycle,
            self.config.side_sessions_per_cycle,
            self.config.side_first,
        )
        if include_planning and self.config.schedule_planning:
            sequence.insert(0, SessionType.PLANNING)
        return sequence

# ================================
# CORE SCHEDULING LOGIC
# ================================

    def generate_schedule(self, start_time: datetime, base_date: date, busy_slots: Iterable[BusyTimeSlot],
                          include_planning: bool = True,
                          existing: Optional[ExistingSessions] = None) -> ScheduleResult:
        """
        Place sessions from `start_time` to the end of `base_date`.

        Sessions that do not fit anywhere are left out; the result's status and `missing` counts
        tell the caller what happened. Only invalid configuration raises.
        """
        busy_slots = list(busy_slots)
        day_start = start_of_day(base_date)
        day_end = end_of_day(base_date, self.config.day_end_hour)
        aware = self.config.aware_existing_tasks and existing is not None

        quota = self.resolve_quota(existing)
        pending = self.build_sequence(quota, include_planning)
        requested = {t: pending.count(t) for t in SessionType}
        requested[SessionType.DEEP] = quota[SessionType.DEEP]

        titles = self._title_queues(existing)
        inject_after = self.config.deep_session_config.inject_after_every
        deep_remaining = quota[SessionType.DEEP]
        since_deep = 0

        sessions: List[ScheduledSession] = []
        cursor = max(round_to_next_interval(start_time, self.config.rounding_interval_minutes), day_start)
        attempts = 0

        while pending and attempts < MAX_PLACEMENT_ATTEMPTS:
            attempts += 1
            if cursor >= day_end:
                logger.debug(f"Reached end of day, dropping {len(pending)} remaining sessions")
                break

            token = pending.pop(0)
            session = None
            if self.config.fill_gaps_with_alternate:
                session = self._alternate_at_cursor(token, pending, cursor, day_end, busy_slots, titles)
                if session is not None:
                    # The displaced token is retried right after the alternate
                    pending.insert(0, token)
            if session is None:
                session = self._place(token, cursor, day_start, day_end, busy_slots, titles)
            if session is None:
                logger.debug(f"No room left for a {token.value} session after {cursor:%H:%M}")
                continue

            sessions.append(session)
            cursor = self._next_cursor(session)

            if session.type in (SessionType.WORK, SessionType.SIDE):
                since_deep += 1
                if deep_remaining > 0 and since_deep >= inject_after:
                    since_deep = 0
                    deep_remaining -= 1
                    cursor = self._place_deep(cursor, day_start, day_end, busy_slots, titles, sessions)

        # Deep quota the cadence never reached goes after everything else
        while deep_remaining > 0 and cursor < day_end and attempts < MAX_PLACEMENT_ATTEMPTS:
            attempts += 1
            deep_remaining -= 1
            cursor = self._place_deep(cursor, day_start, day_end, busy_slots, titles, sessions)

        produced = {t: sum(1 for s in sessions if s.type == t) for t in SessionType}
        existing_total = existing.total if aware else 0
        # Met only when existing sessions brought a non-zero target down to nothing
        quota_met = aware and not any(quota.values()) and any(self.resolve_quota().values())
        status, message = self._summarize(sessions, requested, produced, quota_met, existing_total)
        logger.debug(f"Schedule for {day_start:%Y-%m-%d}: {message}")
        return ScheduleResult(sessions, status, message, requested, produced, existing_total)

    def project_single_session(self, session_type: SessionType, start_time: datetime, base_date: date,
                               busy_slots: Iterable[BusyTimeSlot]) -> Optional[ScheduledSession]:
        """Find the first slot for exactly one session of the given type, e.g. an ad hoc Planning block."""
        busy_slots = list(busy_slots)
        day_start = start_of_day(base_date)
        day_end = end_of_day(base_date, self.config.day_end_hour)
        cursor = max(round_to_next_interval(start_time, self.config.rounding_interval_minutes), day_start)

        location = self._locate(session_type, cursor, day_start, day_end, busy_slots, allow_reduced=False)
        if location is None:
            return None
        start, minutes = location
        if session_type == SessionType.PLANNING:
            title = PLANNING_TITLE
        else:
            title = f"{session_type.value} Session"
        return ScheduledSession.create(session_type, title, start, start + _minutes(minutes),
                                       self.config.calendar_for(session_type))

    def calculate_availability(self, start_time: datetime, base_date: date,
                               busy_slots: Iterable[BusyTimeSlot]) -> AvailabilitySummary:
        durations = {
            session_type: (self.config.duration_for(session_type), self.config.rest_for(session_type))
            for session_type in QUOTA_TYPES
        }
        return calculate_availability(
            start_time,
            list(busy_slots),
            durations,
            day_start=start_of_day(base_date),
            day_end=end_of_day(base_date, self.config.day_end_hour),
            buffer_minutes=self.config.event_buffer_minutes,
        )

# ================================
# SLOT FINDING
# ================================

    def _locate(self, session_type: SessionType, cursor: datetime, day_start: datetime, day_end: datetime,
                busy_slots: List[BusyTimeSlot], allow_reduced: bool = True) -> Optional[Tuple[datetime, int]]:
        """
        Earliest (start, minutes) at or after the cursor that avoids every buffered busy slot.
        A flexible Side session may shrink to fit a smaller gap; nothing else ever shrinks.
        """
        full = self.config.duration_for(session_type)
        minimum = full
        if allow_reduced and session_type == SessionType.SIDE and self.config.flexible_side_scheduling:
            minimum = max(1, math.ceil(full * FLEXIBLE_SIDE_MIN_FRACTION))

        gaps = free_gaps(day_start, cursor, busy_slots, day_end, self.config.event_buffer_minutes)
        for gap in gaps:
            start = round_to_next_interval(gap.start, self.config.rounding_interval_minutes)
            room = minutes_between(start, gap.end)
            if gap.fits(start, full):
                return start, full
            if room >= minimum:
                return start, room
        return None

    def _place(self, session_type: SessionType, cursor: datetime, day_start: datetime, day_end: datetime,
               busy_slots: List[BusyTimeSlot], titles: Dict[SessionType, Deque[str]]) -> Optional[ScheduledSession]:
        location = self._locate(session_type, cursor, day_start, day_end, busy_slots)
        if location is None:
            return None
        start, minutes = location
        return self._build(session_type, start, minutes, titles)

    def _place_deep(self, cursor: datetime, day_start: datetime, day_end: datetime,
                    busy_slots: List[BusyTimeSlot], titles: Dict[SessionType, Deque[str]],
                    sessions: List[ScheduledSession]) -> datetime:
        """Place one Deep session and return the new cursor. A Deep session that does not fit is dropped."""
        deep = self._place(SessionType.DEEP, cursor, day_start, day_end, busy_slots, titles)
        if deep is None:
            logger.debug(f"No room left for a Deep session after {cursor:%H:%M}")
            return cursor
        sessions.append(deep)
        return self._next_cursor(deep)

    def _alternate_at_cursor(self, token: SessionType, pending: List[SessionType], cursor: datetime,
                             day_end: datetime, busy_slots: List[BusyTimeSlot],
                             titles: Dict[SessionType, Deque[str]]) -> Optional[ScheduledSession]:
        """
        When a Work/Side token cannot start at the cursor, pull the next pending token of the
        other type forward if that one fits right here.
        """
        if token not in (SessionType.WORK, SessionType.SIDE):
            return None
        buffer = self.config.event_buffer_minutes
        if can_fit_session(self.config.duration_for(token), cursor, day_end, busy_slots, buffer):
            return None

        other = SessionType.SIDE if token == SessionType.WORK else SessionType.WORK
        if other not in pending:
            return None
        duration = self.config.duration_for(other)
        if not can_fit_session(duration, cursor, day_end, busy_slots, buffer):
            return None

        pending.remove(other)
        return self._build(other, cursor, duration, titles)

# ================================
# SESSION BUILDING
# ================================

    def _build(self, session_type: SessionType, start: datetime, minutes: int,
               titles: Dict[SessionType, Deque[str]]) -> ScheduledSession:
        queue = titles.get(session_type)
        title = queue.popleft() if queue else self.config.name_for(session_type)
        return ScheduledSession.create(session_type, title, start, start + _minutes(minutes),
                                       self.config.calendar_for(session_type))

    def _next_cursor(self, session: ScheduledSession) -> datetime:
        rest = self.config.rest_for(session.type)
        return round_to_next_interval(session.end_time + _minutes(rest), self.config.rounding_interval_minutes)

    def _title_queues(self, existing: Optional[ExistingSessions]) -> Dict[SessionType, Deque[str]]:
        """Custom task titles per type, minus titles already on the calendar today."""
        used = existing.titles if existing is not None else set()
        return {
            session_type: deque(t for t in self.config.task_titles_for(session_type) if t not in used)
            for session_type in QUOTA_TYPES
        }

# ================================
# RESULT SUMMARY
# ================================

    def _summarize(self, sessions: List[ScheduledSession], requested: Dict[SessionType, int],
                   produced: Dict[SessionType, int], quota_met: bool,
                   existing_total: int) -> Tuple[ScheduleStatus, str]:
        existing_note = f" (Found {existing_total} existing sessions)" if existing_total > 0 else ""
        missing = any(requested[t] > produced[t] for t in SessionType)

        if quota_met:
            return ScheduleStatus.QUOTA_MET, "Daily quota met by existing sessions." + existing_note
        if not any(requested.values()):
            return ScheduleStatus.COMPLETE, "Nothing to schedule." + existing_note
        if not sessions:
            return ScheduleStatus.NO_ROOM, "No suitable time slots found." + existing_note
        if missing:
            return ScheduleStatus.PARTIAL, f"Projected {len(sessions)} sessions. Quota not met." + existing_note
        return ScheduleStatus.COMPLETE, f"Successfully projected {len(sessions)} sessions." + existing_note


def _minutes(value: int) -> timedelta:
    return timedelta(minutes=value)
