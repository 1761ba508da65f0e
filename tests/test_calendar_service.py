"""Tests for reading and writing calendar events through SQLAlchemy."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from conftest import DAY, at

from dayplanner.models import CalendarEvent
from dayplanner.scheduling import DeepSessionConfig, ScheduledSession, SchedulingConfiguration, SessionType
from dayplanner.services.calendar_service import CalendarService
from dayplanner.services.scheduler_service import SchedulerService


def add_event(db, title, start, end, calendar_name="Calendar", notes=None):
    return CalendarService(db).create_event(title, start, end, calendar_name, notes)


class TestReading:

    def test_busy_slots_sorted_and_limited_to_day(self, db_session):
        add_event(db_session, "Lunch", at(12), at(13))
        add_event(db_session, "Standup", at(9), at(9, 15))
        add_event(db_session, "Yesterday", at(9, day=DAY.replace(day=9)), at(10, day=DAY.replace(day=9)))

        slots = CalendarService(db_session).fetch_busy_slots(DAY)

        assert [s.title for s in slots] == ["Standup", "Lunch"]

    def test_excluded_calendars(self, db_session):
        add_event(db_session, "Standup", at(9), at(9, 15))
        add_event(db_session, "Birthday", at(0), at(23, 59), calendar_name="Birthdays")

        slots = CalendarService(db_session).fetch_busy_slots(DAY, excluded_calendars=["Birthdays"])

        assert [s.title for s in slots] == ["Standup"]

    def test_count_existing_sessions_uses_session_calendars(self, db_session):
        add_event(db_session, "Work Session", at(8), at(8, 40), "Work", "#work")
        add_event(db_session, "Side Session", at(9), at(9, 30), "Side Tasks", "#side")
        add_event(db_session, "Gym", at(18), at(19), "Personal", "#work")

        existing = CalendarService(db_session).count_existing_sessions(DAY, SchedulingConfiguration())

        assert (existing.work, existing.side) == (1, 1)

    def test_has_planning_session(self, db_session):
        service = CalendarService(db_session)
        assert not service.has_planning_session(DAY)

        add_event(db_session, "Planning", at(8), at(8, 15), "Work", "#plan")

        assert service.has_planning_session(DAY)


class TestWriting:

    def test_create_sessions(self, db_session):
        sessions = [
            ScheduledSession.create(SessionType.WORK, "Work Session", at(8), at(8, 40), "Work"),
            ScheduledSession.create(SessionType.SIDE, "Side Session", at(8, 50), at(9, 20), "Side Tasks"),
        ]

        created, failed = CalendarService(db_session).create_sessions(sessions)

        assert (created, failed) == (2, 0)
        events = CalendarService(db_session).list_events(DAY)
        assert [(e.title, e.notes, e.calendar_name) for e in events] == [
            ("Work Session", "#work", "Work"),
            ("Side Session", "#side", "Side Tasks"),
        ]

    def test_create_sessions_rolls_back_on_error(self, db_session):
        sessions = [ScheduledSession.create(SessionType.WORK, "Work Session", at(8), at(8, 40), "Work")]
        service = CalendarService(db_session)

        with patch.object(db_session, "commit", side_effect=SQLAlchemyError("disk full")):
            created, failed = service.create_sessions(sessions)

        assert (created, failed) == (0, 1)
        assert db_session.query(CalendarEvent).count() == 0

    def test_create_event_rejects_bad_times(self, db_session):
        with pytest.raises(ValueError):
            CalendarService(db_session).create_event("Broken", at(10), at(9))

    def test_delete_session_events(self, db_session):
        add_event(db_session, "Work Session", at(8), at(8, 40), "Work", "#work")
        add_event(db_session, "Work Session", at(14), at(14, 40), "Work", "#work")
        add_event(db_session, "Side Session", at(9), at(9, 30), "Side Tasks", "#side")
        add_event(db_session, "Client call", at(10), at(11), "Work")
        add_event(db_session, "Dentist", at(15), at(16), "Personal", "#work")

        deleted = CalendarService(db_session).delete_session_events(
            DAY, ["Work", "Side Tasks"], require_session_tag=True, after=at(9)
        )

        assert deleted == 2
        remaining = [e.title for e in CalendarService(db_session).list_events(DAY)]
        assert remaining == ["Work Session", "Client call", "Dentist"]

    def test_delete_by_session_name(self, db_session):
        add_event(db_session, "Work Session", at(8), at(8, 40), "Work", "#work")
        add_event(db_session, "Review", at(9), at(9, 40), "Work", "#work")

        deleted = CalendarService(db_session).delete_session_events(DAY, ["Work"], session_names=["Review"])

        assert deleted == 1


class TestSchedulerService:

    def test_preview_respects_calendar(self, db_session):
        add_event(db_session, "Standup", at(8, 30), at(9))
        configuration = SchedulingConfiguration(work_session_count=2, side_session_count=1, rest_duration=10,
                                                side_rest_duration=10, schedule_planning=False)

        result = SchedulerService(excluded_calendars=[]).preview(db_session, configuration, DAY, at(8))

        assert result.sessions[0].start_time == at(9, 10)

    def test_existing_planning_is_not_duplicated(self, db_session):
        add_event(db_session, "Planning", at(7), at(7, 15), "Work", "#plan")

        result = SchedulerService(excluded_calendars=[]).preview(db_session, SchedulingConfiguration(), DAY, at(8))

        assert SessionType.PLANNING not in [s.type for s in result]

    def test_commit_then_preview_meets_quota(self, db_session):
        configuration = SchedulingConfiguration(work_session_count=2, side_session_count=1)
        service = SchedulerService(excluded_calendars=[])

        result, created, failed = service.commit(db_session, configuration, DAY, at(8))
        again = service.preview(db_session, configuration, DAY, at(8))

        assert created == len(result.sessions) == 4
        assert failed == 0
        assert again.quota_met
        assert again.sessions == []

    def test_deep_calendar_counts_when_enabled(self, db_session):
        add_event(db_session, "Deep Session", at(8), at(8, 15), "Focus", "#deep")
        deep = DeepSessionConfig(enabled=True, session_count=1, calendar_name="Focus")
        configuration = SchedulingConfiguration(work_session_count=0, side_session_count=0, deep_session_config=deep)

        result = SchedulerService(excluded_calendars=[]).preview(db_session, configuration, DAY, at(8))

        assert result.quota_met

    def test_default_start_time(self):
        service = SchedulerService(default_start_hour=9, excluded_calendars=[])
        now = at(13, 7)

        assert service.default_start_time(DAY, now=now) == now
        assert service.default_start_time(DAY.replace(day=11), now=now) == at(9, day=DAY.replace(day=11))
        assert service.default_start_time(DAY, at(6), now=now) == at(6)

    def test_unknown_preset(self):
        service = SchedulerService(excluded_calendars=[])
        with pytest.raises(ValueError, match="Holiday"):
            service.resolve_configuration(None, "Holiday")
