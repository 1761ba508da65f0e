"""Tests for the HTTP endpoints."""

from datetime import datetime, timezone

from conftest import DAY, at

from dayplanner.schemas import to_local_naive
from dayplanner.scheduling.utils.slot_utils import round_to_next_interval

BASE_CONFIGURATION = {
    "work_session_count": 2,
    "side_session_count": 1,
    "work_session_duration": 40,
    "side_session_duration": 30,
    "rest_duration": 10,
    "side_rest_duration": 10,
    "schedule_planning": False,
}


def schedule_body(**overrides):
    body = {"date": DAY.isoformat(), "start_time": at(8).isoformat(), "configuration": BASE_CONFIGURATION}
    body.update(overrides)
    return body


class TestRoot:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "preview" in response.json()["endpoints"]

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestScheduleEndpoints:

    def test_preview(self, client):
        response = client.post("/schedule/preview", json=schedule_body())

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "complete"
        assert data["message"] == "Successfully projected 3 sessions."
        assert [(s["type"], s["start_time"], s["end_time"]) for s in data["sessions"]] == [
            ("Work", "2025-03-10T08:00:00", "2025-03-10T08:40:00"),
            ("Work", "2025-03-10T08:50:00", "2025-03-10T09:30:00"),
            ("Side", "2025-03-10T09:40:00", "2025-03-10T10:10:00"),
        ]
        assert data["missing"] == {"Work": 0, "Side": 0, "Planning": 0, "Deep": 0}
        assert [s["hashtag"] for s in data["sessions"]] == ["work", "work", "side"]

    def test_preview_accepts_offset_aware_start(self, client):
        aware = datetime(2025, 3, 10, 8, tzinfo=timezone.utc)
        local_start = to_local_naive(aware)

        response = client.post("/schedule/preview", json=schedule_body(start_time="2025-03-10T08:00:00Z"))

        assert response.status_code == 200
        for session in response.json()["sessions"]:
            assert datetime.fromisoformat(session["start_time"]) >= round_to_next_interval(local_start, 5)

    def test_offset_aware_event_times_are_stored_as_local(self, client):
        client.post("/events/", json={
            "title": "Standup",
            "start_time": "2025-03-10T12:00:00+00:00",
            "end_time": "2025-03-10T12:30:00+00:00",
        })
        local_day = to_local_naive(datetime(2025, 3, 10, 12, tzinfo=timezone.utc)).date()

        events = client.get("/events/date", params={"date": local_day.isoformat()}).json()

        assert [e["title"] for e in events] == ["Standup"]
        assert "+" not in events[0]["start_time"]

    def test_preview_does_not_write(self, client):
        client.post("/schedule/preview", json=schedule_body())
        assert client.get("/events/date", params={"date": DAY.isoformat()}).json() == []

    def test_preview_avoids_busy_events(self, client):
        client.post("/events/", json={
            "title": "Standup",
            "start_time": at(8, 30).isoformat(),
            "end_time": at(9).isoformat(),
        })

        data = client.post("/schedule/preview", json=schedule_body()).json()

        assert data["sessions"][0]["start_time"] == "2025-03-10T09:10:00"

    def test_commit_writes_tagged_events(self, client):
        data = client.post("/schedule/commit", json=schedule_body()).json()

        assert data["created"] == 3
        events = client.get("/events/date", params={"date": DAY.isoformat()}).json()
        assert [e["notes"] for e in events] == ["#work", "#work", "#side"]

        again = client.post("/schedule/preview", json=schedule_body()).json()
        assert again["status"] == "quota_met"
        assert again["existing_sessions"] == 3

    def test_preset(self, client):
        body = {"date": DAY.isoformat(), "start_time": at(8).isoformat(), "preset": "Focus Day"}

        data = client.post("/schedule/preview", json=body).json()

        assert data["requested"]["Work"] == 7
        assert data["sessions"][0]["type"] == "Planning"

    def test_unknown_preset(self, client):
        response = client.post("/schedule/preview", json={"date": DAY.isoformat(), "preset": "Holiday"})
        assert response.status_code == 400

    def test_invalid_configuration(self, client):
        body = schedule_body(configuration={"work_session_count": -2})
        assert client.post("/schedule/preview", json=body).status_code == 422

    def test_availability(self, client):
        configuration = dict(BASE_CONFIGURATION, day_end_hour=12)

        data = client.post("/schedule/availability", json=schedule_body(configuration=configuration)).json()

        assert data["available_minutes"] == 240
        assert data["formatted_available_time"] == "4h 0m"
        assert data["possible"]["Work"] == 240 // 50
        assert data["gaps"] == [
            {"start": "2025-03-10T08:00:00", "end": "2025-03-10T12:00:00", "duration_minutes": 240}
        ]

    def test_single_session(self, client):
        body = schedule_body(session_type="Planning")

        data = client.post("/schedule/single", json=body).json()

        assert data["session"]["title"] == "Planning"
        assert data["session"]["notes"] == "#plan"
        assert data["session"]["end_time"] == "2025-03-10T08:15:00"

    def test_single_session_no_room(self, client):
        body = schedule_body(session_type="Work", start_time=at(23, 45).isoformat())

        data = client.post("/schedule/single", json=body).json()

        assert data["session"] is None
        assert data["message"] == "No suitable time slots found."

    def test_presets(self, client):
        names = [p["name"] for p in client.get("/schedule/presets").json()]
        assert names == ["Standard Workday", "Focus Day", "Weekend", "Light Day"]

    def test_patterns(self, client):
        patterns = client.get("/schedule/patterns").json()
        assert {p["value"] for p in patterns} >= {"Alternating", "All Work First", "Custom Ratio"}


class TestEventEndpoints:

    def test_create_event_rejects_bad_times(self, client):
        response = client.post("/events/", json={
            "title": "Broken",
            "start_time": at(10).isoformat(),
            "end_time": at(9).isoformat(),
        })
        assert response.status_code == 400

    def test_delete_sessions(self, client):
        client.post("/schedule/commit", json=schedule_body())
        client.post("/events/", json={
            "title": "Client call",
            "start_time": at(13).isoformat(),
            "end_time": at(14).isoformat(),
            "calendar_name": "Work",
        })

        response = client.delete("/events/sessions", params={"date": DAY.isoformat()})

        assert response.json()["deleted"] == 3
        events = client.get("/events/date", params={"date": DAY.isoformat()}).json()
        assert [e["title"] for e in events] == ["Client call"]
