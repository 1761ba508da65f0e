"""Minimal Events API: list a day's events, add busy events and clear a day's sessions."""

from typing import List, Optional
from datetime import datetime, date as _date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import EventOut, EventCreate, DeleteResult
from ..scheduling import SchedulingConfiguration, get_preset
from ..services.calendar_service import CalendarService

router = APIRouter(tags=["events"])


@router.get("/date", response_model=List[EventOut])
def get_events_by_date(
    db: Session = Depends(get_db),
    date: _date = Query(...),
):
    return CalendarService(db).list_events(date)


@router.post("/", response_model=EventOut)
def create_event(event: EventCreate, db: Session = Depends(get_db)):
    try:
        return CalendarService(db).create_event(
            event.title, event.start_time, event.end_time, event.calendar_name, event.notes
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/sessions", response_model=DeleteResult)
def delete_sessions(
    db: Session = Depends(get_db),
    date: _date = Query(...),
    preset: Optional[str] = Query(None, description="Preset whose calendars to clear"),
    after: Optional[datetime] = Query(None, description="Only delete sessions starting at or after this time"),
):
    """Delete the planner's tagged session events for the day from the session calendars."""
    configuration = SchedulingConfiguration()
    if preset:
        found = get_preset(preset)
        if found is None:
            raise HTTPException(status_code=400, detail=f"Unknown preset '{preset}'")
        configuration = found.configuration

    deleted = CalendarService(db).delete_session_events(
        date, configuration.calendar_names(), require_session_tag=True, after=after
    )
    return DeleteResult(date=date, deleted=deleted)
