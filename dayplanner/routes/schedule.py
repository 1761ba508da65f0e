"""
Schedule API endpoints: project, commit and inspect a day's sessions.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import (
    ScheduleRequest, SingleSessionRequest, ScheduleResponse, SingleSessionResponse, AvailabilityOut,
    ScheduledSessionOut, TimeGapOut, PresetOut, PatternOut
)
from ..scheduling import DEFAULT_PRESETS, SchedulePattern, ScheduleResult, SessionType
from ..services.scheduler_service import scheduler_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _resolve(request: ScheduleRequest):
    try:
        return scheduler_service.resolve_configuration(request.configuration, request.preset)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _counts(counts) -> dict:
    return {session_type.value: counts.get(session_type, 0) for session_type in SessionType}


def _schedule_response(request: ScheduleRequest, result: ScheduleResult, created: int = 0,
                       failed: int = 0) -> ScheduleResponse:
    return ScheduleResponse(
        date=request.date,
        status=result.status.value,
        message=result.message,
        sessions=[ScheduledSessionOut.model_validate(session) for session in result.sessions],
        requested=_counts(result.requested),
        produced=_counts(result.produced),
        missing=_counts(result.missing),
        existing_sessions=result.existing_total,
        created=created,
        failed=failed,
    )


@router.post("/preview", response_model=ScheduleResponse)
def preview_schedule(request: ScheduleRequest, db: Session = Depends(get_db)):
    """Project sessions for the day without writing them."""
    configuration, start_hour = _resolve(request)
    result = scheduler_service.preview(
        db, configuration, request.date, request.start_time, request.include_planning, start_hour
    )
    return _schedule_response(request, result)


@router.post("/commit", response_model=ScheduleResponse)
def commit_schedule(request: ScheduleRequest, db: Session = Depends(get_db)):
    """Project sessions for the day and write them to the calendar."""
    configuration, start_hour = _resolve(request)
    result, created, failed = scheduler_service.commit(
        db, configuration, request.date, request.start_time, request.include_planning, start_hour
    )
    if failed:
        logger.error(f"{failed} sessions could not be written for {request.date.isoformat()}")
    return _schedule_response(request, result, created, failed)


@router.post("/availability", response_model=AvailabilityOut)
def get_availability(request: ScheduleRequest, db: Session = Depends(get_db)):
    configuration, start_hour = _resolve(request)
    summary = scheduler_service.availability(db, configuration, request.date, request.start_time, start_hour)
    return AvailabilityOut(
        date=request.date,
        available_minutes=summary.available_minutes,
        formatted_available_time=summary.formatted_available_time,
        longest_gap_minutes=summary.longest_gap_minutes,
        max_possible_sessions=summary.max_possible_sessions,
        possible={session_type.value: count for session_type, count in summary.possible.items()},
        gaps=[TimeGapOut.model_validate(gap) for gap in summary.gaps],
    )


@router.post("/single", response_model=SingleSessionResponse)
def project_single_session(request: SingleSessionRequest, db: Session = Depends(get_db)):
    """Find the first slot for exactly one session, e.g. a late Planning block."""
    configuration, start_hour = _resolve(request)
    session = scheduler_service.project_single(
        db, configuration, request.session_type, request.date, request.start_time, start_hour
    )
    if session is None:
        return SingleSessionResponse(date=request.date, message="No suitable time slots found.")
    return SingleSessionResponse(
        date=request.date,
        session=ScheduledSessionOut.model_validate(session),
        message=f"Projected {session.title} at {session.start_time.strftime('%I:%M %p')}.",
    )


@router.get("/presets", response_model=List[PresetOut])
def list_presets():
    return [PresetOut.model_validate(preset) for preset in DEFAULT_PRESETS]


@router.get("/patterns", response_model=List[PatternOut])
def list_patterns():
    return [
        PatternOut(name=pattern.name, value=pattern.value, description=pattern.description)
        for pattern in SchedulePattern
    ]
