"""
Interview API Routes - Thin Controller Layer.

Handles HTTP concerns (request/response, validation, status codes)
and delegates scheduling logic to InterviewService.

Endpoints:
- GET /interviews/conflicts - Check a proposed slot against existing interviews
- GET /interviews/suggestions - Suggest free slots near a preferred date
- POST /interviews - Book an interview
- POST /interviews/{id}/reschedule - Move an interview
- POST /interviews/{id}/cancel - Cancel an interview
- POST /interviews/{id}/complete - Mark an interview as held
- GET /interviews - List interviews with filters
- GET /interviews/calendar - Interviews grouped by day
- GET /interviews/candidate/{candidate_id} - Interviews of one candidate
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, status, Query
from sqlmodel import Session

from api.auth import verify_api_key, get_current_employer
from api.models.common_schemas import ErrorResponse
from api.models.interview_schemas import (
    CalendarResponse,
    CancelInterviewRequest,
    ConflictCheckResponse,
    InterviewBase,
    InterviewListResponse,
    RescheduleInterviewRequest,
    ScheduleInterviewRequest,
    SlotSuggestionResponse,
)
from config.settings import settings
from scheduling.conflicts import SchedulingValidationError
from services import InterviewConflictError, InterviewNotFoundError, InterviewService
from utils.database import get_db

router = APIRouter(
    prefix="/interviews",
    tags=["Interviews"],
    dependencies=[Depends(verify_api_key)]
)

# ============ DEPENDENCY INJECTION ============


def get_interview_service(db: Session = Depends(get_db)) -> InterviewService:
    """Get InterviewService instance with injected dependencies."""
    return InterviewService(db)


def _conflict_detail(e: InterviewConflictError) -> dict:
    return {
        "message": str(e),
        "conflict_type": e.check.conflict_type,
        "conflicting_interview_ids": [i.id for i in e.check.conflicts],
    }


# ============ CONFLICTS & SUGGESTIONS ============

@router.get(
    "/conflicts",
    response_model=ConflictCheckResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid interval"}},
)
def check_conflicts(
    scheduled_at: datetime = Query(..., description="Proposed start"),
    duration: int = Query(settings.INTERVIEW_DEFAULT_DURATION, description="Length in minutes"),
    exclude_interview_id: Optional[int] = Query(None, description="Interview being rescheduled"),
    service: InterviewService = Depends(get_interview_service),
    employer_id: int = Depends(get_current_employer),
):
    """Check whether a proposed slot collides with the employer's interviews."""
    try:
        check = service.check_conflicts(employer_id, scheduled_at, duration, exclude_interview_id)
        return ConflictCheckResponse(
            has_conflict=check.has_conflict,
            conflict_type=check.conflict_type,
            conflicts=[InterviewBase.model_validate(i) for i in check.conflicts],
        )
    except SchedulingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get(
    "/suggestions",
    response_model=SlotSuggestionResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid request"}},
)
def suggest_slots(
    preferred_date: datetime = Query(..., description="Earliest acceptable start"),
    duration: int = Query(settings.INTERVIEW_DEFAULT_DURATION),
    number_of_suggestions: int = Query(5, ge=1, le=50),
    service: InterviewService = Depends(get_interview_service),
    employer_id: int = Depends(get_current_employer),
):
    """
    Suggest conflict-free starts inside business hours.

    The preferred day is searched first, then the following days.
    """
    try:
        suggestions = service.suggest_slots(employer_id, preferred_date, duration, number_of_suggestions)
        return SlotSuggestionResponse(preferred_date=preferred_date, duration=duration, suggestions=suggestions)
    except SchedulingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ============ LIFECYCLE ============

@router.post(
    "",
    response_model=InterviewBase,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid interval or unknown candidate"},
        409: {"description": "Slot conflicts with existing interviews"},
    }
)
def schedule_interview(
    request: ScheduleInterviewRequest,
    service: InterviewService = Depends(get_interview_service),
    employer_id: int = Depends(get_current_employer),
):
    """
    Book an interview.

    Conflicting slots are rejected with 409 unless `force` is set; the
    attempt is recorded either way. Booking moves the candidate to
    `interview_scheduled`.
    """
    try:
        data = request.model_dump(exclude={"force"})
        data["interview_type"] = request.interview_type.value
        interview = service.schedule_interview(employer_id, data, force=request.force)
        return InterviewBase.model_validate(interview)
    except InterviewConflictError as e:
        raise HTTPException(status_code=409, detail=_conflict_detail(e))
    except SchedulingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to schedule interview: {str(e)}")


@router.post(
    "/{interview_id}/reschedule",
    response_model=InterviewBase,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse, "description": "Interview not found"},
        409: {"description": "New slot conflicts with existing interviews"},
    }
)
def reschedule_interview(
    interview_id: int,
    request: RescheduleInterviewRequest,
    service: InterviewService = Depends(get_interview_service),
    employer_id: int = Depends(get_current_employer),
):
    try:
        interview = service.reschedule_interview(
            employer_id, interview_id, request.scheduled_at, request.duration, force=request.force
        )
        return InterviewBase.model_validate(interview)
    except InterviewNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InterviewConflictError as e:
        raise HTTPException(status_code=409, detail=_conflict_detail(e))
    except SchedulingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/{interview_id}/cancel",
    response_model=InterviewBase,
    responses={404: {"model": ErrorResponse, "description": "Interview not found"}},
)
def cancel_interview(
    interview_id: int,
    request: Optional[CancelInterviewRequest] = None,
    service: InterviewService = Depends(get_interview_service),
    employer_id: int = Depends(get_current_employer),
):
    try:
        reason = request.reason if request else None
        return InterviewBase.model_validate(service.cancel_interview(employer_id, interview_id, reason))
    except InterviewNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/{interview_id}/complete",
    response_model=InterviewBase,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse, "description": "Interview not found"},
    }
)
def complete_interview(
    interview_id: int,
    service: InterviewService = Depends(get_interview_service),
    employer_id: int = Depends(get_current_employer),
):
    try:
        return InterviewBase.model_validate(service.complete_interview(employer_id, interview_id))
    except InterviewNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SchedulingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ============ QUERIES ============

@router.get("", response_model=InterviewListResponse)
def list_interviews(
    status_filter: Optional[str] = Query(None, alias="status"),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    candidate_id: Optional[int] = Query(None),
    service: InterviewService = Depends(get_interview_service),
    employer_id: int = Depends(get_current_employer),
):
    interviews = service.list_employer_interviews(
        employer_id, status=status_filter, start_date=start_date, end_date=end_date, candidate_id=candidate_id
    )
    return InterviewListResponse(
        interviews=[InterviewBase.model_validate(i) for i in interviews],
        total=len(interviews),
    )


@router.get(
    "/calendar",
    response_model=CalendarResponse,
    responses={400: {"model": ErrorResponse}},
)
def get_calendar(
    start: datetime = Query(...),
    end: datetime = Query(...),
    service: InterviewService = Depends(get_interview_service),
    employer_id: int = Depends(get_current_employer),
):
    """Non-cancelled interviews between `start` and `end`, keyed by ISO date."""
    try:
        days = service.get_calendar(employer_id, start, end)
    except SchedulingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CalendarResponse(
        start=start,
        end=end,
        days={day: [InterviewBase.model_validate(i) for i in items] for day, items in days.items()},
    )


@router.get("/candidate/{candidate_id}", response_model=InterviewListResponse)
def get_candidate_interviews(
    candidate_id: int,
    service: InterviewService = Depends(get_interview_service),
    employer_id: int = Depends(get_current_employer),
):
    interviews = service.get_candidate_interviews(employer_id, candidate_id)
    return InterviewListResponse(
        interviews=[InterviewBase.model_validate(i) for i in interviews],
        total=len(interviews),
    )
