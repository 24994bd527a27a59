from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import datetime

from models.interview import InterviewType


class InterviewBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    candidate_id: int
    job_id: int
    scheduled_at: datetime
    duration: int
    interview_type: str
    status: str
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None


class ScheduleInterviewRequest(BaseModel):
    """Request body for booking an interview."""
    candidate_id: int
    job_id: int
    scheduled_at: datetime = Field(..., description="Start time; naive values are read as UTC")
    duration: Optional[int] = Field(None, gt=0, description="Length in minutes, defaults to the configured duration")
    interview_type: InterviewType = InterviewType.VIDEO
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    force: bool = Field(False, description="Book even if the slot conflicts")


class RescheduleInterviewRequest(BaseModel):
    scheduled_at: datetime
    duration: Optional[int] = Field(None, gt=0)
    force: bool = False


class CancelInterviewRequest(BaseModel):
    reason: Optional[str] = None


class ConflictCheckResponse(BaseModel):
    has_conflict: bool
    conflict_type: Optional[str] = None
    conflicts: List[InterviewBase] = Field(default_factory=list)


class SlotSuggestionResponse(BaseModel):
    preferred_date: datetime
    duration: int
    suggestions: List[datetime]


class InterviewListResponse(BaseModel):
    interviews: List[InterviewBase]
    total: int


class CalendarResponse(BaseModel):
    start: datetime
    end: datetime
    days: Dict[str, List[InterviewBase]]
