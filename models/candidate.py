from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class CandidateStatus(str, Enum):
    """Pipeline status of a candidate profile."""
    INCOMPLETE = "incomplete"
    ACTIVE = "active"
    INACTIVE = "inactive"
    SCREENING = "screening"
    SCREENED = "screened"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    INTERVIEW_COMPLETED = "interview_completed"
    OFFERED = "offered"
    HIRED = "hired"
    REJECTED = "rejected"


class Candidate(SQLModel, table=True):
    """Candidate model for storing candidate information and pipeline status."""

    __tablename__ = "candidates"

    id: Optional[int] = Field(default=None, primary_key=True)
    employer_id: int = Field(foreign_key="employers.id", index=True)
    full_name: str = Field()
    email: Optional[str] = Field(default=None, nullable=True)
    status: str = Field(default=CandidateStatus.INCOMPLETE.value, index=True)
    # Bumped on every status write; automation updates compare-and-set on it
    version: int = Field(default=1, nullable=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, index=True)
