from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text


class InterviewType(str, Enum):
    PHONE = "phone"
    VIDEO = "video"
    ONSITE = "onsite"
    TECHNICAL = "technical"


class InterviewStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class Interview(SQLModel, table=True):
    """
    A scheduled interview between an employer and a candidate.

    The time window `[scheduled_at, scheduled_at + duration)` is the unit
    compared for conflicts. Interviews are cancelled, never deleted.
    """
    __tablename__ = "interviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    employer_id: int = Field(foreign_key="employers.id", index=True)
    candidate_id: int = Field(foreign_key="candidates.id", index=True)
    job_id: int = Field(foreign_key="jobs.id", index=True)

    scheduled_at: datetime = Field(index=True)
    duration: int = Field(default=60)  # minutes
    interview_type: str = Field(default=InterviewType.VIDEO.value)
    status: str = Field(default=InterviewStatus.SCHEDULED.value, index=True)

    location: Optional[str] = Field(default=None)
    meeting_link: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def ends_at(self) -> datetime:
        return self.scheduled_at + timedelta(minutes=self.duration)
