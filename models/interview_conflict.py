from datetime import datetime
from typing import List, Optional

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON


class InterviewConflict(SQLModel, table=True):
    """Record of a scheduling attempt that was blocked by existing interviews."""

    __tablename__ = "interview_conflicts"

    id: Optional[int] = Field(default=None, primary_key=True)
    employer_id: int = Field(foreign_key="employers.id", index=True)
    conflict_date: datetime = Field()
    conflicting_interview_ids: List[int] = Field(default_factory=list, sa_column=Column(JSON))
    conflict_type: str = Field(default="overlapping")  # overlapping | back_to_back
    resolved: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
