from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text


class AutomationLog(SQLModel, table=True):
    """One row per rule application to a candidate."""

    __tablename__ = "automation_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    rule_id: str = Field(foreign_key="automation_rules.id", index=True)
    candidate_id: int = Field(foreign_key="candidates.id", index=True)
    status: str = Field(default="success", index=True)  # success, failed, skipped
    email_queued: bool = Field(default=False)
    error: Optional[str] = Field(default=None, sa_column=Column(Text))

    # Set for interview-window rules: the interview and the start time it was handled for
    interview_id: Optional[int] = Field(default=None, foreign_key="interviews.id", index=True)
    interview_scheduled_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
