from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class Job(SQLModel, table=True):
    """Job posting an interview is held for."""

    __tablename__ = "jobs"

    id: Optional[int] = Field(default=None, primary_key=True)
    employer_id: int = Field(foreign_key="employers.id", index=True)
    title: str = Field(nullable=False)
    status: str = Field(default="open", index=True)  # draft, open, closed, archived
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
