from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class Employer(SQLModel, table=True):
    """Employers table for multi-tenant data isolation.

    API keys, jobs, candidates and interviews belong to a single employer
    and cannot access data from other employers.
    """

    __tablename__ = "employers"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, nullable=False, unique=True)
    contact_email: Optional[str] = Field(default=None, nullable=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
