"""
Job repository for job postings.
"""

from typing import Optional

from sqlmodel import Session, select

from models.job import Job
from repositories.base_repository import BaseRepository


class JobRepository(BaseRepository[Job]):
    """Repository for job postings."""

    def __init__(self, db_session: Session):
        super().__init__(db_session, Job)

    def get_for_employer(self, job_id: int, employer_id: int) -> Optional[Job]:
        statement = select(Job).where(Job.id == job_id, Job.employer_id == employer_id)
        return self.db.exec(statement).first()
