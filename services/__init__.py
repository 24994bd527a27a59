"""
Services module - Business Logic Layer.

Contains application services that orchestrate business logic,
sitting between the API layer (routes) and the data layer (repositories).

Usage:
    from services import InterviewService

    service = InterviewService(db)
    interview = service.schedule_interview(employer_id, data)
"""

from services.candidate_service import CandidateService
from services.interview_service import (
    InterviewConflictError,
    InterviewNotFoundError,
    InterviewService,
)

__all__ = [
    "CandidateService",
    "InterviewConflictError",
    "InterviewNotFoundError",
    "InterviewService",
]
