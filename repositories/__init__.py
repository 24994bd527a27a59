"""
Repositories module - Data Access Layer.

Provides repository classes for database operations following the Repository pattern.
Each repository handles CRUD operations for a specific domain entity.

Usage:
    from repositories import CandidateRepository, InterviewRepository, RuleStore

    # Initialize with a database session
    candidate_repo = CandidateRepository(db_session)
    rules = RuleStore(db_session)

    # Use repository methods
    stale = candidate_repo.find_inactive("screening", threshold)
    rule = rules.get("auto_reject_30_days")
"""

from repositories.base_repository import BaseRepository
from repositories.api_key_repository import APIKeyRepository
from repositories.candidate_repository import CandidateRepository
from repositories.interview_repository import InterviewRepository
from repositories.job_repository import JobRepository
from repositories.automation_rule_repository import RuleStore
from repositories.automation_log_repository import AutomationLogRepository
from repositories.queued_email_repository import QueuedEmailRepository
from repositories.exceptions import (
    ConcurrentUpdateError,
    RecordNotFoundError,
    RuleNotFoundError,
    StaleCandidateError,
)

__all__ = [
    "BaseRepository",
    "APIKeyRepository",
    "CandidateRepository",
    "InterviewRepository",
    "JobRepository",
    "RuleStore",
    "AutomationLogRepository",
    "QueuedEmailRepository",
    "ConcurrentUpdateError",
    "RecordNotFoundError",
    "RuleNotFoundError",
    "StaleCandidateError",
]
