"""
Interview Service - Business Logic Layer.

Owns the scheduling workflow around the pure conflict detector:
- Loading an employer's active interviews for conflict checks
- Blocking (and logging) conflicting bookings unless forced
- Rescheduling, cancelling and completing interviews
- Moving the candidate through the pipeline as interviews change
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from automation.engine import AutomationEngine
from config.settings import settings
from models.candidate import Candidate, CandidateStatus
from models.interview import Interview, InterviewStatus, InterviewType
from repositories.candidate_repository import CandidateRepository
from repositories.exceptions import RecordNotFoundError
from repositories.interview_repository import InterviewRepository
from repositories.job_repository import JobRepository
from scheduling.conflicts import (
    ConflictCheck,
    SchedulingValidationError,
    find_conflicts,
    suggest_slots,
    to_naive_utc,
    validate_interval,
)

logger = logging.getLogger(__name__)


class InterviewNotFoundError(RecordNotFoundError):
    """Raised when an interview id does not exist for the employer."""


class InterviewConflictError(Exception):
    """Raised when a booking collides with existing interviews and was not forced."""

    def __init__(self, check: ConflictCheck):
        self.check = check
        ids = [i.id for i in check.conflicts]
        super().__init__(f"Interview slot conflicts with interviews {ids} ({check.conflict_type})")


class InterviewService:
    """
    Application service for interview scheduling.

    Args:
        db_session: SQLModel session
        engine: Automation engine used for the status-change hook
        clock: Callable returning the current naive-UTC time
    """

    def __init__(self, db_session: Session, engine: Optional[AutomationEngine] = None, clock=None):
        self.db = db_session
        self.interview_repo = InterviewRepository(db_session)
        self.candidate_repo = CandidateRepository(db_session)
        self.job_repo = JobRepository(db_session)
        self._clock = clock or datetime.utcnow
        self.engine = engine or AutomationEngine(db_session, clock=self._clock)

    def _get(self, interview_id: int, employer_id: int) -> Interview:
        interview = self.interview_repo.get_for_employer(interview_id, employer_id)
        if not interview:
            raise InterviewNotFoundError(f"Interview {interview_id} not found")
        return interview

    def _move_candidate(self, candidate_id: int, employer_id: int, new_status: str) -> None:
        candidate = self.candidate_repo.get_for_employer(candidate_id, employer_id)
        if candidate is None or candidate.status == new_status:
            return
        old_status = candidate.status
        self.candidate_repo.set_status(candidate, new_status, now=self._clock())
        logger.info(f"Candidate {candidate_id} moved {old_status} -> {new_status}")
        self.engine.handle_status_change(candidate, old_status, new_status)

    # -------------------------
    # Conflicts and suggestions
    # -------------------------

    def check_conflicts(
        self,
        employer_id: int,
        scheduled_at: datetime,
        duration: int,
        exclude_interview_id: Optional[int] = None,
    ) -> ConflictCheck:
        scheduled_at = to_naive_utc(scheduled_at)
        interviews = self.interview_repo.get_active_for_employer(employer_id)
        return find_conflicts(
            scheduled_at,
            duration,
            interviews,
            buffer_minutes=settings.INTERVIEW_BUFFER_MINUTES,
            exclude_interview_id=exclude_interview_id,
        )

    def suggest_slots(
        self,
        employer_id: int,
        preferred_date: datetime,
        duration: int,
        number_of_suggestions: int = 5,
    ) -> List[datetime]:
        """Free interview starts on or after the preferred date."""
        preferred_date = to_naive_utc(preferred_date)
        not_before = None if settings.ALLOW_PAST_SCHEDULING else self._clock()
        interviews = self.interview_repo.get_active_for_employer(employer_id, start=preferred_date - timedelta(days=1))
        return suggest_slots(
            preferred_date,
            duration,
            interviews,
            number_of_suggestions=number_of_suggestions,
            day_start_hour=settings.BUSINESS_DAY_START_HOUR,
            day_end_hour=settings.BUSINESS_DAY_END_HOUR,
            step_minutes=settings.SLOT_STEP_MINUTES,
            max_days=settings.SLOT_SEARCH_MAX_DAYS,
            buffer_minutes=settings.INTERVIEW_BUFFER_MINUTES,
            not_before=not_before,
        )

    # -------------------------
    # Lifecycle
    # -------------------------

    def schedule_interview(self, employer_id: int, data: Dict[str, Any], force: bool = False) -> Interview:
        """
        Book an interview.

        Args:
            employer_id: Owning employer
            data: candidate_id, job_id, scheduled_at and optional duration,
                interview_type, location, meeting_link, notes
            force: Book even if the slot conflicts

        Raises:
            SchedulingValidationError: Invalid interval, or a candidate or job the employer does not own
            InterviewConflictError: Slot conflicts and force is False
        """
        scheduled_at = to_naive_utc(data["scheduled_at"])
        duration = data.get("duration") or settings.INTERVIEW_DEFAULT_DURATION
        validate_interval(scheduled_at, duration, now=self._clock(), allow_past=settings.ALLOW_PAST_SCHEDULING)

        candidate = self.candidate_repo.get_for_employer(data["candidate_id"], employer_id)
        if candidate is None:
            raise SchedulingValidationError(f"Candidate {data['candidate_id']} not found")
        if self.job_repo.get_for_employer(data["job_id"], employer_id) is None:
            raise SchedulingValidationError(f"Job {data['job_id']} not found")

        check = self.check_conflicts(employer_id, scheduled_at, duration)
        if check.has_conflict:
            self.interview_repo.log_conflict(
                employer_id, scheduled_at, [i.id for i in check.conflicts], check.conflict_type
            )
            if not force:
                raise InterviewConflictError(check)
            logger.warning(f"Forcing interview booking at {scheduled_at.isoformat()} despite {check.conflict_type} conflict")

        interview = Interview(
            employer_id=employer_id,
            candidate_id=candidate.id,
            job_id=data["job_id"],
            scheduled_at=scheduled_at,
            duration=duration,
            interview_type=data.get("interview_type") or InterviewType.VIDEO.value,
            location=data.get("location"),
            meeting_link=data.get("meeting_link"),
            notes=data.get("notes"),
        )
        interview = self.interview_repo.save(interview)
        logger.info(f"Scheduled interview {interview.id} for candidate {candidate.id} at {scheduled_at.isoformat()}")

        self._move_candidate(candidate.id, employer_id, CandidateStatus.INTERVIEW_SCHEDULED.value)
        return interview

    def reschedule_interview(
        self,
        employer_id: int,
        interview_id: int,
        new_start: datetime,
        new_duration: Optional[int] = None,
        force: bool = False,
    ) -> Interview:
        interview = self._get(interview_id, employer_id)
        if interview.status in (InterviewStatus.CANCELLED.value, InterviewStatus.COMPLETED.value):
            raise SchedulingValidationError(f"Cannot reschedule a {interview.status} interview")

        new_start = to_naive_utc(new_start)
        duration = new_duration or interview.duration
        validate_interval(new_start, duration, now=self._clock(), allow_past=settings.ALLOW_PAST_SCHEDULING)

        check = self.check_conflicts(employer_id, new_start, duration, exclude_interview_id=interview.id)
        if check.has_conflict:
            self.interview_repo.log_conflict(
                employer_id, new_start, [i.id for i in check.conflicts], check.conflict_type
            )
            if not force:
                raise InterviewConflictError(check)

        interview.scheduled_at = new_start
        interview.duration = duration
        interview.status = InterviewStatus.RESCHEDULED.value
        interview.updated_at = self._clock()
        return self.interview_repo.save(interview)

    def cancel_interview(self, employer_id: int, interview_id: int, reason: Optional[str] = None) -> Interview:
        interview = self._get(interview_id, employer_id)
        interview.status = InterviewStatus.CANCELLED.value
        if reason:
            interview.notes = f"{interview.notes}\n\nCancelled: {reason}" if interview.notes else f"Cancelled: {reason}"
        interview.updated_at = self._clock()
        logger.info(f"Cancelled interview {interview_id}")
        return self.interview_repo.save(interview)

    def complete_interview(self, employer_id: int, interview_id: int) -> Interview:
        interview = self._get(interview_id, employer_id)
        if interview.status == InterviewStatus.CANCELLED.value:
            raise SchedulingValidationError("Cannot complete a cancelled interview")
        interview.status = InterviewStatus.COMPLETED.value
        interview.updated_at = self._clock()
        interview = self.interview_repo.save(interview)
        self._move_candidate(interview.candidate_id, employer_id, CandidateStatus.INTERVIEW_COMPLETED.value)
        return interview

    # -------------------------
    # Queries
    # -------------------------

    def list_employer_interviews(
        self,
        employer_id: int,
        status: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        candidate_id: Optional[int] = None,
    ) -> List[Interview]:
        return self.interview_repo.list_for_employer(
            employer_id,
            status=status,
            start_date=to_naive_utc(start_date) if start_date else None,
            end_date=to_naive_utc(end_date) if end_date else None,
            candidate_id=candidate_id,
        )

    def get_calendar(self, employer_id: int, start: datetime, end: datetime) -> Dict[str, List[Interview]]:
        """Non-cancelled interviews in [start, end] grouped by ISO date."""
        start, end = to_naive_utc(start), to_naive_utc(end)
        if end < start:
            raise SchedulingValidationError("Calendar end must not be before its start")

        calendar: Dict[str, List[Interview]] = {}
        for interview in self.interview_repo.get_active_for_employer(employer_id, start=start, end=end):
            calendar.setdefault(interview.scheduled_at.date().isoformat(), []).append(interview)
        return calendar

    def get_candidate_interviews(self, employer_id: int, candidate_id: int) -> List[Interview]:
        return self.interview_repo.get_by_candidate(candidate_id, employer_id=employer_id)
