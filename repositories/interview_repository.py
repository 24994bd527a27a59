"""
Interview repository for interview persistence.

Handles CRUD operations for the interviews table with calendar-style queries.
"""

from datetime import datetime
from typing import List, Optional

from sqlmodel import Session, select

from models.automation_log import AutomationLog
from models.interview import Interview, InterviewStatus
from models.interview_conflict import InterviewConflict
from repositories.base_repository import BaseRepository

UPCOMING_STATUSES = [InterviewStatus.SCHEDULED.value, InterviewStatus.RESCHEDULED.value]


def handled_by_rule(rule_id: str):
    """
    Success logs of `rule_id` for the enclosing query's interview at its current start time.

    Use as `~handled_by_rule(rule_id).exists()` inside a select over Interview.
    Moving the interview changes its start time, so it becomes eligible again.
    """
    return select(AutomationLog.id).where(
        AutomationLog.rule_id == rule_id,
        AutomationLog.status == "success",
        AutomationLog.interview_id == Interview.id,
        AutomationLog.interview_scheduled_at == Interview.scheduled_at,
    )


class InterviewRepository(BaseRepository[Interview]):
    """Repository for managing interviews."""

    def __init__(self, db_session: Session):
        super().__init__(db_session, Interview)

    def get_for_employer(self, interview_id: int, employer_id: int) -> Optional[Interview]:
        statement = select(Interview).where(
            Interview.id == interview_id,
            Interview.employer_id == employer_id,
        )
        return self.db.exec(statement).first()

    def get_active_for_employer(
        self,
        employer_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Interview]:
        """
        Non-cancelled interviews of an employer, the input set for conflict checks.

        Args:
            employer_id: Employer to filter by
            start: Optional lower bound on scheduled_at
            end: Optional upper bound on scheduled_at

        Returns:
            Interviews ordered by start time
        """
        statement = select(Interview).where(
            Interview.employer_id == employer_id,
            Interview.status != InterviewStatus.CANCELLED.value,
        )
        if start is not None:
            statement = statement.where(Interview.scheduled_at >= start)
        if end is not None:
            statement = statement.where(Interview.scheduled_at <= end)
        return list(self.db.exec(statement.order_by(Interview.scheduled_at)).all())

    def list_for_employer(
        self,
        employer_id: int,
        status: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        candidate_id: Optional[int] = None,
    ) -> List[Interview]:
        """All interviews of an employer, newest first, with optional filters."""
        statement = select(Interview).where(Interview.employer_id == employer_id)
        if status:
            statement = statement.where(Interview.status == status)
        if start_date:
            statement = statement.where(Interview.scheduled_at >= start_date)
        if end_date:
            statement = statement.where(Interview.scheduled_at <= end_date)
        if candidate_id:
            statement = statement.where(Interview.candidate_id == candidate_id)
        return list(self.db.exec(statement.order_by(Interview.scheduled_at.desc())).all())

    def get_by_candidate(self, candidate_id: int, employer_id: Optional[int] = None) -> List[Interview]:
        statement = select(Interview).where(Interview.candidate_id == candidate_id)
        if employer_id is not None:
            statement = statement.where(Interview.employer_id == employer_id)
        return list(self.db.exec(statement.order_by(Interview.scheduled_at.desc())).all())

    def next_for_candidate(self, candidate_id: int, after: datetime) -> Optional[Interview]:
        """Earliest upcoming scheduled interview of a candidate."""
        statement = (
            select(Interview)
            .where(
                Interview.candidate_id == candidate_id,
                Interview.status.in_(UPCOMING_STATUSES),
                Interview.scheduled_at >= after,
            )
            .order_by(Interview.scheduled_at)
            .limit(1)
        )
        return self.db.exec(statement).first()

    def next_in_window(
        self,
        candidate_id: int,
        window_start: datetime,
        window_end: datetime,
        rule_id: Optional[str] = None,
    ) -> Optional[Interview]:
        """
        Earliest upcoming interview of a candidate starting inside the window.

        Args:
            candidate_id: Candidate to look up
            window_start: Inclusive lower bound on scheduled_at
            window_end: Inclusive upper bound on scheduled_at
            rule_id: Skip interviews this rule already handled at their current start time
        """
        statement = select(Interview).where(
            Interview.candidate_id == candidate_id,
            Interview.status.in_(UPCOMING_STATUSES),
            Interview.scheduled_at >= window_start,
            Interview.scheduled_at <= window_end,
        )
        if rule_id is not None:
            statement = statement.where(~handled_by_rule(rule_id).exists())
        return self.db.exec(statement.order_by(Interview.scheduled_at).limit(1)).first()

    def log_conflict(
        self,
        employer_id: int,
        conflict_date: datetime,
        conflicting_interview_ids: List[int],
        conflict_type: str = "overlapping",
    ) -> InterviewConflict:
        """Record a scheduling attempt blocked by existing interviews."""
        conflict = InterviewConflict(
            employer_id=employer_id,
            conflict_date=conflict_date,
            conflicting_interview_ids=conflicting_interview_ids,
            conflict_type=conflict_type,
            resolved=False,
        )
        self.db.add(conflict)
        self.db.commit()
        self.db.refresh(conflict)
        return conflict
