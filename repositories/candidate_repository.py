"""
Candidate repository for candidate persistence.

Status writes made by automation are compare-and-set on (version, status)
so a sweep never overwrites an edit that landed after it read the row.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from models.automation_log import AutomationLog
from models.candidate import Candidate
from models.interview import Interview
from repositories.base_repository import BaseRepository
from repositories.exceptions import StaleCandidateError
from repositories.interview_repository import UPCOMING_STATUSES, handled_by_rule


class CandidateRepository(BaseRepository[Candidate]):
    """Repository for managing candidates."""

    def __init__(self, db_session: Session):
        super().__init__(db_session, Candidate)

    def get_for_employer(self, candidate_id: int, employer_id: int) -> Optional[Candidate]:
        query = select(Candidate).where(
            Candidate.id == candidate_id,
            Candidate.employer_id == employer_id,
        )
        return self.db.exec(query).first()

    def _for_employer(self, query, employer_id: Optional[int]):
        if employer_id is None:
            return query
        return query.where(Candidate.employer_id == employer_id)

    def _not_yet_fired(self, query, rule_id: Optional[str]):
        # A rule fires at most once per candidate until the candidate changes again
        if rule_id is None:
            return query
        fired = select(AutomationLog.id).where(
            AutomationLog.rule_id == rule_id,
            AutomationLog.candidate_id == Candidate.id,
            AutomationLog.status == "success",
            AutomationLog.created_at >= Candidate.updated_at,
        )
        return query.where(~fired.exists())

    def find_inactive(
        self,
        status: str,
        updated_before: datetime,
        limit: int = 100,
        rule_id: Optional[str] = None,
        employer_id: Optional[int] = None,
    ) -> List[Candidate]:
        """
        Candidates in `status` whose last update is older than `updated_before`.

        Args:
            status: Status to match
            updated_before: Inactivity threshold
            limit: Batch cap
            rule_id: Skip candidates this rule already handled since their last update
            employer_id: Restrict to one employer's candidates

        Returns:
            Oldest-first list of candidates
        """
        query = select(Candidate).where(
            Candidate.status == status,
            Candidate.updated_at < updated_before,
        )
        query = self._not_yet_fired(query, rule_id)
        query = self._for_employer(query, employer_id)
        query = query.order_by(Candidate.updated_at).limit(limit)
        return list(self.db.exec(query).all())

    def find_with_interview_between(
        self,
        status: str,
        window_start: datetime,
        window_end: datetime,
        limit: int = 100,
        rule_id: Optional[str] = None,
        employer_id: Optional[int] = None,
    ) -> List[Candidate]:
        """
        Candidates in `status` with a scheduled interview starting inside the window.

        With `rule_id`, deduplication is per interview and start time rather than
        per candidate: a rescheduled interview is eligible again.
        """
        upcoming = select(Interview.id).where(
            Interview.candidate_id == Candidate.id,
            Interview.status.in_(UPCOMING_STATUSES),
            Interview.scheduled_at >= window_start,
            Interview.scheduled_at <= window_end,
        )
        if rule_id is not None:
            upcoming = upcoming.where(~handled_by_rule(rule_id).exists())
        query = select(Candidate).where(Candidate.status == status, upcoming.exists())
        query = self._for_employer(query, employer_id)
        query = query.order_by(Candidate.id).limit(limit)
        return list(self.db.exec(query).all())

    def find_by_status(
        self,
        status: str,
        limit: int = 100,
        rule_id: Optional[str] = None,
        employer_id: Optional[int] = None,
    ) -> List[Candidate]:
        query = self._not_yet_fired(select(Candidate).where(Candidate.status == status), rule_id)
        query = self._for_employer(query, employer_id)
        return list(self.db.exec(query.order_by(Candidate.id).limit(limit)).all())

    def compare_and_set_status(
        self,
        candidate_id: int,
        expected_version: int,
        expected_status: str,
        new_status: str,
        now: Optional[datetime] = None,
        commit: bool = True,
    ) -> None:
        """
        Move a candidate to `new_status` only if it is unchanged since it was read.

        Args:
            candidate_id: Candidate primary key
            expected_version: Version observed when the candidate was read
            expected_status: Status observed when the candidate was read
            new_status: Status to write
            now: Timestamp for updated_at
            commit: Commit immediately; pass False to join a larger transaction

        Raises:
            StaleCandidateError: If the row's version or status moved on
        """
        statement = (
            update(Candidate)
            .where(
                Candidate.id == candidate_id,
                Candidate.version == expected_version,
                Candidate.status == expected_status,
            )
            .values(
                status=new_status,
                version=Candidate.version + 1,
                updated_at=now or datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.exec(statement)
        if result.rowcount != 1:
            self.db.rollback()
            raise StaleCandidateError(
                f"Candidate {candidate_id} changed since it was read (expected version {expected_version})"
            )
        if commit:
            self.db.commit()

    def set_status(self, candidate: Candidate, new_status: str, now: Optional[datetime] = None) -> Candidate:
        """Unconditional status change for explicit user actions."""
        candidate.status = new_status
        candidate.version += 1
        candidate.updated_at = now or datetime.utcnow()
        return self.save(candidate)
