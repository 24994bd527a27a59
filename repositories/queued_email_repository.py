"""
Queued email repository (outbox persistence).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_, update
from sqlmodel import Session, select

from models.candidate import Candidate
from models.queued_email import QueuedEmail, QueuedEmailStatus
from repositories.base_repository import BaseRepository


class QueuedEmailRepository(BaseRepository[QueuedEmail]):
    """Repository for the email outbox."""

    def __init__(self, db_session: Session):
        super().__init__(db_session, QueuedEmail)

    def add(
        self,
        recipient: str,
        template_id: str,
        variables: Dict[str, Any],
        scheduled_for: datetime,
        candidate_id: Optional[int] = None,
        commit: bool = True,
    ) -> QueuedEmail:
        email = QueuedEmail(
            candidate_id=candidate_id,
            recipient=recipient,
            template_id=template_id,
            variables=dict(variables),
            scheduled_for=scheduled_for,
        )
        self.db.add(email)
        if commit:
            self.db.commit()
            self.db.refresh(email)
        return email

    def _for_employer(self, statement, employer_id: Optional[int]):
        if employer_id is None:
            return statement
        return statement.join(Candidate, Candidate.id == QueuedEmail.candidate_id).where(
            Candidate.employer_id == employer_id
        )

    def get_due(self, now: datetime, limit: int = 100, employer_id: Optional[int] = None) -> List[QueuedEmail]:
        """
        Emails ready for delivery, oldest first.

        That is pending emails whose scheduled_for has passed, plus sending
        emails whose claim expired. `employer_id` restricts to that employer's
        candidates.
        """
        statement = select(QueuedEmail).where(
            or_(
                QueuedEmail.status == QueuedEmailStatus.PENDING.value,
                QueuedEmail.status == QueuedEmailStatus.SENDING.value,
            ),
            QueuedEmail.scheduled_for <= now,
        )
        statement = self._for_employer(statement, employer_id)
        statement = statement.order_by(QueuedEmail.scheduled_for, QueuedEmail.id).limit(limit)
        return list(self.db.exec(statement).all())

    def claim(self, email_id: int, expected_status: str, expected_attempts: int, claim_until: datetime) -> bool:
        """
        Take a due email for delivery and count the attempt.

        Compare-and-set on (status, attempts), so two drains that read the same
        row cannot both claim it.

        Args:
            email_id: Queued email primary key
            expected_status: Status observed when the row was read
            expected_attempts: Attempt count observed when the row was read
            claim_until: When the claim expires if the drain never finishes

        Returns:
            True if this caller owns the delivery attempt
        """
        statement = (
            update(QueuedEmail)
            .where(
                QueuedEmail.id == email_id,
                QueuedEmail.status == expected_status,
                QueuedEmail.attempts == expected_attempts,
            )
            .values(
                status=QueuedEmailStatus.SENDING.value,
                attempts=QueuedEmail.attempts + 1,
                scheduled_for=claim_until,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.exec(statement)
        if result.rowcount != 1:
            self.db.rollback()
            return False
        self.db.commit()
        return True

    def get_by_status(
        self,
        status: str,
        limit: int = 100,
        offset: int = 0,
        employer_id: Optional[int] = None,
    ) -> List[QueuedEmail]:
        """Emails in a status; `employer_id` restricts to that employer's candidates."""
        statement = self._for_employer(select(QueuedEmail).where(QueuedEmail.status == status), employer_id)
        statement = (
            statement
            .order_by(QueuedEmail.scheduled_for, QueuedEmail.id)
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.exec(statement).all())
