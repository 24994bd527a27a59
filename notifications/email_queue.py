"""
Email outbox: enqueue now, deliver on drain.

Delivery is at-least-once. A failed send is retried with exponential
backoff and moved to the dead-letter status after the configured number of
attempts; dead rows are only retried after an explicit requeue.

Drains may run concurrently (beat and the HTTP drain endpoint). Each row is
claimed with a compare-and-set before the sender is called, so only one
drain delivers a given attempt.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from config.settings import settings
from models.queued_email import QueuedEmail, QueuedEmailStatus
from notifications.email_sender import EmailSender, get_email_sender
from notifications.templates import render_template
from repositories.exceptions import RecordNotFoundError
from repositories.queued_email_repository import QueuedEmailRepository

logger = logging.getLogger(__name__)


@dataclass
class DrainResult:
    sent: int = 0
    failed: int = 0
    dead_lettered: int = 0
    # Rows another drain claimed first
    skipped: int = 0

    @property
    def processed(self) -> int:
        return self.sent + self.failed + self.dead_lettered

    def to_dict(self) -> Dict[str, int]:
        return {
            "sent": self.sent,
            "failed": self.failed,
            "dead_lettered": self.dead_lettered,
            "skipped": self.skipped,
        }


class EmailQueue:
    """Durable email queue backed by the queued_emails table."""

    def __init__(
        self,
        db_session: Session,
        sender: Optional[EmailSender] = None,
        max_attempts: Optional[int] = None,
        retry_base_seconds: Optional[int] = None,
        lease_seconds: Optional[int] = None,
    ):
        self.repo = QueuedEmailRepository(db_session)
        self._sender = sender
        self.max_attempts = max_attempts or settings.EMAIL_MAX_ATTEMPTS
        self.retry_base_seconds = retry_base_seconds or settings.EMAIL_RETRY_BASE_SECONDS
        self.lease_seconds = lease_seconds or settings.EMAIL_SEND_LEASE_SECONDS

    @property
    def sender(self) -> EmailSender:
        if self._sender is None:
            self._sender = get_email_sender()
        return self._sender

    def enqueue(
        self,
        recipient: str,
        template_id: str,
        variables: Dict[str, Any],
        scheduled_for: Optional[datetime] = None,
        candidate_id: Optional[int] = None,
        commit: bool = True,
    ) -> QueuedEmail:
        email = self.repo.add(
            recipient=recipient,
            template_id=template_id,
            variables=variables,
            scheduled_for=scheduled_for or datetime.utcnow(),
            candidate_id=candidate_id,
            commit=commit,
        )
        logger.debug(f"Queued {template_id} email for {recipient}")
        return email

    def pending(self, limit: int = 100, offset: int = 0, employer_id: Optional[int] = None) -> List[QueuedEmail]:
        return self.repo.get_by_status(
            QueuedEmailStatus.PENDING.value, limit=limit, offset=offset, employer_id=employer_id
        )

    def dead_letters(self, limit: int = 100, offset: int = 0, employer_id: Optional[int] = None) -> List[QueuedEmail]:
        return self.repo.get_by_status(
            QueuedEmailStatus.DEAD.value, limit=limit, offset=offset, employer_id=employer_id
        )

    def _backoff(self, attempts: int) -> timedelta:
        return timedelta(seconds=self.retry_base_seconds * (2 ** (attempts - 1)))

    def _deliver(self, email: QueuedEmail, now: datetime) -> str:
        """Attempt one delivery of a claimed row. Returns "sent", "failed" or "dead"."""
        rendered = render_template(email.template_id, email.variables or {})

        if rendered is None:
            email.status = QueuedEmailStatus.DEAD.value
            email.last_error = f"Unknown template: {email.template_id}"
            return "dead"

        try:
            result = self.sender.send(email.recipient, rendered)
        except Exception as e:
            logger.exception(f"Email sender raised for queued email {email.id}")
            success, error = False, f"sender error: {e}"
        else:
            success, error = result.success, result.error

        if success:
            email.status = QueuedEmailStatus.SENT.value
            email.sent_at = now
            email.last_error = None
            return "sent"

        email.last_error = error or "delivery failed"
        if email.attempts >= self.max_attempts:
            email.status = QueuedEmailStatus.DEAD.value
            logger.error(
                f"Queued email {email.id} dead-lettered after {email.attempts} attempts: {email.last_error}"
            )
            return "dead"

        email.status = QueuedEmailStatus.PENDING.value
        email.scheduled_for = now + self._backoff(email.attempts)
        logger.warning(
            f"Queued email {email.id} failed (attempt {email.attempts}/{self.max_attempts}), "
            f"retrying at {email.scheduled_for.isoformat()}: {email.last_error}"
        )
        return "failed"

    def drain(
        self,
        now: Optional[datetime] = None,
        limit: int = 100,
        employer_id: Optional[int] = None,
    ) -> DrainResult:
        """
        Deliver every pending email due at `now`.

        Args:
            now: Reference time (defaults to utcnow)
            limit: Maximum number of emails handled in this drain
            employer_id: Only deliver emails to this employer's candidates

        Returns:
            DrainResult with sent / failed / dead_lettered / skipped counts
        """
        now = now or datetime.utcnow()
        result = DrainResult()
        claim_until = now + timedelta(seconds=self.lease_seconds)

        for email in self.repo.get_due(now, limit=limit, employer_id=employer_id):
            if not self.repo.claim(email.id, email.status, email.attempts, claim_until):
                logger.debug(f"Queued email {email.id} already claimed by another drain")
                result.skipped += 1
                continue
            self.repo.db.refresh(email)

            outcome = self._deliver(email, now)
            self.repo.db.add(email)
            self.repo.db.commit()

            if outcome == "sent":
                result.sent += 1
            elif outcome == "dead":
                result.dead_lettered += 1
            else:
                result.failed += 1

        if result.processed:
            logger.info(f"Email queue drained: {result.to_dict()}")
        return result

    def requeue(self, email_id: int, now: Optional[datetime] = None) -> QueuedEmail:
        """
        Put a dead-lettered email back in the queue with a fresh attempt budget.

        Raises:
            RecordNotFoundError: If the email does not exist
            ValueError: If the email is not dead-lettered
        """
        email = self.repo.get_by_id(email_id)
        if email is None:
            raise RecordNotFoundError(f"Queued email not found: {email_id}")
        if email.status != QueuedEmailStatus.DEAD.value:
            raise ValueError(f"Queued email {email_id} is {email.status}, only dead emails can be requeued")

        email.status = QueuedEmailStatus.PENDING.value
        email.attempts = 0
        email.scheduled_for = now or datetime.utcnow()
        return self.repo.save(email)
