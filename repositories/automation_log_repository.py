from datetime import datetime
from typing import Optional

from sqlmodel import Session

from models.automation_log import AutomationLog
from models.interview import Interview


class AutomationLogRepository:
    """Data access helpers for automation logs."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def record(
        self,
        rule_id: str,
        candidate_id: int,
        status: str,
        email_queued: bool = False,
        error: Optional[str] = None,
        interview: Optional[Interview] = None,
        created_at: Optional[datetime] = None,
        commit: bool = True,
    ) -> AutomationLog:
        log = AutomationLog(
            created_at=created_at or datetime.utcnow(),
            rule_id=rule_id,
            candidate_id=candidate_id,
            status=status,
            email_queued=email_queued,
            error=error,
            interview_id=interview.id if interview else None,
            interview_scheduled_at=interview.scheduled_at if interview else None,
        )
        self.db.add(log)
        if commit:
            self.db.commit()
        return log
