"""
Celery task tests, executed eagerly against the in-memory database.

Run: pytest tests/integration/test_tasks.py -v
"""

from datetime import datetime, timedelta

import pytest
from sqlmodel import select

from automation import tasks
from automation.default_rules import default_rules
from models.candidate import Candidate, CandidateStatus
from models.queued_email import QueuedEmail, QueuedEmailStatus
from repositories.automation_rule_repository import RuleStore


@pytest.fixture
def task_engine(db_engine, monkeypatch):
    monkeypatch.setattr(tasks, "get_engine", lambda: db_engine)
    return db_engine


class TestRunSweepTask:

    def test_runs_sweep(self, task_engine, session, employer):
        RuleStore(session).ensure_defaults(default_rules())
        idle_since = datetime.utcnow() - timedelta(days=40)
        candidate = Candidate(
            employer_id=employer.id, full_name="Old", email="old@example.com",
            status=CandidateStatus.SCREENING.value, created_at=idle_since, updated_at=idle_since,
        )
        session.add(candidate)
        session.commit()

        result = tasks.run_sweep_task.apply()

        assert result.successful()
        assert result.result["status"] == "completed"
        assert result.result["result"]["executed"] == 1
        session.refresh(candidate)
        assert candidate.status == CandidateStatus.REJECTED.value

    def test_configuration_error_fails_fast(self, monkeypatch):
        def missing_database():
            raise ValueError("DATABASE_URL is not configured")

        monkeypatch.setattr(tasks, "get_engine", missing_database)
        result = tasks.run_sweep_task.apply()

        assert result.failed()
        assert isinstance(result.result, ValueError)


class TestDrainEmailQueueTask:

    def test_drains_due_emails(self, task_engine, session):
        session.add(QueuedEmail(
            recipient="ana@example.com",
            template_id="rejection",
            variables={"candidateName": "Ana", "jobTitle": "Designer", "companyName": "Globex"},
            scheduled_for=datetime.utcnow() - timedelta(minutes=1),
        ))
        session.commit()

        result = tasks.drain_email_queue_task.apply()

        assert result.successful()
        assert result.result["result"] == {"sent": 1, "failed": 0, "dead_lettered": 0, "skipped": 0}
        emails = session.exec(select(QueuedEmail)).all()
        session.refresh(emails[0])
        assert emails[0].status == QueuedEmailStatus.SENT.value
