"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database; the API client shares the
test's session through a get_db override.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add project root to Python path (for direct invocation)
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import models  # noqa: F401  registers every table on SQLModel.metadata
from models.candidate import Candidate, CandidateStatus
from models.employer import Employer
from models.interview import Interview
from models.job import Job
from notifications.email_sender import DeliveryResult, EmailSender

NOW = datetime(2026, 3, 2, 8, 0)  # a Monday, before business hours


class RecordingSender(EmailSender):
    """Email sender that records deliveries and fails on demand."""

    def __init__(self, fail_times: int = 0, raise_error: bool = False):
        self.fail_times = fail_times
        self.raise_error = raise_error
        self.sent = []
        self.calls = 0

    def send(self, recipient, email):
        self.calls += 1
        if self.raise_error:
            raise RuntimeError("provider exploded")
        if self.calls <= self.fail_times:
            return DeliveryResult(success=False, error="HTTP 503: unavailable")
        self.sent.append((recipient, email))
        return DeliveryResult(success=True, provider_message_id=f"msg-{self.calls}")


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(db_engine):
    with Session(db_engine) as session:
        yield session


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def employer(session):
    employer = Employer(name="Acme Corp", contact_email="hiring@acme.example.com")
    session.add(employer)
    session.commit()
    session.refresh(employer)
    return employer


@pytest.fixture
def other_employer(session):
    employer = Employer(name="Globex", contact_email="jobs@globex.example.com")
    session.add(employer)
    session.commit()
    session.refresh(employer)
    return employer


@pytest.fixture
def job(session, employer):
    job = Job(employer_id=employer.id, title="Backend Engineer")
    session.add(job)
    session.commit()
    session.refresh(job)
    return job


@pytest.fixture
def make_candidate(session, employer):
    def _make(
        name="Jane Doe",
        status=CandidateStatus.SCREENING.value,
        idle_days=0,
        email="jane@example.com",
        employer_id=None,
    ):
        updated_at = NOW - timedelta(days=idle_days)
        candidate = Candidate(
            employer_id=employer_id or employer.id,
            full_name=name,
            email=email,
            status=status,
            created_at=updated_at,
            updated_at=updated_at,
        )
        session.add(candidate)
        session.commit()
        session.refresh(candidate)
        return candidate
    return _make


@pytest.fixture
def make_interview(session, employer, job, make_candidate):
    def _make(scheduled_at, duration=60, status="scheduled", candidate=None):
        candidate = candidate or make_candidate(name=f"Interviewee {scheduled_at.isoformat()}")
        interview = Interview(
            employer_id=employer.id,
            candidate_id=candidate.id,
            job_id=job.id,
            scheduled_at=scheduled_at,
            duration=duration,
            status=status,
        )
        session.add(interview)
        session.commit()
        session.refresh(interview)
        return interview
    return _make
