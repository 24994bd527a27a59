"""
Sample pipeline data for local development.
Creates one employer with a job and candidates spread over the pipeline.
"""

from datetime import datetime, timedelta

from sqlmodel import Session, select

from models.candidate import Candidate, CandidateStatus
from models.employer import Employer
from models.job import Job
from utils.database import get_engine

DEFAULT_EMPLOYER = "Acme Corp"

CANDIDATES_DATA = [
    # (name, email, status, days since last update)
    ("John Anderson", "john.anderson@example.com", CandidateStatus.SCREENING, 31),
    ("Michael Brown", "michael.brown@example.com", CandidateStatus.SCREENING, 4),
    ("Sarah Collins", "sarah.collins@example.com", CandidateStatus.SCREENED, 1),
    ("Daniel Lee", "daniel.lee@example.com", CandidateStatus.INTERVIEW_COMPLETED, 3),
    ("Kevin Turner", "kevin.turner@example.com", CandidateStatus.ACTIVE, 0),
]


def seed_sample_data() -> None:
    print("Seeding sample employer, job and candidates...")
    now = datetime.utcnow()
    with Session(get_engine()) as session:
        employer = session.exec(select(Employer).where(Employer.name == DEFAULT_EMPLOYER)).first()
        if employer:
            print(f"  Employer '{DEFAULT_EMPLOYER}' exists (id={employer.id}), skipping")
            return

        employer = Employer(name=DEFAULT_EMPLOYER, contact_email="hiring@acme.example.com")
        session.add(employer)
        session.commit()
        session.refresh(employer)

        session.add(Job(employer_id=employer.id, title="Senior Backend Engineer"))
        for name, email, status, idle_days in CANDIDATES_DATA:
            updated_at = now - timedelta(days=idle_days)
            session.add(Candidate(
                employer_id=employer.id,
                full_name=name,
                email=email,
                status=status.value,
                created_at=updated_at,
                updated_at=updated_at,
            ))
        session.commit()
        print(f"  ✅ Created employer '{DEFAULT_EMPLOYER}' with {len(CANDIDATES_DATA)} candidates")


if __name__ == "__main__":
    seed_sample_data()
