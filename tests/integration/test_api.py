"""
API route tests through FastAPI's TestClient.

Run: pytest tests/integration/test_api.py -v
"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from api.main import app
from automation.default_rules import default_rules
from config.settings import settings
from models.candidate import Candidate, CandidateStatus
from repositories.api_key_repository import APIKeyRepository
from repositories.automation_rule_repository import RuleStore
from utils.database import get_db

FUTURE_MONDAY_10 = datetime(2030, 1, 7, 10, 0)


@pytest.fixture
def client(session, employer, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", "sqlite://")
    RuleStore(session).ensure_defaults(default_rules())
    _, raw_key = APIKeyRepository(session).issue("test-key", employer.id)

    def _get_db():
        yield session

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app, headers={"X-API-Key": raw_key}) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(session, employer):
    _, raw_key = APIKeyRepository(session).issue("ops-key", employer.id, is_admin=True)
    return {"X-API-Key": raw_key}


@pytest.fixture
def idle_candidate(session, employer):
    def _make(name="Jane Doe", status=CandidateStatus.SCREENING.value, idle_days=0, email="jane@example.com"):
        updated_at = datetime.utcnow() - timedelta(days=idle_days)
        candidate = Candidate(
            employer_id=employer.id, full_name=name, email=email, status=status,
            created_at=updated_at, updated_at=updated_at,
        )
        session.add(candidate)
        session.commit()
        session.refresh(candidate)
        return candidate
    return _make


class TestHealthAndAuth:

    def test_ping_is_public(self):
        response = TestClient(app).get("/ping")
        assert response.status_code == 200
        assert response.json() == {"message": "pong"}

    def test_missing_key_rejected(self, client):
        response = client.get("/automation/rules", headers={"X-API-Key": ""})
        assert response.status_code in (401, 403)

    def test_invalid_key_rejected(self, client):
        response = client.get("/automation/rules", headers={"X-API-Key": "wrong"})
        assert response.status_code == 401


class TestInterviewRoutes:

    def book(self, client, candidate, job, start, **extra):
        payload = {"candidate_id": candidate.id, "job_id": job.id, "scheduled_at": start.isoformat(), **extra}
        return client.post("/interviews", json=payload)

    def test_schedule_then_conflict(self, client, job, idle_candidate):
        first = self.book(client, idle_candidate(name="A"), job, FUTURE_MONDAY_10)
        assert first.status_code == 201
        assert first.json()["duration"] == 60

        clash = self.book(client, idle_candidate(name="B"), job, FUTURE_MONDAY_10 + timedelta(minutes=30))
        assert clash.status_code == 409
        detail = clash.json()["detail"]
        assert detail["conflict_type"] == "overlapping"
        assert detail["conflicting_interview_ids"] == [first.json()["id"]]

    def test_check_conflicts_endpoint(self, client, job, idle_candidate):
        self.book(client, idle_candidate(), job, FUTURE_MONDAY_10)

        touching = client.get("/interviews/conflicts", params={
            "scheduled_at": (FUTURE_MONDAY_10 + timedelta(hours=1)).isoformat(), "duration": 30,
        })
        overlapping = client.get("/interviews/conflicts", params={
            "scheduled_at": (FUTURE_MONDAY_10 + timedelta(minutes=45)).isoformat(), "duration": 30,
        })

        assert touching.json()["has_conflict"] is False
        assert overlapping.json()["has_conflict"] is True

    def test_suggestions(self, client, job, idle_candidate):
        self.book(client, idle_candidate(), job, FUTURE_MONDAY_10.replace(hour=9), duration=90)

        response = client.get("/interviews/suggestions", params={
            "preferred_date": FUTURE_MONDAY_10.replace(hour=0).isoformat(),
            "duration": 60,
            "number_of_suggestions": 2,
        })

        assert response.status_code == 200
        assert response.json()["suggestions"] == ["2030-01-07T10:30:00", "2030-01-07T11:00:00"]

    def test_invalid_duration_is_400(self, client):
        response = client.get("/interviews/conflicts", params={
            "scheduled_at": FUTURE_MONDAY_10.isoformat(), "duration": 0,
        })
        assert response.status_code == 400

    def test_cancel_complete_and_listing(self, client, job, idle_candidate):
        candidate = idle_candidate()
        interview_id = self.book(client, candidate, job, FUTURE_MONDAY_10).json()["id"]
        other_id = self.book(client, idle_candidate(name="B"), job, FUTURE_MONDAY_10 + timedelta(days=1)).json()["id"]

        assert client.post(f"/interviews/{other_id}/cancel", json={"reason": "no show"}).json()["status"] == "cancelled"
        assert client.post(f"/interviews/{interview_id}/complete").json()["status"] == "completed"

        listing = client.get("/interviews").json()
        assert listing["total"] == 2
        calendar = client.get("/interviews/calendar", params={
            "start": FUTURE_MONDAY_10.replace(hour=0).isoformat(),
            "end": (FUTURE_MONDAY_10 + timedelta(days=7)).isoformat(),
        }).json()
        assert list(calendar["days"]) == ["2030-01-07"]
        assert client.get(f"/interviews/candidate/{candidate.id}").json()["total"] == 1

    def test_unknown_interview_is_404(self, client):
        assert client.post("/interviews/12345/complete").status_code == 404


class TestAutomationRoutes:

    def test_list_rules(self, client):
        rules = client.get("/automation/rules").json()["rules"]
        assert {r["id"] for r in rules} >= {"auto_reject_30_days", "screening_follow_up"}

    def test_list_rules_in_sweep_order(self, client):
        rules = client.get("/automation/rules").json()["rules"]
        priorities = [r["priority"] for r in rules]
        ids = [r["id"] for r in rules]

        assert priorities == sorted(priorities)
        assert ids.index("auto_reject_30_days") < ids.index("screening_follow_up")

    def test_deactivate_and_activate(self, client, admin_headers):
        response = client.post("/automation/rules/auto_reject_30_days/deactivate", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["is_active"] is False
        assert response.json()["version"] == 2

        active = client.get("/automation/rules", params={"active_only": True}).json()["rules"]
        assert "auto_reject_30_days" not in {r["id"] for r in active}

        activated = client.post("/automation/rules/auto_reject_30_days/activate", headers=admin_headers)
        assert activated.json()["is_active"] is True

    def test_toggling_rules_requires_admin_key(self, client, session):
        deactivate = client.post("/automation/rules/auto_reject_30_days/deactivate")
        activate = client.post("/automation/rules/offer_congratulations/activate")

        assert deactivate.status_code == 403
        assert deactivate.json()["detail"] == "API key is not an admin key"
        assert activate.status_code == 403
        assert RuleStore(session).get("auto_reject_30_days").is_active is True
        assert RuleStore(session).get("offer_congratulations").is_active is False

    def test_unknown_rule_is_404(self, client, admin_headers):
        assert client.post("/automation/rules/nope/activate", headers=admin_headers).status_code == 404
        assert client.post("/automation/rules/nope/trigger").status_code == 404

    def test_sweep(self, client, session, idle_candidate):
        candidate = idle_candidate(idle_days=31)

        body = client.post("/automation/sweep").json()

        assert body["executed"] == 1
        assert body["candidates"] == [candidate.id]
        session.refresh(candidate)
        assert candidate.status == CandidateStatus.REJECTED.value

        pending = client.get("/email/queue").json()["emails"]
        assert [e["template_id"] for e in pending] == ["auto_rejection"]

    def test_trigger_manual_rule(self, client, idle_candidate):
        candidate = idle_candidate(status=CandidateStatus.SCREENED.value)
        body = client.post("/automation/rules/manual_rejection/trigger").json()

        assert body == {"success": True, "count": 1, "candidate_ids": [candidate.id], "failed": 0, "skipped": 0}


class TestCandidateRoutes:

    def test_status_change_fires_rules(self, client, session, idle_candidate):
        RuleStore(session).activate("offer_congratulations")
        candidate = idle_candidate(status=CandidateStatus.INTERVIEW_COMPLETED.value)

        response = client.patch(f"/candidates/{candidate.id}/status", json={"status": "offered"})

        assert response.status_code == 200
        assert response.json()["candidate"]["status"] == "offered"
        assert response.json()["fired_rules"] == ["offer_congratulations"]

    def test_stale_expected_version_is_409(self, client, idle_candidate):
        candidate = idle_candidate()
        response = client.patch(
            f"/candidates/{candidate.id}/status",
            json={"status": "screened", "expected_version": candidate.version + 5},
        )
        assert response.status_code == 409

    def test_unknown_candidate_is_404(self, client):
        assert client.patch("/candidates/999/status", json={"status": "screened"}).status_code == 404


class TestEmailRoutes:

    def test_templates(self, client):
        templates = client.get("/email/templates", params={"category": "automation"}).json()["templates"]
        assert {t["id"] for t in templates} == {
            "screening_follow_up", "auto_rejection", "interview_reminder", "feedback_reminder",
        }
        assert client.get("/email/templates/job_offer").json()["category"] == "offer"
        assert client.get("/email/templates/nope").status_code == 404

    def test_preview(self, client):
        response = client.post("/email/templates/interview_invitation/preview", json={"variables": {
            "candidateName": "John", "jobTitle": "Software Engineer", "companyName": "Acme",
        }})

        body = response.json()
        assert body["subject"] == "Interview Invitation - Software Engineer at Acme"
        assert "interviewDate" in body["missing_variables"]

    def test_drain_dead_letter_and_requeue(self, client, session, idle_candidate):
        from notifications.email_queue import EmailQueue

        candidate = idle_candidate()
        email = EmailQueue(session).enqueue(candidate.email, "unknown_template", {}, candidate_id=candidate.id)

        drained = client.post("/email/queue/drain").json()
        assert drained["dead_lettered"] == 1

        dead = client.get("/email/queue/dead").json()["emails"]
        assert [e["id"] for e in dead] == [email.id]

        requeued = client.post(f"/email/queue/{email.id}/requeue")
        assert requeued.status_code == 200
        assert requeued.json()["status"] == "pending"
        assert client.post(f"/email/queue/{email.id}/requeue").status_code == 400

    def test_drain_only_delivers_callers_emails(self, client, session, employer, other_employer, idle_candidate):
        from notifications.email_queue import EmailQueue

        candidate = idle_candidate()
        email = EmailQueue(session).enqueue(
            candidate.email,
            "rejection",
            {"candidateName": "Jane", "jobTitle": "Designer", "companyName": "Acme"},
            scheduled_for=datetime.utcnow() - timedelta(minutes=1),
            candidate_id=candidate.id,
        )
        _, globex_key = APIKeyRepository(session).issue("globex-key", other_employer.id)

        foreign = client.post("/email/queue/drain", headers={"X-API-Key": globex_key}).json()
        session.refresh(email)

        assert foreign == {"sent": 0, "failed": 0, "dead_lettered": 0, "skipped": 0}
        assert email.status == "pending"

        own = client.post("/email/queue/drain").json()
        session.refresh(email)

        assert own["sent"] == 1
        assert email.status == "sent"
