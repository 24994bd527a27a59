"""
Integration tests for the automation engine on an in-memory database.

Run: pytest tests/integration/test_automation_engine.py -v
"""

from datetime import timedelta

import pytest
from sqlalchemy import update
from sqlmodel import select

from automation.default_rules import default_rules
from automation.engine import AutomationEngine, CandidateSnapshot
from models.automation_log import AutomationLog
from models.automation_rule import AutomationRule, RuleTrigger
from models.candidate import Candidate, CandidateStatus
from models.queued_email import QueuedEmail
from notifications.email_queue import EmailQueue
from repositories.automation_rule_repository import RuleStore
from repositories.exceptions import RuleNotFoundError, StaleCandidateError
from services.interview_service import InterviewService
from tests.conftest import NOW, RecordingSender


@pytest.fixture
def rules(session):
    return RuleStore(session).ensure_defaults(default_rules())


@pytest.fixture
def engine(session, clock, rules):
    return AutomationEngine(session, email_queue=EmailQueue(session, sender=RecordingSender()), clock=clock)


def queued(session):
    return list(session.exec(select(QueuedEmail).order_by(QueuedEmail.id)).all())


# ---------------------------------------------------------------------------
# run_sweep
# ---------------------------------------------------------------------------

class TestSweep:

    def test_auto_reject_after_30_days(self, session, engine, make_candidate):
        candidate = make_candidate(idle_days=31)

        result = engine.run_sweep()

        session.refresh(candidate)
        assert candidate.status == CandidateStatus.REJECTED.value
        assert candidate.version == 2
        assert candidate.id in result.candidates
        emails = queued(session)
        assert [e.template_id for e in emails] == ["auto_rejection"]
        assert emails[0].recipient == "jane@example.com"
        assert emails[0].variables["candidateName"] == "Jane Doe"
        assert emails[0].variables["companyName"] == "Acme Corp"
        assert emails[0].variables["daysInactive"] == 30

    def test_recent_screening_gets_follow_up_only(self, session, engine, make_candidate):
        candidate = make_candidate(idle_days=4)

        engine.run_sweep()

        session.refresh(candidate)
        assert candidate.status == CandidateStatus.SCREENING.value
        assert [e.template_id for e in queued(session)] == ["screening_follow_up"]

    def test_fresh_candidate_is_untouched(self, session, engine, make_candidate):
        make_candidate(idle_days=1)
        result = engine.run_sweep()

        assert result.executed == 0
        assert queued(session) == []

    def test_second_sweep_is_idempotent(self, session, engine, make_candidate):
        make_candidate(name="Old", idle_days=31, email="old@example.com")
        make_candidate(name="Idle", idle_days=5, email="idle@example.com")

        first = engine.run_sweep()
        second = engine.run_sweep()

        assert first.executed == 2
        assert second.executed == 0
        assert len(queued(session)) == 2

    def test_rule_fires_again_after_candidate_changes(self, session, engine, make_candidate):
        candidate = make_candidate(idle_days=5)
        engine.run_sweep()

        # a later edit followed by another idle period makes the rule eligible again
        candidate.updated_at = NOW + timedelta(minutes=1)
        session.add(candidate)
        session.commit()
        later = AutomationEngine(
            session, email_queue=engine.email_queue, clock=lambda: NOW + timedelta(days=3, minutes=2)
        )
        later.run_sweep()

        assert [e.template_id for e in queued(session)] == ["screening_follow_up", "screening_follow_up"]

    def test_inactive_rules_do_not_run(self, session, engine, make_candidate):
        RuleStore(session).deactivate("auto_reject_30_days")
        candidate = make_candidate(idle_days=31)

        engine.run_sweep()

        session.refresh(candidate)
        assert candidate.status == CandidateStatus.SCREENING.value
        assert [e.template_id for e in queued(session)] == ["screening_follow_up"]

    def test_interview_reminder_within_a_day(self, session, engine, make_candidate, make_interview):
        soon = make_candidate(name="Soon", status=CandidateStatus.INTERVIEW_SCHEDULED.value, email="soon@example.com")
        later = make_candidate(name="Later", status=CandidateStatus.INTERVIEW_SCHEDULED.value, email="later@example.com")
        make_interview(NOW + timedelta(hours=20), candidate=soon)
        make_interview(NOW + timedelta(days=3), candidate=later)

        engine.run_sweep()

        emails = queued(session)
        assert [(e.template_id, e.recipient) for e in emails] == [("interview_reminder", "soon@example.com")]
        assert emails[0].variables["jobTitle"] == "Backend Engineer"
        assert emails[0].variables["interviewTime"] == (NOW + timedelta(hours=20)).strftime("%H:%M")

    def test_rescheduled_interview_gets_a_new_reminder(self, session, engine, clock, make_candidate, make_interview):
        candidate = make_candidate(status=CandidateStatus.INTERVIEW_SCHEDULED.value, email="moved@example.com")
        interview = make_interview(NOW + timedelta(hours=20), candidate=candidate)
        engine.run_sweep()

        new_start = NOW.replace(hour=10) + timedelta(days=7)
        InterviewService(session, engine=engine, clock=clock).reschedule_interview(
            interview.employer_id, interview.id, new_start
        )
        # the moved interview is outside today's window, and the old slot no longer exists
        assert engine.run_sweep().executed == 0

        later = AutomationEngine(
            session, email_queue=engine.email_queue, clock=lambda: new_start - timedelta(hours=12)
        )
        assert later.run_sweep().candidates == [candidate.id]
        assert later.run_sweep().executed == 0

        reminders = queued(session)
        assert [e.template_id for e in reminders] == ["interview_reminder", "interview_reminder"]
        assert reminders[1].variables["interviewDate"] == new_start.strftime("%Y-%m-%d")
        logs = session.exec(
            select(AutomationLog).where(AutomationLog.rule_id == "interview_reminder").order_by(AutomationLog.id)
        ).all()
        assert [(log.interview_id, log.interview_scheduled_at) for log in logs] == [
            (interview.id, NOW + timedelta(hours=20)),
            (interview.id, new_start),
        ]

    def test_rules_run_in_priority_order(self, session, clock, make_candidate):
        store = RuleStore(session)
        store.ensure_defaults([
            AutomationRule(
                id="a_nudge",
                priority=50,
                name="Nudge",
                trigger=RuleTrigger.TIME_BASED.value,
                conditions={"status": CandidateStatus.SCREENING.value, "inactive_for_days": 3},
                actions={"send_email": True, "template_id": "screening_follow_up"},
            ),
            AutomationRule(
                id="z_close",
                priority=10,
                name="Close",
                trigger=RuleTrigger.TIME_BASED.value,
                conditions={"status": CandidateStatus.SCREENING.value, "inactive_for_days": 30},
                actions={
                    "set_status": CandidateStatus.REJECTED.value,
                    "send_email": True,
                    "template_id": "auto_rejection",
                },
            ),
        ])
        make_candidate(idle_days=31)
        engine = AutomationEngine(session, email_queue=EmailQueue(session, sender=RecordingSender()), clock=clock)

        result = engine.run_sweep()

        assert [o.rule_id for o in result.rules] == ["z_close", "a_nudge"]
        # the nudge no longer matches a candidate the close rule already rejected
        assert [e.template_id for e in queued(session)] == ["auto_rejection"]

    def test_feedback_reminder_goes_to_employer(self, session, engine, make_candidate):
        make_candidate(status=CandidateStatus.INTERVIEW_COMPLETED.value, idle_days=3)

        engine.run_sweep()

        emails = queued(session)
        assert [(e.template_id, e.recipient) for e in emails] == [("feedback_reminder", "hiring@acme.example.com")]

    def test_batch_limit_caps_each_rule(self, session, clock, rules, make_candidate):
        for i in range(5):
            make_candidate(name=f"C{i}", idle_days=31, email=f"c{i}@example.com")
        engine = AutomationEngine(session, email_queue=EmailQueue(session, sender=RecordingSender()),
                                  batch_limit=2, clock=clock)

        result = engine.run_sweep()
        executed = {o.rule_id: o.executed for o in result.rules}

        assert executed["auto_reject_30_days"] == 2
        # screening_follow_up picks up candidates still in screening, also capped
        assert executed["screening_follow_up"] == 2
        assert result.executed == 4

    def test_failure_for_one_candidate_does_not_stop_batch(self, session, engine, make_candidate, monkeypatch):
        bad = make_candidate(name="Bad", idle_days=31, email="bad@example.com")
        good = make_candidate(name="Good", idle_days=31, email="good@example.com")
        real_enqueue = engine.email_queue.enqueue

        def flaky_enqueue(recipient, *args, **kwargs):
            if recipient == "bad@example.com":
                raise RuntimeError("outbox unavailable")
            return real_enqueue(recipient, *args, **kwargs)

        monkeypatch.setattr(engine.email_queue, "enqueue", flaky_enqueue)
        result = engine.run_sweep()

        session.refresh(bad)
        session.refresh(good)
        assert good.status == CandidateStatus.REJECTED.value
        # the failed candidate's status write was rolled back with its email
        assert bad.status == CandidateStatus.SCREENING.value
        assert result.failed >= 1
        failed_logs = session.exec(select(AutomationLog).where(AutomationLog.status == "failed")).all()
        assert {log.candidate_id for log in failed_logs} == {bad.id}

    def test_stale_candidate_is_skipped_not_overwritten(self, session, engine, make_candidate, monkeypatch):
        candidate = make_candidate(idle_days=31)
        real_cas = engine.candidates.compare_and_set_status

        def concurrent_edit_then_cas(candidate_id, *args, **kwargs):
            # a user moves the candidate between the sweep's read and its write
            session.exec(
                update(Candidate)
                .where(Candidate.id == candidate_id)
                .values(status=CandidateStatus.SCREENED.value, version=Candidate.version + 1)
            )
            session.commit()
            return real_cas(candidate_id, *args, **kwargs)

        monkeypatch.setattr(engine.candidates, "compare_and_set_status", concurrent_edit_then_cas)
        result = engine.run_sweep()

        session.refresh(candidate)
        assert candidate.status == CandidateStatus.SCREENED.value
        assert result.skipped == 1
        assert all(e.template_id != "auto_rejection" for e in queued(session))


# ---------------------------------------------------------------------------
# _apply and compare-and-set
# ---------------------------------------------------------------------------

class TestApply:

    def test_stale_snapshot_raises(self, session, engine, make_candidate):
        candidate = make_candidate(idle_days=31)
        stale = CandidateSnapshot(
            id=candidate.id,
            employer_id=candidate.employer_id,
            full_name=candidate.full_name,
            email=candidate.email,
            status=candidate.status,
            version=candidate.version - 1,
        )
        rule = RuleStore(session).get("auto_reject_30_days")

        with pytest.raises(StaleCandidateError):
            engine._apply(rule, stale, NOW)

        session.refresh(candidate)
        assert candidate.status == CandidateStatus.SCREENING.value
        assert queued(session) == []

    def test_missing_email_skips_send(self, session, engine, make_candidate):
        make_candidate(idle_days=31, email=None)
        result = engine.run_sweep()

        assert result.executed == 1
        assert queued(session) == []


# ---------------------------------------------------------------------------
# trigger_rule and status-change hook
# ---------------------------------------------------------------------------

class TestTriggerRule:

    def test_manual_rule(self, session, engine, make_candidate):
        screened = make_candidate(name="S", status=CandidateStatus.SCREENED.value, email="s@example.com")
        make_candidate(name="Other", status=CandidateStatus.ACTIVE.value, email="o@example.com")

        result = engine.trigger_rule("manual_rejection")

        assert result["success"]
        assert result["count"] == 1
        assert result["candidate_ids"] == [screened.id]
        session.refresh(screened)
        assert screened.status == CandidateStatus.REJECTED.value

    def test_trigger_scoped_to_employer(self, session, engine, make_candidate):
        from models.employer import Employer

        other = Employer(name="Globex")
        session.add(other)
        session.commit()
        session.refresh(other)
        mine = make_candidate(name="Mine", status=CandidateStatus.SCREENED.value)
        theirs = make_candidate(name="Theirs", status=CandidateStatus.SCREENED.value, employer_id=other.id)

        result = engine.trigger_rule("manual_rejection", employer_id=mine.employer_id)

        assert result["candidate_ids"] == [mine.id]
        session.refresh(theirs)
        assert theirs.status == CandidateStatus.SCREENED.value

    def test_unknown_rule(self, engine):
        with pytest.raises(RuleNotFoundError):
            engine.trigger_rule("no_such_rule")

    def test_status_change_rule_fires_when_active(self, session, engine, make_candidate):
        RuleStore(session).activate("offer_congratulations")
        candidate = make_candidate(status=CandidateStatus.OFFERED.value)

        fired = engine.handle_status_change(candidate, CandidateStatus.INTERVIEW_COMPLETED.value,
                                            CandidateStatus.OFFERED.value)

        assert fired == ["offer_congratulations"]
        assert [e.template_id for e in queued(session)] == ["job_offer"]

    def test_status_change_rule_inactive_by_default(self, session, engine, make_candidate):
        candidate = make_candidate(status=CandidateStatus.OFFERED.value)
        fired = engine.handle_status_change(candidate, CandidateStatus.SCREENED.value, CandidateStatus.OFFERED.value)

        assert fired == []
        assert queued(session) == []
