"""
Pipeline automation engine.

Evaluates stored rules against candidates and applies their actions:
an optional status transition plus template emails written to the outbox.
Each candidate is handled in its own transaction; a failure for one
candidate is logged and counted and the batch carries on.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlmodel import Session

from automation.default_rules import normalize_conditions
from config.settings import settings
from models.automation_rule import AutomationRule, RuleTrigger
from models.candidate import Candidate
from models.employer import Employer
from models.interview import Interview
from models.job import Job
from notifications.email_queue import EmailQueue
from repositories.automation_log_repository import AutomationLogRepository
from repositories.automation_rule_repository import RuleStore
from repositories.candidate_repository import CandidateRepository
from repositories.exceptions import StaleCandidateError
from repositories.interview_repository import InterviewRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateSnapshot:
    """Candidate fields as read by the sweep; the write compares against these."""
    id: int
    employer_id: int
    full_name: str
    email: Optional[str]
    status: str
    version: int
    updated_at: Optional[datetime] = None

    @classmethod
    def of(cls, candidate: Candidate) -> "CandidateSnapshot":
        return cls(
            id=candidate.id,
            employer_id=candidate.employer_id,
            full_name=candidate.full_name,
            email=candidate.email,
            status=candidate.status,
            version=candidate.version,
            updated_at=candidate.updated_at,
        )


@dataclass
class RuleOutcome:
    rule_id: str
    matched: int = 0
    executed: int = 0
    failed: int = 0
    skipped: int = 0
    candidate_ids: List[int] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "matched": self.matched,
            "executed": self.executed,
            "failed": self.failed,
            "skipped": self.skipped,
            "candidate_ids": list(self.candidate_ids),
            "error": self.error,
        }


@dataclass
class SweepResult:
    executed: int = 0
    candidates: List[int] = field(default_factory=list)
    failed: int = 0
    skipped: int = 0
    rules: List[RuleOutcome] = field(default_factory=list)

    def add(self, outcome: RuleOutcome) -> None:
        self.rules.append(outcome)
        self.executed += outcome.executed
        self.candidates.extend(outcome.candidate_ids)
        self.failed += outcome.failed
        self.skipped += outcome.skipped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "executed": self.executed,
            "candidates": list(self.candidates),
            "failed": self.failed,
            "skipped": self.skipped,
            "rules": [r.to_dict() for r in self.rules],
        }


class AutomationEngine:
    """
    Applies automation rules from the rule store.

    Args:
        db_session: SQLModel session shared by all repositories
        email_queue: Outbox to write emails to (built on the same session by default)
        batch_limit: Max candidates handled per rule per run
        clock: Callable returning the current naive-UTC time
    """

    def __init__(
        self,
        db_session: Session,
        email_queue: Optional[EmailQueue] = None,
        batch_limit: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.db = db_session
        self.rules = RuleStore(db_session)
        self.candidates = CandidateRepository(db_session)
        self.interviews = InterviewRepository(db_session)
        self.logs = AutomationLogRepository(db_session)
        self.email_queue = email_queue or EmailQueue(db_session)
        self.batch_limit = batch_limit or settings.AUTOMATION_BATCH_LIMIT
        self._clock = clock or datetime.utcnow
        self._employers: Dict[int, Optional[Employer]] = {}

    def now(self) -> datetime:
        return self._clock()

    # -------------------------
    # Matching
    # -------------------------

    @staticmethod
    def _interview_window(rule: AutomationRule, now: datetime) -> Optional[Tuple[datetime, datetime]]:
        """[now, now + days] for interview-window rules, None for every other rule."""
        days = normalize_conditions(rule.conditions).get("occurs_within_days")
        if days is None:
            return None
        return now, now + timedelta(days=float(days))

    def match(self, rule: AutomationRule, now: datetime, employer_id: Optional[int] = None) -> List[Candidate]:
        """
        Candidates a rule applies to right now, capped at the batch limit.

        Args:
            rule: Rule to evaluate
            now: Reference time
            employer_id: Restrict to one employer; None matches across employers

        Raises:
            ValueError: If the rule has no status condition
        """
        conditions = normalize_conditions(rule.conditions)
        status = conditions.get("status")
        if not status:
            raise ValueError(f"Automation rule {rule.id} has no status condition")

        window = self._interview_window(rule, now)
        if window is not None:
            return self.candidates.find_with_interview_between(
                status, *window, limit=self.batch_limit, rule_id=rule.id, employer_id=employer_id
            )

        if conditions.get("inactive_for_days") is not None:
            threshold = now - timedelta(days=float(conditions["inactive_for_days"]))
            return self.candidates.find_inactive(
                status, threshold, limit=self.batch_limit, rule_id=rule.id, employer_id=employer_id
            )

        return self.candidates.find_by_status(
            status, limit=self.batch_limit, rule_id=rule.id, employer_id=employer_id
        )

    # -------------------------
    # Actions
    # -------------------------

    def _employer(self, employer_id: int) -> Optional[Employer]:
        if employer_id not in self._employers:
            self._employers[employer_id] = self.db.get(Employer, employer_id)
        return self._employers[employer_id]

    def _email_variables(
        self,
        rule: AutomationRule,
        candidate: CandidateSnapshot,
        now: datetime,
        interview: Optional[Interview] = None,
    ) -> Dict[str, Any]:
        conditions = normalize_conditions(rule.conditions)
        employer = self._employer(candidate.employer_id)
        variables: Dict[str, Any] = {
            "candidateName": candidate.full_name,
            "candidateEmail": candidate.email,
            "companyName": employer.name if employer else None,
            "ruleName": rule.name,
        }
        if conditions.get("inactive_for_days") is not None:
            variables["daysInactive"] = conditions["inactive_for_days"]
        elif candidate.updated_at is not None:
            variables["daysInactive"] = max((now - candidate.updated_at).days, 0)

        interview = interview or self.interviews.next_for_candidate(candidate.id, after=now)
        if interview is not None:
            job = self.db.get(Job, interview.job_id)
            variables.update({
                "jobTitle": job.title if job else None,
                "interviewDate": interview.scheduled_at.strftime("%Y-%m-%d"),
                "interviewTime": interview.scheduled_at.strftime("%H:%M"),
                "interviewLocation": interview.location or interview.meeting_link or "To be confirmed",
            })
        return variables

    def _apply(
        self,
        rule: AutomationRule,
        candidate: CandidateSnapshot,
        now: datetime,
        interview: Optional[Interview] = None,
    ) -> bool:
        """
        Apply a rule's actions to one candidate in a single transaction.

        Args:
            rule: Rule being applied
            candidate: Candidate as read by the caller
            now: Reference time
            interview: Interview the rule fired for; recorded in the log so the
                same interview start is not handled twice

        Returns:
            True if at least one email was queued

        Raises:
            StaleCandidateError: If the candidate changed since it was read
        """
        actions = rule.actions or {}
        new_status = actions.get("set_status")
        if new_status and new_status != candidate.status:
            self.candidates.compare_and_set_status(
                candidate.id, candidate.version, candidate.status, new_status, now=now, commit=False
            )

        queued = False
        template_id = actions.get("template_id")
        if template_id and (actions.get("send_email") or actions.get("notify_owner")):
            variables = self._email_variables(rule, candidate, now, interview)

            if actions.get("send_email"):
                if candidate.email:
                    self.email_queue.enqueue(
                        candidate.email, template_id, variables,
                        scheduled_for=now, candidate_id=candidate.id, commit=False,
                    )
                    queued = True
                else:
                    logger.warning(f"[{rule.id}] Candidate {candidate.id} has no email address, email skipped")

            if actions.get("notify_owner"):
                employer = self._employer(candidate.employer_id)
                if employer and employer.contact_email:
                    self.email_queue.enqueue(
                        employer.contact_email, template_id, variables,
                        scheduled_for=now, candidate_id=candidate.id, commit=False,
                    )
                    queued = True
                else:
                    logger.warning(f"[{rule.id}] Employer {candidate.employer_id} has no contact email, owner not notified")

        self.logs.record(
            rule.id, candidate.id, "success",
            email_queued=queued,
            interview=interview,
            created_at=now,
            commit=False,
        )
        self.db.commit()
        return queued

    def _run_rule(self, rule: AutomationRule, now: datetime, employer_id: Optional[int] = None) -> RuleOutcome:
        outcome = RuleOutcome(rule_id=rule.id)
        try:
            matches = [CandidateSnapshot.of(c) for c in self.match(rule, now, employer_id)]
        except Exception as e:
            self.db.rollback()
            logger.exception(f"[{rule.id}] Failed to evaluate rule conditions")
            outcome.error = str(e)
            return outcome

        outcome.matched = len(matches)
        if len(matches) >= self.batch_limit:
            logger.info(f"[{rule.id}] Batch limit {self.batch_limit} reached, remaining candidates wait for the next run")

        window = self._interview_window(rule, now)
        for candidate in matches:
            try:
                interview = None
                if window is not None:
                    interview = self.interviews.next_in_window(candidate.id, *window, rule_id=rule.id)
                self._apply(rule, candidate, now, interview=interview)
            except StaleCandidateError as e:
                self.db.rollback()
                outcome.skipped += 1
                logger.info(f"[{rule.id}] Skipped candidate {candidate.id}: {e}")
                self.logs.record(rule.id, candidate.id, "skipped", error=str(e), created_at=now)
            except Exception as e:
                self.db.rollback()
                outcome.failed += 1
                logger.exception(f"[{rule.id}] Failed to process candidate {candidate.id}")
                self.logs.record(rule.id, candidate.id, "failed", error=str(e), created_at=now)
            else:
                outcome.executed += 1
                outcome.candidate_ids.append(candidate.id)

        return outcome

    # -------------------------
    # Entry points
    # -------------------------

    def run_sweep(self, employer_id: Optional[int] = None) -> SweepResult:
        """Evaluate every active time-based rule once, optionally for a single employer."""
        now = self.now()
        result = SweepResult()
        rules = self.rules.list_rules(active_only=True, trigger=RuleTrigger.TIME_BASED.value)

        logger.info(f"Starting automation sweep over {len(rules)} rule(s)")
        for rule in rules:
            outcome = self._run_rule(rule, now, employer_id)
            logger.info(
                f"[{rule.id}] matched={outcome.matched} executed={outcome.executed} "
                f"failed={outcome.failed} skipped={outcome.skipped}"
            )
            result.add(outcome)

        logger.info(f"Automation sweep finished: executed={result.executed} failed={result.failed}")
        return result

    def trigger_rule(self, rule_id: str, employer_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Run one rule immediately, whatever its trigger kind or active flag.

        Raises:
            RuleNotFoundError: If no rule has this id
        """
        rule = self.rules.get(rule_id)
        outcome = self._run_rule(rule, self.now(), employer_id)
        return {
            "success": outcome.error is None,
            "count": outcome.executed,
            "candidate_ids": list(outcome.candidate_ids),
            "failed": outcome.failed,
            "skipped": outcome.skipped,
        }

    def handle_status_change(self, candidate: Candidate, old_status: str, new_status: str) -> List[str]:
        """
        Fire active status-change rules for a transition that already happened.

        Errors are logged and never propagate to the caller's user action.

        Returns:
            Ids of the rules that fired
        """
        if old_status == new_status:
            return []

        now = self.now()
        snapshot = CandidateSnapshot.of(candidate)
        fired = []
        for rule in self.rules.list_rules(active_only=True, trigger=RuleTrigger.STATUS_CHANGE.value):
            conditions = normalize_conditions(rule.conditions)
            if conditions.get("status") != new_status:
                continue
            from_status = conditions.get("from_status")
            if from_status and from_status != old_status:
                continue

            try:
                self._apply(rule, snapshot, now)
            except Exception:
                self.db.rollback()
                logger.exception(f"[{rule.id}] Status-change rule failed for candidate {candidate.id}")
                continue
            fired.append(rule.id)

        return fired
