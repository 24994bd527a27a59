"""
Default automation rule catalog and condition normalization.

These rules are written to the rule store on first start-up; after that the
stored copies are authoritative and can be (de)activated per deployment.
"""

from typing import Any, Dict, List

from models.automation_rule import AutomationRule, RuleTrigger
from models.candidate import CandidateStatus


def normalize_conditions(conditions: Dict[str, Any]) -> Dict[str, Any]:
    """
    Translate legacy `days_inactive` conditions into explicit kinds.

    A positive `days_inactive` meant "untouched for N days"; a negative one
    meant "an event happens within |N| days". They become
    `inactive_for_days` and `occurs_within_days` respectively.
    """
    normalized = dict(conditions or {})
    legacy = normalized.pop("days_inactive", None)
    if legacy is None:
        return normalized

    legacy = int(legacy)
    if legacy < 0:
        normalized.setdefault("occurs_within_days", abs(legacy))
    else:
        normalized.setdefault("inactive_for_days", legacy)
    return normalized


def default_rules() -> List[AutomationRule]:
    """Fresh rule instances for seeding the store."""
    return [
        AutomationRule(
            id="screening_follow_up",
            priority=20,
            name="Screening follow-up",
            description="Nudge candidates whose screening has been idle for 3 days.",
            trigger=RuleTrigger.TIME_BASED.value,
            conditions={"status": CandidateStatus.SCREENING.value, "inactive_for_days": 3, "no_activity": True},
            actions={"send_email": True, "template_id": "screening_follow_up", "notify_owner": False},
        ),
        AutomationRule(
            id="auto_reject_30_days",
            priority=10,
            name="Auto-reject after 30 days",
            description="Close applications left in screening for 30 days.",
            trigger=RuleTrigger.TIME_BASED.value,
            conditions={"status": CandidateStatus.SCREENING.value, "inactive_for_days": 30, "no_activity": True},
            actions={
                "set_status": CandidateStatus.REJECTED.value,
                "send_email": True,
                "template_id": "auto_rejection",
                "notify_owner": False,
            },
        ),
        AutomationRule(
            id="interview_reminder",
            priority=30,
            name="Interview reminder",
            description="Remind candidates of an interview in the next 24 hours.",
            trigger=RuleTrigger.TIME_BASED.value,
            conditions={"status": CandidateStatus.INTERVIEW_SCHEDULED.value, "occurs_within_days": 1},
            actions={"send_email": True, "template_id": "interview_reminder", "notify_owner": False},
        ),
        AutomationRule(
            id="feedback_reminder",
            priority=40,
            name="Interview feedback reminder",
            description="Ask the hiring team for feedback 2 days after a completed interview.",
            trigger=RuleTrigger.TIME_BASED.value,
            conditions={"status": CandidateStatus.INTERVIEW_COMPLETED.value, "inactive_for_days": 2},
            actions={"send_email": False, "template_id": "feedback_reminder", "notify_owner": True},
        ),
        AutomationRule(
            id="offer_congratulations",
            priority=50,
            name="Offer email",
            description="Send the offer template when a candidate moves to offered.",
            trigger=RuleTrigger.STATUS_CHANGE.value,
            conditions={"status": CandidateStatus.OFFERED.value},
            actions={"send_email": True, "template_id": "job_offer", "notify_owner": False},
            is_active=False,
        ),
        AutomationRule(
            id="manual_rejection",
            priority=60,
            name="Reject screened candidates",
            description="Bulk-reject every screened candidate on demand.",
            trigger=RuleTrigger.MANUAL.value,
            conditions={"status": CandidateStatus.SCREENED.value},
            actions={
                "set_status": CandidateStatus.REJECTED.value,
                "send_email": True,
                "template_id": "auto_rejection",
                "notify_owner": False,
            },
        ),
    ]
