from models.employer import Employer
from models.api_key import APIKey
from models.job import Job
from models.candidate import Candidate, CandidateStatus
from models.interview import Interview, InterviewStatus, InterviewType
from models.interview_conflict import InterviewConflict
from models.automation_rule import AutomationRule, RuleTrigger
from models.automation_log import AutomationLog
from models.queued_email import QueuedEmail, QueuedEmailStatus

__all__ = [
    "Employer",
    "APIKey",
    "Job",
    "Candidate",
    "CandidateStatus",
    "Interview",
    "InterviewStatus",
    "InterviewType",
    "InterviewConflict",
    "AutomationRule",
    "RuleTrigger",
    "AutomationLog",
    "QueuedEmail",
    "QueuedEmailStatus",
]
