"""Pipeline automation: rule catalog, engine and scheduled tasks."""

from automation.default_rules import default_rules, normalize_conditions
from automation.engine import AutomationEngine, CandidateSnapshot, RuleOutcome, SweepResult

__all__ = [
    "AutomationEngine",
    "CandidateSnapshot",
    "RuleOutcome",
    "SweepResult",
    "default_rules",
    "normalize_conditions",
]
