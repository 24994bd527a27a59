"""
Automation rule model.

A rule pairs a trigger with a condition set and an action set.

Conditions structure (JSON field):
{
    "status": "screening",          # candidate status to match
    "inactive_for_days": 30,        # candidate untouched for at least N days
    "occurs_within_days": 1,        # candidate has an interview within the next N days
    "no_activity": true             # informational, kept for rule authors
}

Actions structure (JSON field):
{
    "set_status": "rejected",       # optional status transition
    "send_email": true,
    "template_id": "auto_rejection",
    "notify_owner": false
}
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON, Text


class RuleTrigger(str, Enum):
    TIME_BASED = "time_based"
    STATUS_CHANGE = "status_change"
    MANUAL = "manual"


class AutomationRule(SQLModel, table=True):
    __tablename__ = "automation_rules"

    id: str = Field(primary_key=True)  # slug, e.g. "auto_reject_30_days"
    name: str = Field()
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    trigger: str = Field(default=RuleTrigger.TIME_BASED.value, index=True)
    conditions: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    actions: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    is_active: bool = Field(default=True, index=True)
    # Sweep order, lowest first. A rule that moves candidates out of a status
    # must run before the rules that match that status.
    priority: int = Field(default=100, index=True)
    # Activation toggles compare-and-set on version
    version: int = Field(default=1, nullable=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
