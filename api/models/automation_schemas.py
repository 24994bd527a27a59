from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class AutomationRuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    trigger: str
    conditions: Dict[str, Any]
    actions: Dict[str, Any]
    is_active: bool
    priority: int
    version: int


class AutomationRuleListResponse(BaseModel):
    rules: List[AutomationRuleResponse]


class TriggerRuleResponse(BaseModel):
    """Result of running one rule on demand."""
    success: bool
    count: int
    candidate_ids: List[int]
    failed: int = 0
    skipped: int = 0


class RuleOutcomeResponse(BaseModel):
    rule_id: str
    matched: int
    executed: int
    failed: int
    skipped: int
    candidate_ids: List[int]
    error: Optional[str] = None


class SweepResponse(BaseModel):
    executed: int
    candidates: List[int]
    failed: int
    skipped: int
    rules: List[RuleOutcomeResponse] = Field(default_factory=list)
