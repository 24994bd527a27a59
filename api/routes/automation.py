"""
Automation API Routes.

Endpoints:
- GET /automation/rules - List stored rules
- POST /automation/rules/{rule_id}/activate - Enable a rule (admin key)
- POST /automation/rules/{rule_id}/deactivate - Disable a rule (admin key)
- POST /automation/rules/{rule_id}/trigger - Run one rule now for the caller's candidates
- POST /automation/sweep - Run every active time-based rule for the caller's candidates

Rules are shared by every employer, so toggling one changes automation for
all tenants. Only admin keys may do it.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlmodel import Session

from api.auth import APIKeyContext, get_current_employer, require_admin, verify_api_key
from api.models.automation_schemas import (
    AutomationRuleListResponse,
    AutomationRuleResponse,
    SweepResponse,
    TriggerRuleResponse,
)
from api.models.common_schemas import ErrorResponse
from automation.engine import AutomationEngine
from models.automation_rule import RuleTrigger
from repositories.automation_rule_repository import RuleStore
from repositories.exceptions import ConcurrentUpdateError, RuleNotFoundError
from utils.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/automation",
    tags=["Automation"],
    dependencies=[Depends(verify_api_key)]
)


def get_automation_engine(db: Session = Depends(get_db)) -> AutomationEngine:
    return AutomationEngine(db)


@router.get("/rules", response_model=AutomationRuleListResponse)
def list_rules(
    active_only: bool = Query(False),
    trigger: Optional[RuleTrigger] = Query(None),
    db: Session = Depends(get_db),
):
    rules = RuleStore(db).list_rules(active_only=active_only, trigger=trigger.value if trigger else None)
    return AutomationRuleListResponse(rules=[AutomationRuleResponse.model_validate(r) for r in rules])


def _set_active(db: Session, rule_id: str, active: bool) -> AutomationRuleResponse:
    try:
        rule = RuleStore(db).set_active(rule_id, active)
        return AutomationRuleResponse.model_validate(rule)
    except RuleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrentUpdateError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post(
    "/rules/{rule_id}/activate",
    response_model=AutomationRuleResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def activate_rule(
    rule_id: str,
    db: Session = Depends(get_db),
    admin: APIKeyContext = Depends(require_admin),
):
    """Enable a rule for every employer."""
    logger.info(f"Rule {rule_id} activation requested by API key {admin.api_key_name}")
    return _set_active(db, rule_id, True)


@router.post(
    "/rules/{rule_id}/deactivate",
    response_model=AutomationRuleResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def deactivate_rule(
    rule_id: str,
    db: Session = Depends(get_db),
    admin: APIKeyContext = Depends(require_admin),
):
    """Disable a rule for every employer."""
    logger.info(f"Rule {rule_id} deactivation requested by API key {admin.api_key_name}")
    return _set_active(db, rule_id, False)


@router.post(
    "/rules/{rule_id}/trigger",
    response_model=TriggerRuleResponse,
    responses={404: {"model": ErrorResponse, "description": "Rule not found"}},
)
def trigger_rule(
    rule_id: str,
    engine: AutomationEngine = Depends(get_automation_engine),
    employer_id: int = Depends(get_current_employer),
):
    """
    Run a rule immediately against the caller's candidates.

    Works for any trigger kind and regardless of the rule's active flag.
    """
    try:
        return TriggerRuleResponse(**engine.trigger_rule(rule_id, employer_id=employer_id))
    except RuleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/sweep", response_model=SweepResponse)
def run_sweep(
    engine: AutomationEngine = Depends(get_automation_engine),
    employer_id: int = Depends(get_current_employer),
):
    """Evaluate all active time-based rules for the caller's candidates."""
    try:
        return SweepResponse(**engine.run_sweep(employer_id=employer_id).to_dict())
    except Exception as e:
        logger.exception("Automation sweep failed")
        raise HTTPException(status_code=500, detail=f"Failed to run automation sweep: {str(e)}")
