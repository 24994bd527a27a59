"""
Rule store for automation rules.

Rules live in the automation_rules table instead of a process-wide list;
activation toggles are compare-and-set on the rule's version.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from models.automation_rule import AutomationRule
from repositories.base_repository import BaseRepository
from repositories.exceptions import ConcurrentUpdateError, RuleNotFoundError

logger = logging.getLogger(__name__)


class RuleStore(BaseRepository[AutomationRule]):
    """Repository for automation rules."""

    def __init__(self, db_session: Session):
        super().__init__(db_session, AutomationRule)

    def get(self, rule_id: str) -> AutomationRule:
        """
        Get a rule by id.

        Raises:
            RuleNotFoundError: If no rule has this id
        """
        rule = self.get_by_id(rule_id)
        if rule is None:
            raise RuleNotFoundError(f"Automation rule not found: {rule_id}")
        return rule

    def list_rules(self, active_only: bool = False, trigger: Optional[str] = None) -> List[AutomationRule]:
        """Rules in sweep order: ascending priority, then id."""
        statement = select(AutomationRule)
        if active_only:
            statement = statement.where(AutomationRule.is_active == True)  # noqa: E712
        if trigger:
            statement = statement.where(AutomationRule.trigger == trigger)
        return list(self.db.exec(statement.order_by(AutomationRule.priority, AutomationRule.id)).all())

    def set_active(self, rule_id: str, active: bool) -> AutomationRule:
        """
        Activate or deactivate a rule.

        Raises:
            RuleNotFoundError: If no rule has this id
            ConcurrentUpdateError: If another writer changed the rule meanwhile
        """
        rule = self.get(rule_id)
        if rule.is_active == active:
            return rule

        expected_version = rule.version
        statement = (
            update(AutomationRule)
            .where(AutomationRule.id == rule_id, AutomationRule.version == expected_version)
            .values(is_active=active, version=AutomationRule.version + 1, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        result = self.db.exec(statement)
        if result.rowcount != 1:
            self.db.rollback()
            raise ConcurrentUpdateError(
                f"Automation rule {rule_id} was modified concurrently (expected version {expected_version})"
            )
        self.db.commit()
        self.db.refresh(rule)
        logger.info(f"Automation rule {rule_id} {'activated' if active else 'deactivated'}")
        return rule

    def activate(self, rule_id: str) -> AutomationRule:
        return self.set_active(rule_id, True)

    def deactivate(self, rule_id: str) -> AutomationRule:
        return self.set_active(rule_id, False)

    def ensure_defaults(self, rules: Iterable[AutomationRule]) -> List[AutomationRule]:
        """Insert catalog rules that are not stored yet; stored rules are left untouched."""
        created = []
        for rule in rules:
            if self.get_by_id(rule.id) is None:
                self.db.add(rule)
                created.append(rule)
        if created:
            self.db.commit()
            logger.info(f"Seeded {len(created)} automation rule(s): {[r.id for r in created]}")
        return created
