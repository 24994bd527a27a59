"""
Automation rule seeding script.
Writes the default rule catalog into the rule store, leaving stored rules untouched.
"""

from sqlmodel import Session

from automation.default_rules import default_rules
from repositories.automation_rule_repository import RuleStore
from utils.database import get_engine


def seed_automation_rules() -> int:
    """Insert missing default rules. Returns the number of rules created."""
    print("Seeding automation rules...")
    with Session(get_engine()) as session:
        created = RuleStore(session).ensure_defaults(default_rules())
    if created:
        for rule in created:
            print(f"  ✅ {rule.id}")
    else:
        print("  All default rules already present")
    return len(created)


if __name__ == "__main__":
    seed_automation_rules()
