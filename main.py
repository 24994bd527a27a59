"""
Main entry point for running pipeline automation from the command line.

Creates missing tables, seeds the default automation rules, then runs one
automation sweep and one outbox drain. Useful for local development without
a Celery worker.

Usage:
  python main.py            # sweep + drain
  python main.py sweep      # sweep only
  python main.py drain      # drain only
"""

import argparse
import logging

from sqlmodel import Session, SQLModel

import models  # noqa: F401  registers every table on SQLModel.metadata
from automation.default_rules import default_rules
from automation.engine import AutomationEngine
from config.settings import settings
from notifications.email_queue import EmailQueue
from repositories.automation_rule_repository import RuleStore
from utils.database import get_engine


def main():
    parser = argparse.ArgumentParser(description="Run pipeline automation once")
    parser.add_argument("command", nargs="?", choices=["all", "sweep", "drain"], default="all")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL)

    engine = get_engine()
    SQLModel.metadata.create_all(engine)

    with Session(engine) as db_session:
        RuleStore(db_session).ensure_defaults(default_rules())

        if args.command in ("all", "sweep"):
            print("=" * 80)
            print("AUTOMATION SWEEP")
            print("=" * 80)
            result = AutomationEngine(db_session).run_sweep()
            for outcome in result.rules:
                print(
                    f"  {outcome.rule_id:<24} matched={outcome.matched} executed={outcome.executed} "
                    f"failed={outcome.failed} skipped={outcome.skipped}"
                )
            print(f"\nExecuted {result.executed} action(s) for candidates {result.candidates}\n")

        if args.command in ("all", "drain"):
            print("=" * 80)
            print("EMAIL QUEUE DRAIN")
            print("=" * 80)
            drained = EmailQueue(db_session).drain()
            print(f"  sent={drained.sent} failed={drained.failed} dead_lettered={drained.dead_lettered}\n")


if __name__ == "__main__":
    main()
