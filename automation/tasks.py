"""Celery tasks for scheduled automation sweeps and outbox drains."""
import logging
import traceback

from sqlalchemy.exc import OperationalError
from requests.exceptions import Timeout, ConnectionError as RequestsConnectionError
from sqlmodel import Session

from automation.engine import AutomationEngine
from config.celery_config import celery_app
from notifications.email_queue import EmailQueue
from utils.database import get_engine

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def run_sweep_task(self):
    """
    Celery task to evaluate every active time-based automation rule.

    Returns:
        Dictionary with the sweep counters
    """
    try:
        logger.info("Starting run_sweep task")

        with Session(get_engine()) as session:
            result = AutomationEngine(session).run_sweep()

        logger.info(f"Successfully completed run_sweep task: executed={result.executed} failed={result.failed}")

        return {
            "status": "completed",
            "result": result.to_dict(),
        }

    # Retryable (transient) errors
    except (OperationalError, Timeout, RequestsConnectionError) as exc:
        logger.warning(
            f"Retryable error in run_sweep_task (attempt {self.request.retries + 1}): {exc}"
        )
        retry_delay = 60 * (2 ** self.request.retries)
        raise self.retry(exc=exc, countdown=retry_delay)

    # Misconfiguration → fail fast
    except ValueError as exc:
        logger.error(f"Invalid configuration for run_sweep_task: {exc}")
        raise

    except Exception as exc:
        logger.error(f"Unexpected error in run_sweep_task: {exc}")
        logger.error(traceback.format_exc())
        raise


@celery_app.task(bind=True, max_retries=3)
def drain_email_queue_task(self, limit: int = 100):
    """
    Celery task to deliver due emails from the outbox.

    Args:
        limit: Max emails attempted in this run

    Returns:
        Dictionary with sent/failed/dead-lettered counts
    """
    try:
        logger.info("Starting drain_email_queue task")

        with Session(get_engine()) as session:
            result = EmailQueue(session).drain(limit=limit)

        logger.info(f"Successfully completed drain_email_queue task: {result.to_dict()}")

        return {
            "status": "completed",
            "result": result.to_dict(),
        }

    except (OperationalError, Timeout, RequestsConnectionError) as exc:
        logger.warning(
            f"Retryable error in drain_email_queue_task (attempt {self.request.retries + 1}): {exc}"
        )
        retry_delay = 60 * (2 ** self.request.retries)
        raise self.retry(exc=exc, countdown=retry_delay)

    except ValueError as exc:
        logger.error(f"Invalid configuration for drain_email_queue_task: {exc}")
        raise

    except Exception as exc:
        logger.error(f"Unexpected error in drain_email_queue_task: {exc}")
        logger.error(traceback.format_exc())
        raise
