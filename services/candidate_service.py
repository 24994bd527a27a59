"""Candidate pipeline transitions made by users."""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlmodel import Session

from automation.engine import AutomationEngine
from models.candidate import Candidate, CandidateStatus
from repositories.candidate_repository import CandidateRepository
from repositories.exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)

VALID_STATUSES = {s.value for s in CandidateStatus}


class CandidateService:

    def __init__(self, db_session: Session, engine: Optional[AutomationEngine] = None, clock=None):
        self.db = db_session
        self.candidate_repo = CandidateRepository(db_session)
        self._clock = clock or datetime.utcnow
        self.engine = engine or AutomationEngine(db_session, clock=self._clock)

    def change_status(
        self,
        employer_id: int,
        candidate_id: int,
        new_status: str,
        expected_version: Optional[int] = None,
    ) -> Tuple[Candidate, List[str]]:
        """
        Move a candidate to a new pipeline status and fire status-change rules.

        Args:
            employer_id: Owning employer
            candidate_id: Candidate to update
            new_status: Target status
            expected_version: If given, the write only succeeds against this version

        Returns:
            Tuple of (candidate, ids of automation rules that fired)

        Raises:
            ValueError: Unknown status
            RecordNotFoundError: Candidate does not exist for the employer
            StaleCandidateError: expected_version no longer matches
        """
        if new_status not in VALID_STATUSES:
            raise ValueError(f"Unknown candidate status '{new_status}'")

        candidate = self.candidate_repo.get_for_employer(candidate_id, employer_id)
        if candidate is None:
            raise RecordNotFoundError(f"Candidate {candidate_id} not found")

        old_status = candidate.status
        if old_status == new_status:
            return candidate, []

        if expected_version is not None:
            self.candidate_repo.compare_and_set_status(
                candidate.id, expected_version, old_status, new_status, now=self._clock()
            )
            self.db.refresh(candidate)
        else:
            candidate = self.candidate_repo.set_status(candidate, new_status, now=self._clock())

        logger.info(f"Candidate {candidate_id} moved {old_status} -> {new_status}")
        fired = self.engine.handle_status_change(candidate, old_status, new_status)
        return candidate, fired
