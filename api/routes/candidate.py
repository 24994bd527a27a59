from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from api.auth import verify_api_key, get_current_employer
from api.models.candidate_schemas import CandidateBase, StatusChangeRequest, StatusChangeResponse
from api.models.common_schemas import ErrorResponse
from repositories.exceptions import RecordNotFoundError, StaleCandidateError
from services import CandidateService
from utils.database import get_db

router = APIRouter(
    prefix="/candidates",
    tags=["Candidates"],
    dependencies=[Depends(verify_api_key)]
)


def get_candidate_service(db: Session = Depends(get_db)) -> CandidateService:
    return CandidateService(db)


@router.patch(
    "/{candidate_id}/status",
    response_model=StatusChangeResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse, "description": "Candidate not found"},
        409: {"model": ErrorResponse, "description": "Candidate changed since expected_version"},
    }
)
def change_candidate_status(
    candidate_id: int,
    request: StatusChangeRequest,
    service: CandidateService = Depends(get_candidate_service),
    employer_id: int = Depends(get_current_employer),
):
    """
    Move a candidate to another pipeline status.

    Active status-change automation rules for the new status fire after the
    update; their ids are returned in `fired_rules`.
    """
    try:
        candidate, fired = service.change_status(
            employer_id, candidate_id, request.status.value, expected_version=request.expected_version
        )
        return StatusChangeResponse(candidate=CandidateBase.model_validate(candidate), fired_rules=fired)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StaleCandidateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
