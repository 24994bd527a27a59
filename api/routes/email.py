"""
Email API Routes.

Endpoints:
- GET /email/templates - Template catalog
- GET /email/templates/{template_id} - One template
- POST /email/templates/{template_id}/preview - Render with sample variables
- GET /email/queue - Pending outbox rows of the caller's candidates
- POST /email/queue/drain - Deliver the caller's due emails now
- GET /email/queue/dead - Dead-lettered emails of the caller's candidates
- POST /email/queue/{email_id}/requeue - Give a dead email a new attempt budget
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from api.auth import verify_api_key, get_current_employer
from api.models.common_schemas import ErrorResponse
from api.models.email_schemas import (
    DrainResponse,
    EmailTemplateListResponse,
    EmailTemplateResponse,
    PreviewRequest,
    PreviewResponse,
    QueuedEmailListResponse,
    QueuedEmailResponse,
)
from models.candidate import Candidate
from notifications.email_queue import EmailQueue
from notifications.templates import get_email_template, get_email_templates, missing_variables, render_template
from repositories.exceptions import RecordNotFoundError
from utils.database import get_db

router = APIRouter(
    prefix="/email",
    tags=["Email"],
    dependencies=[Depends(verify_api_key)]
)


def get_email_queue(db: Session = Depends(get_db)) -> EmailQueue:
    return EmailQueue(db)


# ============ TEMPLATES ============

@router.get("/templates", response_model=EmailTemplateListResponse)
def list_templates(category: Optional[str] = Query(None)):
    return EmailTemplateListResponse(
        templates=[EmailTemplateResponse.model_validate(t) for t in get_email_templates(category)]
    )


@router.get(
    "/templates/{template_id}",
    response_model=EmailTemplateResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_template(template_id: str):
    template = get_email_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail=f"Email template not found: {template_id}")
    return EmailTemplateResponse.model_validate(template)


@router.post(
    "/templates/{template_id}/preview",
    response_model=PreviewResponse,
    responses={404: {"model": ErrorResponse}},
)
def preview_template(template_id: str, request: PreviewRequest):
    """Render a template; unbound placeholders stay in the output and are listed."""
    rendered = render_template(template_id, request.variables)
    if rendered is None:
        raise HTTPException(status_code=404, detail=f"Email template not found: {template_id}")
    return PreviewResponse(
        template_id=rendered.template_id,
        subject=rendered.subject,
        body=rendered.body,
        missing_variables=missing_variables(template_id, request.variables),
    )


# ============ OUTBOX ============

@router.get("/queue", response_model=QueuedEmailListResponse)
def list_pending(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    queue: EmailQueue = Depends(get_email_queue),
    employer_id: int = Depends(get_current_employer),
):
    emails = queue.pending(limit=limit, offset=offset, employer_id=employer_id)
    return QueuedEmailListResponse(emails=[QueuedEmailResponse.model_validate(e) for e in emails])


@router.post("/queue/drain", response_model=DrainResponse)
def drain_queue(
    limit: int = Query(100, ge=1, le=500),
    queue: EmailQueue = Depends(get_email_queue),
    employer_id: int = Depends(get_current_employer),
):
    """Deliver the caller's due emails now instead of waiting for the scheduled drain."""
    try:
        return DrainResponse(**queue.drain(limit=limit, employer_id=employer_id).to_dict())
    except ValueError as e:
        raise HTTPException(status_code=500, detail=f"Email delivery is misconfigured: {str(e)}")


@router.get("/queue/dead", response_model=QueuedEmailListResponse)
def list_dead_letters(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    queue: EmailQueue = Depends(get_email_queue),
    employer_id: int = Depends(get_current_employer),
):
    emails = queue.dead_letters(limit=limit, offset=offset, employer_id=employer_id)
    return QueuedEmailListResponse(emails=[QueuedEmailResponse.model_validate(e) for e in emails])


@router.post(
    "/queue/{email_id}/requeue",
    response_model=QueuedEmailResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def requeue_email(
    email_id: int,
    queue: EmailQueue = Depends(get_email_queue),
    db: Session = Depends(get_db),
    employer_id: int = Depends(get_current_employer),
):
    email = queue.repo.get_by_id(email_id)
    candidate = db.get(Candidate, email.candidate_id) if email and email.candidate_id else None
    if email is None or candidate is None or candidate.employer_id != employer_id:
        raise HTTPException(status_code=404, detail=f"Queued email not found: {email_id}")
    try:
        return QueuedEmailResponse.model_validate(queue.requeue(email_id))
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
