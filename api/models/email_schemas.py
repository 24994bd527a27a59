from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


class EmailTemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str
    subject: str
    body: str
    variables: List[str]


class EmailTemplateListResponse(BaseModel):
    templates: List[EmailTemplateResponse]


class PreviewRequest(BaseModel):
    variables: Dict[str, Any] = Field(default_factory=dict)


class PreviewResponse(BaseModel):
    template_id: str
    subject: str
    body: str
    missing_variables: List[str] = Field(default_factory=list)


class QueuedEmailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    candidate_id: Optional[int] = None
    recipient: str
    template_id: str
    scheduled_for: datetime
    status: str
    attempts: int
    last_error: Optional[str] = None
    sent_at: Optional[datetime] = None


class QueuedEmailListResponse(BaseModel):
    emails: List[QueuedEmailResponse]


class DrainResponse(BaseModel):
    sent: int
    failed: int
    dead_lettered: int
    skipped: int = 0
