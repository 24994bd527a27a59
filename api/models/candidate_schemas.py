from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from models.candidate import CandidateStatus


class CandidateBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    email: Optional[str] = None
    status: str
    version: int


class StatusChangeRequest(BaseModel):
    status: CandidateStatus
    expected_version: Optional[int] = Field(
        None, description="Reject the change with 409 if the candidate moved past this version"
    )


class StatusChangeResponse(BaseModel):
    candidate: CandidateBase
    fired_rules: List[str] = Field(default_factory=list)
