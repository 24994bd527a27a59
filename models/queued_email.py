"""
Queued email model (outbox).

Rows are rendered and delivered by the queue drain. A failed delivery
bumps `attempts` and pushes `scheduled_for` forward; after the configured
maximum the row moves to the "dead" status and stays there until requeued.

A drain claims a row (pending -> sending) before delivering it. While
sending, `scheduled_for` holds the claim's expiry; a claim left behind by a
crashed drain is picked up again once it expires.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON, Text


class QueuedEmailStatus(str, Enum):
    PENDING = "pending"
    SENDING = "sending"
    SENT = "sent"
    DEAD = "dead"


class QueuedEmail(SQLModel, table=True):
    __tablename__ = "queued_emails"

    id: Optional[int] = Field(default=None, primary_key=True)
    candidate_id: Optional[int] = Field(default=None, foreign_key="candidates.id", index=True)
    recipient: str = Field()
    template_id: str = Field(index=True)
    variables: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    scheduled_for: datetime = Field(default_factory=datetime.utcnow, index=True)

    status: str = Field(default=QueuedEmailStatus.PENDING.value, index=True)
    attempts: int = Field(default=0)
    last_error: Optional[str] = Field(default=None, sa_column=Column(Text))

    created_at: datetime = Field(default_factory=datetime.utcnow)
    sent_at: Optional[datetime] = Field(default=None)
