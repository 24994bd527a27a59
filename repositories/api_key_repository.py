import hashlib
import secrets
from datetime import datetime
from typing import Optional, Tuple

from sqlmodel import Session, select

from models.api_key import APIKey


def hash_api_key(raw_key: str) -> str:
    """Derive deterministic hash for API key secrets."""
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()


class APIKeyRepository:
    """Data access helpers for API keys."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_hash(self, key_hash: str) -> Optional[APIKey]:
        """Fetch an API key row by its hash."""
        return self.db.exec(
            select(APIKey).where(APIKey.key_hash == key_hash)
        ).first()

    def issue(
        self,
        name: str,
        employer_id: int,
        raw_key: Optional[str] = None,
        is_admin: bool = False,
    ) -> Tuple[APIKey, str]:
        """
        Create a key for an employer. Admin keys may also toggle automation rules.

        Returns:
            (stored record, raw key) - the raw key is not recoverable later
        """
        raw_key = raw_key or secrets.token_urlsafe(32)
        record = APIKey(key_hash=hash_api_key(raw_key), name=name, employer_id=employer_id, is_admin=is_admin)
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record, raw_key

    def touch_last_used(self, api_key: APIKey) -> APIKey:
        """Update last_used_at timestamp for a key."""
        api_key.last_used_at = datetime.utcnow()
        self.db.add(api_key)
        self.db.commit()
        self.db.refresh(api_key)
        return api_key
