from pydantic import BaseModel
from fastapi import HTTPException, Security, status, Depends
from fastapi.security import APIKeyHeader
from sqlmodel import Session

from config.settings import settings
from utils.database import get_db
from repositories.api_key_repository import APIKeyRepository, hash_api_key

# Define API Key security scheme for OpenAPI/Swagger
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=True)


class APIKeyContext(BaseModel):
    """Context info extracted from verified API key."""
    employer_id: int
    api_key_id: int
    api_key_name: str
    is_admin: bool = False


def verify_api_key(
    api_key: str = Security(api_key_header),
    db: Session = Depends(get_db),
) -> APIKeyContext:
    """
    Dependency to verify API key from X-API-Key header, backed by api_keys table.

    Returns:
        APIKeyContext: Employer ID and API key metadata for use in routes

    Raises:
        HTTPException: If API key is missing, invalid, inactive, or DB is misconfigured.
    """
    if not settings.DATABASE_URL:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database is not configured for API key validation",
        )

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    try:
        repo = APIKeyRepository(db)
        record = repo.get_by_hash(hash_api_key(api_key))

        if not record:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid API key",
                headers={"WWW-Authenticate": "ApiKey"},
            )

        if not record.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="API key is inactive",
                headers={"WWW-Authenticate": "ApiKey"},
            )

        if record.employer_id is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="API key is not configured with an employer",
            )

        repo.touch_last_used(record)

        return APIKeyContext(
            employer_id=record.employer_id,
            api_key_id=record.id,
            api_key_name=record.name,
            is_admin=record.is_admin,
        )
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to validate API key",
        )


def get_current_employer(
    api_key_context: APIKeyContext = Depends(verify_api_key),
) -> int:
    """
    Extract employer ID from verified API key context.

    Usage:
        @router.get("/interviews")
        def list_interviews(employer_id: int = Depends(get_current_employer)):
            # All queries are scoped to employer_id
            pass
    """
    return api_key_context.employer_id


def require_admin(
    api_key_context: APIKeyContext = Depends(verify_api_key),
) -> APIKeyContext:
    """
    Dependency for deployment-wide operations that no single employer owns.

    Raises:
        HTTPException: 403 if the key is not an admin key
    """
    if not api_key_context.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key is not an admin key",
        )
    return api_key_context
