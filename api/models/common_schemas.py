from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error body returned by every router."""
    detail: str
