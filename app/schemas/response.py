from pydantic import BaseModel
from typing import Optional, Any

class ErrorResponse(BaseModel):
    """
    Standard error response structure.

    `error` is a human-readable reason, `code` the machine-readable
    failure kind (MISSING_PHONE, INVALID_PHONE, RATE_LIMIT_EXCEEDED,
    PERSISTENCE_FAILURE, DELIVERY_FAILURE, ...).
    """
    error: str
    code: str
    details: Optional[Any] = None

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Rate limit",
                "code": "RATE_LIMIT_EXCEEDED",
                "details": None
            }
        }
