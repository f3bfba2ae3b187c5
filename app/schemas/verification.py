"""
app/schemas/verification.py

Purpose: Verification request/response schemas

- StartRequest: phone number submitted by the client
- StartResponse: verification id to correlate a later confirmation

The code and secret key never appear in a response.
"""

from pydantic import BaseModel, Field
from typing import Optional


class StartRequest(BaseModel):
    """
    Request to send a verification code.
    Presence and format of `phone` are checked by the service, not here,
    so missing and invalid numbers get their own error codes.
    """
    phone: Optional[str] = Field(None, description="Phone number, ideally in E.164 format")

    class Config:
        json_schema_extra = {
            "example": {
                "phone": "+15555550123"
            }
        }


class StartResponse(BaseModel):
    id: str = Field(..., description="Verification identifier")
