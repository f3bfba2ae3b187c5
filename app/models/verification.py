"""
app/models/verification.py

Purpose: Verification document model

- One record per (phone, version)
- Version doubles as the HOTP counter
- Lifecycle state derived from timestamps, never stored
"""

from enum import Enum
from datetime import datetime
from typing import Optional, Dict, Any
import uuid

from pydantic import BaseModel, Field

from utils.time_utils import is_expired


class VerificationState(str, Enum):
    """
    Lifecycle states of a phone's current verification.
    """
    NO_HISTORY = "NO_HISTORY"
    PENDING = "PENDING"
    EXPIRED = "EXPIRED"
    COMPLETED = "COMPLETED"


class Verification(BaseModel):
    """
    A single verification attempt for a phone number.

    `verified` and `attempts` belong to the confirmation flow; issuance only
    initialises them.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    phone: str
    version: int = Field(..., ge=1)
    secret_key: bytes = Field(..., repr=False)
    created: datetime
    verified: Optional[datetime] = None
    attempts: int = 0

    def is_expired(self, validity_minutes: int, now: Optional[datetime] = None) -> bool:
        """Unverified and older than the validity window."""
        return self.verified is None and is_expired(self.created, validity_minutes, now)

    def state(self, validity_minutes: int, now: Optional[datetime] = None) -> VerificationState:
        if self.verified is not None:
            return VerificationState.COMPLETED
        if self.is_expired(validity_minutes, now):
            return VerificationState.EXPIRED
        return VerificationState.PENDING

    def to_document(self) -> Dict[str, Any]:
        """MongoDB document, `id` stored as `_id`."""
        return {
            "_id": self.id,
            "phone": self.phone,
            "version": self.version,
            "secret_key": self.secret_key,
            "created": self.created,
            "verified": self.verified,
            "attempts": self.attempts,
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Verification":
        return cls(
            id=str(document["_id"]),
            phone=document["phone"],
            version=document["version"],
            secret_key=bytes(document["secret_key"]),
            created=document["created"],
            verified=document.get("verified"),
            attempts=document.get("attempts", 0),
        )
