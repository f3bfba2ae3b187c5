"""
app/api/verifications.py

Purpose: Verification start endpoint

- Accepts a phone number
- Delegates to the issuance service
- Errors are mapped to responses by the registered exception handlers
"""

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import get_settings, get_verification_repository, get_sender
from app.core.config import Settings
from app.core.logging import get_logger, LogContext
from app.db.verification_repository import VerificationRepository
from app.schemas.response import ErrorResponse
from app.schemas.verification import StartRequest, StartResponse
from app.services.issuance_service import start_verification
from app.services.sms_service import SmsSender

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "/verifications/start",
    response_model=StartResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Phone missing or invalid"},
        429: {"model": ErrorResponse, "description": "Too many verifications for this phone"},
        500: {"model": ErrorResponse, "description": "Verification store failure"},
        502: {"model": ErrorResponse, "description": "SMS delivery failure"},
    }
)
async def start(
    payload: StartRequest,
    request: Request,
    repository: VerificationRepository = Depends(get_verification_repository),
    sender: SmsSender = Depends(get_sender),
    config: Settings = Depends(get_settings)
):
    """
    Sends a verification code to the given phone number.

    A still-valid code is re-sent rather than replaced; the returned id
    identifies the verification the code belongs to.
    """
    request_id = getattr(request.state, "request_id", None)

    with LogContext(request_id=request_id):
        logger.info("Start verification request received")
        return await start_verification(payload.phone, repository, sender, config)
