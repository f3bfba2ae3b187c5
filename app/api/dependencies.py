"""
app/api/dependencies.py

Purpose: FastAPI dependency providers

- Verification repository bound to the Mongo collection
- SMS sender selected by configuration
- Settings

Providers never raise: store and provider problems surface when the
service uses them, after the request body has been validated.
Tests replace these through app.dependency_overrides.
"""

from fastapi import Depends

from app.core.config import Settings, settings
from app.db.verification_repository import MongoVerificationRepository, VerificationRepository
from app.services.sms_service import SmsSender, create_sms_sender


def get_settings() -> Settings:
    return settings


def get_verification_repository(config: Settings = Depends(get_settings)) -> VerificationRepository:
    return MongoVerificationRepository(secret_key_bytes=config.SECRET_KEY_BYTES)


def get_sender(config: Settings = Depends(get_settings)) -> SmsSender:
    return create_sms_sender(config)
