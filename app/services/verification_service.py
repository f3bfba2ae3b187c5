"""
app/services/verification_service.py

Purpose: Verification lifecycle

- Resolves the current verification for a phone number
- Reuses a pending version, rolls an expired/completed one forward,
  or creates version 1
- Resolves concurrent-insert races with a single re-read

Every decision is made from a fresh store read; nothing is cached.
"""

from datetime import datetime
from typing import Optional

from app.core.exceptions import PersistenceError, VersionConflictError
from app.core.logging import get_logger
from app.db.verification_repository import VerificationRepository
from app.models.verification import Verification, VerificationState
from utils.time_utils import utcnow

logger = get_logger(__name__)


async def obtain_current(
    repository: VerificationRepository,
    phone: str,
    validity_minutes: int,
    now: Optional[datetime] = None
) -> Verification:
    """
    Returns the verification a code should be sent for.

    - No history: inserts version 1
    - Pending: returns the current version unchanged (no write)
    - Expired or completed: inserts version N+1

    A lost insert race is resolved by re-reading the winner's record once.

    Args:
        repository: Verification store
        phone: E.164 phone number
        validity_minutes: Validity window for unverified versions
        now: Decision time (defaults to current UTC)

    Returns:
        The current Verification

    Raises:
        PersistenceError: Store failure, or the re-read found nothing
    """
    now = now or utcnow()

    latest_version = await repository.get_latest_version(phone)

    current = None
    if latest_version is not None:
        current = await repository.get_verification(phone, latest_version)
        if current is None:
            logger.error(f"Latest version {latest_version} could not be read")
            raise PersistenceError()

    state = current.state(validity_minutes, now) if current else VerificationState.NO_HISTORY
    logger.debug(f"Current verification state: {state.value}")

    if state == VerificationState.NO_HISTORY:
        try:
            current = await repository.insert_initial_version(phone)
            logger.info(f"Verification state {state.value}, inserted initial version")
            return current
        except VersionConflictError:
            logger.info("Initial verification created concurrently, re-reading")
            return await _reread_current(repository, phone)

    if state == VerificationState.PENDING:
        logger.info(f"Reusing pending verification v{current.version}")
        return current

    logger.info(f"Verification v{current.version} is {state.value}, inserting next version")
    try:
        return await repository.insert_next_version(phone, current.version)
    except VersionConflictError:
        logger.info(f"Version {current.version + 1} created concurrently, re-reading")
        return await _reread_current(repository, phone)


async def _reread_current(repository: VerificationRepository, phone: str) -> Verification:
    """
    Single re-read after a conflicting insert. Not retried.
    """
    latest_version = await repository.get_latest_version(phone)
    if latest_version is None:
        logger.error("Re-read after insert conflict found no verification")
        raise PersistenceError()

    current = await repository.get_verification(phone, latest_version)
    if current is None:
        logger.error(f"Re-read after insert conflict could not load v{latest_version}")
        raise PersistenceError()

    return current
