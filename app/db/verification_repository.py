"""
app/db/verification_repository.py

Purpose: Verification store access

- Latest version lookup and point reads
- Conditional inserts of the initial and next versions
- Recent history for rate limiting

Inserts never overwrite: a duplicate (phone, version) is reported as
VersionConflictError and left for the caller to resolve.
"""

from typing import Protocol, Optional, List

from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.exceptions import PersistenceError, VersionConflictError
from app.core.logging import get_logger, mask_phone
from app.db.mongo import get_verifications_collection
from app.models.verification import Verification
from utils.otp_utils import generate_secret_key
from utils.time_utils import utcnow

logger = get_logger(__name__)


class VerificationRepository(Protocol):
    async def get_latest_version(self, phone: str) -> Optional[int]:
        ...

    async def insert_initial_version(self, phone: str) -> Verification:
        ...

    async def insert_next_version(self, phone: str, expected_current_version: int) -> Verification:
        ...

    async def get_verification(self, phone: str, version: int) -> Optional[Verification]:
        ...

    async def get_recent_verifications(self, phone: str, limit: int) -> List[Verification]:
        ...


class MongoVerificationRepository:
    """
    MongoDB implementation backed by the `phone_version_unique` index.
    """

    def __init__(self, collection=None, secret_key_bytes: int = 20):
        # None resolves the application collection on each call
        self.collection = collection
        self.secret_key_bytes = secret_key_bytes

    def _collection(self):
        if self.collection is not None:
            return self.collection
        try:
            return get_verifications_collection()
        except RuntimeError as e:
            logger.error(f"Verification store unavailable: {e}")
            raise PersistenceError() from e

    async def get_latest_version(self, phone: str) -> Optional[int]:
        try:
            document = await self._collection().find_one(
                {"phone": phone},
                projection={"version": 1},
                sort=[("version", DESCENDING)]
            )
        except PyMongoError as e:
            logger.error(f"Latest version lookup failed for {mask_phone(phone)}: {e}")
            raise PersistenceError() from e

        return document["version"] if document else None

    async def insert_initial_version(self, phone: str) -> Verification:
        return await self._insert_version(phone, 1)

    async def insert_next_version(self, phone: str, expected_current_version: int) -> Verification:
        # version N+1 can only be inserted once, so the insert succeeds only
        # while expected_current_version is still the current one
        return await self._insert_version(phone, expected_current_version + 1)

    async def get_verification(self, phone: str, version: int) -> Optional[Verification]:
        try:
            document = await self._collection().find_one({"phone": phone, "version": version})
        except PyMongoError as e:
            logger.error(f"Verification lookup failed for {mask_phone(phone)} v{version}: {e}")
            raise PersistenceError() from e

        return Verification.from_document(document) if document else None

    async def get_recent_verifications(self, phone: str, limit: int) -> List[Verification]:
        try:
            cursor = self._collection().find({"phone": phone}).sort("version", DESCENDING).limit(limit)
            documents = await cursor.to_list(length=limit)
        except PyMongoError as e:
            logger.error(f"Recent verifications lookup failed for {mask_phone(phone)}: {e}")
            raise PersistenceError() from e

        return [Verification.from_document(document) for document in documents]

    async def _insert_version(self, phone: str, version: int) -> Verification:
        verification = Verification(
            phone=phone,
            version=version,
            secret_key=generate_secret_key(self.secret_key_bytes),
            created=utcnow(),
            verified=None,
            attempts=0,
        )

        try:
            await self._collection().insert_one(verification.to_document())
        except DuplicateKeyError as e:
            logger.info(f"Version {version} already exists for {mask_phone(phone)}")
            raise VersionConflictError(phone, version) from e
        except PyMongoError as e:
            logger.error(f"Insert of version {version} failed for {mask_phone(phone)}: {e}")
            raise PersistenceError() from e

        logger.debug(f"Inserted version {version} for {mask_phone(phone)}")
        return verification
