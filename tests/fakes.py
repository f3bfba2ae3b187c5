import asyncio
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

from app.core.exceptions import DeliveryError, VersionConflictError
from app.models.verification import Verification
from utils.otp_utils import generate_secret_key
from utils.time_utils import utcnow

PHONE = "+16502530000"


class InMemoryVerificationRepository:
    """
    Honors the conditional-insert contract: a (phone, version) pair can be
    inserted once. Every call yields to the event loop first so concurrent
    requests interleave the way they would against a real store.
    """

    def __init__(self):
        self.records: Dict[Tuple[str, int], Verification] = {}
        self.inserts = 0
        self.conflicts = 0

    def seed(self, phone: str, version: int, age_minutes: float = 0, verified: bool = False) -> Verification:
        created = utcnow() - timedelta(minutes=age_minutes)
        verification = Verification(
            phone=phone,
            version=version,
            secret_key=generate_secret_key(),
            created=created,
            verified=created if verified else None,
        )
        self.records[(phone, version)] = verification
        return verification

    def versions(self, phone: str) -> List[Verification]:
        return sorted(
            (v for (p, _), v in self.records.items() if p == phone),
            key=lambda v: v.version
        )

    async def get_latest_version(self, phone: str) -> Optional[int]:
        await asyncio.sleep(0)
        versions = [version for (p, version) in self.records if p == phone]
        return max(versions) if versions else None

    async def insert_initial_version(self, phone: str) -> Verification:
        return await self._insert(phone, 1)

    async def insert_next_version(self, phone: str, expected_current_version: int) -> Verification:
        return await self._insert(phone, expected_current_version + 1)

    async def get_verification(self, phone: str, version: int) -> Optional[Verification]:
        await asyncio.sleep(0)
        return self.records.get((phone, version))

    async def get_recent_verifications(self, phone: str, limit: int) -> List[Verification]:
        await asyncio.sleep(0)
        return list(reversed(self.versions(phone)))[:limit]

    async def _insert(self, phone: str, version: int) -> Verification:
        await asyncio.sleep(0)
        if (phone, version) in self.records:
            self.conflicts += 1
            raise VersionConflictError(phone, version)
        verification = Verification(
            phone=phone,
            version=version,
            secret_key=generate_secret_key(),
            created=utcnow(),
        )
        self.records[(phone, version)] = verification
        self.inserts += 1
        return verification


class RecordingSmsSender:
    def __init__(self, fail: bool = False):
        self.messages: List[Tuple[str, str]] = []
        self.fail = fail

    async def send(self, to_phone: str, body: str) -> str:
        await asyncio.sleep(0)
        if self.fail:
            raise DeliveryError()
        self.messages.append((to_phone, body))
        return f"test{len(self.messages)}"
