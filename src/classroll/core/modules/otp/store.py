"""Storage backends for OTP challenges.

Every ``verify`` is a single atomic step: two callers racing on the same
valid code can never both get ``OtpVerdict.OK``.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from classroll.core.modules.otp.models import OtpChallenge, OtpVerdict

# Abandoned challenges outlive expires_at by this much so verify() can still report EXPIRED
EXPIRED_RETENTION_SECONDS = 24 * 60 * 60


class OtpStore(ABC):
    """Key-value store of pending challenges, one per email."""

    async def on_start(self) -> None:
        """Prepare the backend on application startup."""

    @abstractmethod
    async def save(self, challenge: OtpChallenge) -> OtpChallenge | None:
        """Store a challenge, replacing any existing one for the same email.

        Returns the replaced challenge, if any.
        """

    @abstractmethod
    async def discard(self, email: str, code: str, previous: OtpChallenge | None = None) -> None:
        """Withdraw the challenge for email only if it still holds this code.

        When previous is given it is put back in place of the withdrawn one.
        """

    @abstractmethod
    async def verify(self, email: str, code: str, at: datetime) -> OtpVerdict:
        """Check a submitted code at the given time, consuming or expiring the challenge."""


class MemoryOtpStore(OtpStore):
    """Process-local store. Correct only when a single process serves requests."""

    def __init__(self) -> None:
        self._challenges: dict[str, OtpChallenge] = {}

    async def save(self, challenge: OtpChallenge) -> OtpChallenge | None:
        previous = self._challenges.get(challenge.email)
        self._challenges[challenge.email] = challenge
        return previous

    async def discard(self, email: str, code: str, previous: OtpChallenge | None = None) -> None:
        challenge = self._challenges.get(email)
        if challenge is None or challenge.code != code:
            return
        if previous is not None:
            self._challenges[email] = previous
        else:
            del self._challenges[email]

    async def verify(self, email: str, code: str, at: datetime) -> OtpVerdict:
        # No await below: the whole check runs without yielding to other tasks
        challenge = self._challenges.get(email)
        if challenge is None:
            return OtpVerdict.NOT_FOUND
        if challenge.is_expired(at):
            del self._challenges[email]
            return OtpVerdict.EXPIRED
        if challenge.code != code:
            return OtpVerdict.MISMATCH
        del self._challenges[email]
        return OtpVerdict.OK


class MongoOtpStore(OtpStore):
    """Store shared by every process through a MongoDB collection."""

    def __init__(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        self._collection = collection

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=EXPIRED_RETENTION_SECONDS)

    async def save(self, challenge: OtpChallenge) -> OtpChallenge | None:
        previous = await self._collection.find_one_and_replace(
            {"email": challenge.email}, challenge.to_mongo(), upsert=True, return_document=ReturnDocument.BEFORE
        )
        return OtpChallenge.model_validate(previous) if previous is not None else None

    async def discard(self, email: str, code: str, previous: OtpChallenge | None = None) -> None:
        if previous is not None:
            await self._collection.replace_one({"email": email, "code": code}, previous.to_mongo())
        else:
            await self._collection.delete_one({"email": email, "code": code})

    async def verify(self, email: str, code: str, at: datetime) -> OtpVerdict:
        consumed = await self._collection.find_one_and_delete(
            {"email": email, "code": code, "expires_at": {"$gte": at}}
        )
        if consumed is not None:
            return OtpVerdict.OK

        expired = await self._collection.delete_one({"email": email, "expires_at": {"$lt": at}})
        if expired.deleted_count:
            return OtpVerdict.EXPIRED

        if await self._collection.find_one({"email": email}, projection={"_id": 1}) is None:
            return OtpVerdict.NOT_FOUND
        return OtpVerdict.MISMATCH
