from datetime import timedelta
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from classroll.config import Config
from classroll.core.core import Service
from classroll.core.modules.otp.models import OtpChallenge, OtpVerdict, generate_otp_code
from classroll.core.modules.otp.store import MemoryOtpStore, MongoOtpStore, OtpStore
from classroll.utils import now

logger = structlog.get_logger(__name__)


class OtpService(Service):
    """Issues and checks time-boxed, single-use login passcodes."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]], config: Config) -> None:
        super().__init__(database, config)
        self.store: OtpStore
        if config.otp_backend == "memory":
            self.store = MemoryOtpStore()
        else:
            self.store = MongoOtpStore(database.get_collection("otp_challenges"))
        self._ttl = timedelta(seconds=config.otp_ttl_seconds)

    async def on_start(self) -> None:
        await self.store.on_start()
        logger.debug("otp_service_started", backend=self.config.otp_backend)

    async def issue(self, email: str) -> str:
        """Create a fresh challenge for email and deliver its code.

        Any pending challenge for the same email is replaced. If delivery
        fails the new challenge is withdrawn and the replaced one restored
        before the error propagates.
        """
        code = generate_otp_code()
        previous = await self.store.save(OtpChallenge(email=email, code=code, expires_at=now() + self._ttl))
        try:
            await self.core.services.mail.send_otp_code(email, code)
        except Exception:
            await self.store.discard(email, code, previous)
            logger.warning("otp_delivery_failed", email=email)
            raise
        logger.info("otp_issued", email=email)
        return code

    async def verify(self, email: str, code: str) -> OtpVerdict:
        """Check a submitted code, consuming the challenge on success."""
        verdict = await self.store.verify(email, code, now())
        if verdict != OtpVerdict.OK:
            logger.info("otp_verification_failed", email=email, verdict=verdict)
        return verdict
