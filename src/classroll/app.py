from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from pydantic import BaseModel
from pymongo.asynchronous.database import AsyncDatabase

from classroll.config import Config
from classroll.core.core import Core
from classroll.core.modules.otp.models import OtpVerdict
from classroll.core.modules.principal.models import Principal, PrincipalView
from classroll.core.modules.principal.passwords import burn_password_check, verify_password
from classroll.core.modules.session.models import SessionClaims, SessionToken
from classroll.errors import AuthenticationError, InvalidOtpError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

OTP_ERROR_MESSAGES = {
    OtpVerdict.NOT_FOUND: "OTP not found or expired",
    OtpVerdict.EXPIRED: "OTP has expired",
    OtpVerdict.MISMATCH: "Invalid OTP",
}


class LoginResult(BaseModel):
    """Signed-in principal together with its session token."""

    principal: PrincipalView
    token: SessionToken


class App:
    """Facade for all authentication operations, validates input before delegating to Core."""

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def login(self, email: str | None, password: str | None) -> LoginResult:
        """Authenticate with email and password, teachers before students."""
        if not email or not password:
            raise ValidationError("Email and password are required")

        principal = await self._core.services.principal.find_by_email(email)
        if principal is None:
            burn_password_check(password, self._core.config.password_hash_rounds)
            logger.info("login_failed", email=email)
            raise AuthenticationError("Invalid credentials")
        if not verify_password(password, principal.password_hash):
            logger.info("login_failed", email=email)
            raise AuthenticationError("Invalid credentials")

        return self._start_session(principal)

    async def send_otp(self, email: str | None) -> None:
        """Issue a login passcode and deliver it to the principal's email."""
        if not email:
            raise ValidationError("Email is required")
        await self._resolve_principal(email)
        await self._core.services.otp.issue(email)

    async def verify_otp(self, email: str | None, code: str | None) -> LoginResult:
        """Exchange a valid passcode for a session."""
        if not email or not code:
            raise ValidationError("Email and OTP are required")

        verdict = await self._core.services.otp.verify(email, code)
        if verdict != OtpVerdict.OK:
            raise InvalidOtpError(OTP_ERROR_MESSAGES[verdict])

        # The account may have been removed while the passcode was pending
        principal = await self._resolve_principal(email)
        return self._start_session(principal)

    async def get_session_claims(self, token: SessionToken) -> SessionClaims:
        """Check that token is a valid session and return its claims."""
        return await self._core.services.access.ensure_authenticated(token)

    async def get_admin_claims(self, token: SessionToken) -> SessionClaims:
        """Check that token is a valid administrator session."""
        return await self._core.services.access.ensure_admin(token)

    async def get_current_principal(self, token: SessionToken) -> PrincipalView:
        """Get profile of the principal the session was issued to."""
        claims = await self._core.services.access.ensure_authenticated(token)
        principal = await self._core.services.principal.get_principal(claims.role, claims.user_id)
        return PrincipalView.from_domain(principal)

    @property
    def token_ttl_seconds(self) -> int:
        """Lifetime of issued session tokens."""
        return self._core.config.token_ttl_seconds

    # === Private helpers ===
    async def _resolve_principal(self, email: str) -> Principal:
        """Resolve email to a principal. Raises NotFoundError if not found."""
        principal = await self._core.services.principal.find_by_email(email)
        if principal is None:
            raise NotFoundError("User not found")
        return principal

    def _start_session(self, principal: Principal) -> LoginResult:
        token = self._core.services.session.issue(principal)
        logger.info("login_succeeded", principal_id=principal.id, role=principal.role)
        return LoginResult(principal=PrincipalView.from_domain(principal), token=token)
