from datetime import datetime, timedelta
from typing import Any

import jwt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from classroll.config import Config
from classroll.core.core import Service
from classroll.core.modules.principal.models import Principal
from classroll.core.modules.session.models import SessionClaims, SessionToken
from classroll.errors import AuthenticationError
from classroll.utils import now

logger = structlog.get_logger(__name__)

ALGORITHM = "HS256"
MIN_SECRET_LENGTH = 32


class SessionService(Service):
    """Issues and decodes stateless signed session tokens."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]], config: Config) -> None:
        super().__init__(database, config)
        # Read once at startup; refusing a weak key here keeps the process from serving at all
        if len(config.jwt_secret) < MIN_SECRET_LENGTH:
            raise ValueError(f"jwt_secret must be at least {MIN_SECRET_LENGTH} characters long")
        self._secret = config.jwt_secret
        self._ttl = timedelta(seconds=config.token_ttl_seconds)

    def issue(self, principal: Principal, issued_at: datetime | None = None) -> SessionToken:
        """Sign a token for principal that expires after the configured lifetime."""
        issued_at = issued_at or now()
        payload = {
            "userId": principal.id,
            "role": principal.role.value,
            "isAdmin": principal.has_admin_privileges,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return SessionToken(jwt.encode(payload, self._secret, algorithm=ALGORITHM))

    def decode(self, token: SessionToken) -> SessionClaims:
        """Verify signature and expiry, then return the token's claims."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat", "userId", "role", "isAdmin"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("Session expired") from e
        except jwt.InvalidTokenError as e:
            logger.debug("session_token_rejected", reason=str(e))
            raise AuthenticationError("Invalid token") from e
        return SessionClaims.model_validate(payload)
