from classroll.core.core import Service
from classroll.core.modules.session.models import SessionClaims, SessionToken
from classroll.errors import AccessDeniedError


class AccessService(Service):
    async def ensure_authenticated(self, token: SessionToken) -> SessionClaims:
        """Ensure the token is a valid, unexpired session."""
        return self.core.services.session.decode(token)

    async def ensure_admin(self, token: SessionToken) -> SessionClaims:
        """Ensure the session belongs to an administrator, raise AccessDeniedError if not."""
        claims = await self.ensure_authenticated(token)
        if not claims.is_admin:
            raise AccessDeniedError("Admin access required")
        return claims
