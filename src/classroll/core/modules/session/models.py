"""Session token models."""

from datetime import datetime
from typing import NewType

from pydantic import BaseModel, Field

from classroll.core.modules.principal.models import PrincipalRole

SessionToken = NewType("SessionToken", str)


class SessionClaims(BaseModel):
    """Claims carried by a signed session token.

    Wire names (userId, isAdmin, iat, exp) are kept stable for clients that
    decode tokens themselves.
    """

    user_id: int = Field(alias="userId")
    role: PrincipalRole
    is_admin: bool = Field(alias="isAdmin")
    issued_at: datetime = Field(alias="iat")
    expires_at: datetime = Field(alias="exp")
