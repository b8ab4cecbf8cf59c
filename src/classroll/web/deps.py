from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from classroll.app import App
from classroll.core.modules.session.models import SessionClaims, SessionToken
from classroll.errors import AuthenticationError

TOKEN_COOKIE = "token"

# Security schemes
bearer_scheme = HTTPBearer(scheme_name="BearerAuth", auto_error=False)
cookie_scheme = APIKeyCookie(name=TOKEN_COOKIE, scheme_name="TokenCookie", auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_session_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> SessionToken:
    """Get session token from Authorization Bearer header or cookie."""

    # Bearer token first (preferred)
    if credentials and credentials.scheme.lower() == "bearer":
        return SessionToken(credentials.credentials)
    if token_cookie:
        return SessionToken(token_cookie)
    raise AuthenticationError("Authentication required")


async def get_session_claims(
    app: Annotated[App, Depends(get_app)],
    token: Annotated[SessionToken, Depends(get_session_token)],
) -> SessionClaims:
    return await app.get_session_claims(token)


async def get_admin_claims(
    app: Annotated[App, Depends(get_app)],
    token: Annotated[SessionToken, Depends(get_session_token)],
) -> SessionClaims:
    return await app.get_admin_claims(token)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
SessionTokenDep = Annotated[SessionToken, Depends(get_session_token)]
SessionClaimsDep = Annotated[SessionClaims, Depends(get_session_claims)]
AdminClaimsDep = Annotated[SessionClaims, Depends(get_admin_claims)]
