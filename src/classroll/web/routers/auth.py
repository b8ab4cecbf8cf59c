from fastapi import APIRouter, Response
from pydantic import AliasChoices, BaseModel, Field, field_validator

from classroll.app import LoginResult
from classroll.core.modules.principal.models import PrincipalView
from classroll.core.modules.session.models import SessionClaims
from classroll.web.deps import TOKEN_COOKIE, AppDep, SessionClaimsDep
from classroll.web.openapi import ErrorResponse

router = APIRouter(prefix="/auth", tags=["auth"])

# Fields are optional so that missing values surface as our own 422 ValidationError


class LoginRequest(BaseModel):
    """Password authentication request."""

    email: str | None = Field(
        None, validation_alias=AliasChoices("email", "m01_email"), description="Teacher or student email"
    )
    password: str | None = Field(
        None, validation_alias=AliasChoices("password", "m01_password"), description="Account password"
    )


class SendOtpRequest(BaseModel):
    """Request for a one-time passcode."""

    email: str | None = Field(None, description="Teacher or student email to send the passcode to")


class VerifyOtpRequest(BaseModel):
    """One-time passcode authentication request."""

    email: str | None = Field(None, description="Email the passcode was sent to")
    otp: str | None = Field(None, description="6-digit passcode")

    @field_validator("otp", mode="before")
    @classmethod
    def _otp_as_text(cls, value: object) -> object:
        # JSON clients sometimes send the code as a number
        if isinstance(value, int) and not isinstance(value, bool):
            return f"{value:06d}"
        return value


class LoginResponse(BaseModel):
    """Successful authentication."""

    status: str = Field("Success", description="Always 'Success'")
    message: str = Field(..., description="Human-readable outcome")
    data: PrincipalView = Field(..., description="Signed-in principal")
    token: str = Field(..., description="Session token for the Authorization Bearer header")


class AckResponse(BaseModel):
    """Acknowledgement without payload."""

    status: str = Field("Success", description="Always 'Success'")
    message: str = Field(..., description="Human-readable outcome")


def _session_response(result: LoginResult, message: str, response: Response, max_age: int) -> LoginResponse:
    # Cookie for browser-based clients
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=result.token,
        httponly=True,
        samesite="lax",
        secure=False,  # Set to True in production with HTTPS
        max_age=max_age,
    )
    return LoginResponse(message=message, data=result.principal, token=result.token)


@router.post(
    "/login",
    summary="Authenticate with password",
    description="Authenticate a teacher or student with email and password to receive a session token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        422: {"model": ErrorResponse, "description": "Email or password missing"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> LoginResponse:
    result = await app.login(login_data.email, login_data.password)
    return _session_response(result, "Login successful", response, app.token_ttl_seconds)


@router.post(
    "/send-otp",
    summary="Send one-time passcode",
    description="Email a 6-digit passcode, valid for a few minutes, to a registered teacher or student.",
    operation_id="sendOtp",
    responses={
        200: {"description": "Passcode sent"},
        404: {"model": ErrorResponse, "description": "No account with this email"},
        422: {"model": ErrorResponse, "description": "Email missing"},
    },
)
async def send_otp(request: SendOtpRequest, app: AppDep) -> AckResponse:
    await app.send_otp(request.email)
    return AckResponse(message="OTP sent to your email")


@router.post(
    "/verify-otp",
    summary="Authenticate with one-time passcode",
    description="Exchange a passcode sent by send-otp for a session token. Each passcode works once.",
    operation_id="verifyOtp",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Passcode unknown, expired or wrong"},
        404: {"model": ErrorResponse, "description": "Account no longer exists"},
        422: {"model": ErrorResponse, "description": "Email or passcode missing"},
    },
)
async def verify_otp(request: VerifyOtpRequest, app: AppDep, response: Response) -> LoginResponse:
    result = await app.verify_otp(request.email, request.otp)
    return _session_response(result, "OTP verified, login successful", response, app.token_ttl_seconds)


@router.get(
    "/session",
    summary="Inspect session",
    description="Return the claims of the current session token.",
    operation_id="getSession",
    responses={
        200: {"description": "Session is valid"},
        401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
    },
)
async def get_session(claims: SessionClaimsDep) -> SessionClaims:
    return claims


@router.post(
    "/logout",
    summary="End session",
    description="Clear the session cookie. Tokens are stateless and stay valid until they expire.",
    operation_id="logout",
    status_code=204,
    responses={204: {"description": "Cookie cleared"}},
)
async def logout(response: Response) -> None:
    response.delete_cookie(TOKEN_COOKIE)
