from fastapi import APIRouter

from classroll.core.modules.principal.models import PrincipalView
from classroll.web.deps import AppDep, SessionTokenDep
from classroll.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"])


@router.get(
    "/profile",
    summary="Get current principal profile",
    description="Get the teacher or student record behind the current session.",
    operation_id="getCurrentProfile",
    responses={
        200: {"description": "Current principal profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Account no longer exists"},
    },
)
async def get_profile(app: AppDep, token: SessionTokenDep) -> PrincipalView:
    return await app.get_current_principal(token)
