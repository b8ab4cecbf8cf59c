from classroll.web.routers.auth import router as auth_router
from classroll.web.routers.profile import router as profile_router

__all__ = [
    "auth_router",
    "profile_router",
]
