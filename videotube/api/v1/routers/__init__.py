"""
🧭 VideoTube • API v1 Router Aggregator
======================================

Composes the auth and user surfaces into a single router mounted under
`/users`.

Quick usage
-----------
    from videotube.api.v1.routers import build_v1_router
    app.include_router(build_v1_router(), prefix="/api/v1")
"""

from fastapi import APIRouter

from .auth import build_auth_router
from .user import channels_router, me_router


def build_v1_router() -> APIRouter:
    """
    Returns
    -------
    fastapi.APIRouter
        `/users/register`, `/users/login`, `/users/refresh-token`,
        `/users/logout`, `/users/change-password`, `/users/current-user`,
        `/users/update-account`, `/users/avatar`, `/users/cover-image`,
        `/users/c/{username}`, `/users/history`.
    """
    router = APIRouter()
    users = APIRouter(prefix="/users")
    users.include_router(build_auth_router())
    users.include_router(me_router)
    users.include_router(channels_router)
    router.include_router(users)
    return router


router = build_v1_router()

__all__ = ["router", "build_v1_router"]
