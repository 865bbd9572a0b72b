# videotube/api/v1/routers/auth/register_routes.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from videotube.security_headers import set_sensitive_cache

from . import login, password, refresh_logout, register


def _no_store_dep(response: Response) -> None:
    set_sensitive_cache(response)


# ──────────────────────────────────────────────────────────────────────────────
# ⚙️  Factory: build the auth router with consistent defaults
#     - add_no_store: apply Cache-Control: no-store on all included routes
#     - common_responses: standardized OpenAPI docs for auth errors
# ──────────────────────────────────────────────────────────────────────────────
def build_auth_router(*, base_prefix: str = "", add_no_store: bool = True) -> APIRouter:
    dependencies = [Depends(_no_store_dep)] if add_no_store else None
    router = APIRouter(prefix=base_prefix, dependencies=dependencies)

    common_responses = {
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        500: {"description": "Internal Server Error"},
    }

    router.include_router(register.router, responses=common_responses)        # /register
    router.include_router(login.router, responses=common_responses)           # /login
    router.include_router(refresh_logout.router, responses=common_responses)  # /refresh-token, /logout
    router.include_router(password.router, responses=common_responses)        # /change-password
    return router


__all__ = ["build_auth_router"]
