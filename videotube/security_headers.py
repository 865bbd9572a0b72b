# videotube/security_headers.py
from __future__ import annotations

"""
# VideoTube · Security Headers, Auth Cookies & CORS

## What you get
- **Headers**: X-Content-Type-Options, X-Frame-Options, Referrer-Policy on
  every response (idempotent; routes may override).
- **Cache helpers**: `set_sensitive_cache()` marks token-bearing responses
  `no-store`.
- **Auth cookies**: `set_auth_cookies()` / `clear_auth_cookies()` write the
  `accessToken` / `refreshToken` pair as HTTP-only cookies.
- **CORS installer**: allow-list from `settings.BACKEND_CORS_ORIGINS`.

## Quick start
    from videotube.security_headers import install_security, configure_cors

    app = FastAPI()
    install_security(app)
    configure_cors(app)
"""

from typing import List, Tuple

from fastapi import Response
from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from videotube.core.config import settings
from videotube.core.security import ACCESS_COOKIE, REFRESH_COOKIE

_DEFAULT_HEADERS: Tuple[Tuple[str, str], ...] = (
    ("X-Content-Type-Options", "nosniff"),
    ("X-Frame-Options", "DENY"),
    ("Referrer-Policy", "strict-origin-when-cross-origin"),
)


# ─────────────────────────────────────────────────────────────
# 🧩 Middleware
# ─────────────────────────────────────────────────────────────
class SecurityHeadersMiddleware:
    """Pure-ASGI middleware appending baseline security headers."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        async def send_wrapper(message: Message) -> None:
            if message.get("type") == "http.response.start":
                raw_headers: List[Tuple[bytes, bytes]] = message.setdefault("headers", [])
                for name, value in _DEFAULT_HEADERS:
                    _ensure(raw_headers, name, value)
            await send(message)

        await self.app(scope, receive, send_wrapper)


def _ensure(raw_headers: List[Tuple[bytes, bytes]], name: str, value: str) -> None:
    lname = name.lower().encode("latin-1")
    if not any(h[0].lower() == lname for h in raw_headers):
        raw_headers.append((name.encode("latin-1"), value.encode("latin-1")))


# ─────────────────────────────────────────────────────────────
# 🔓 Public helpers (idempotent; safe to call in routes)
# ─────────────────────────────────────────────────────────────
def set_sensitive_cache(response: Response) -> None:
    """Mark a token-bearing response `no-store`."""
    response.headers["Cache-Control"] = "no-store"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"


def set_auth_cookies(response: Response, *, access_token: str, refresh_token: str) -> None:
    """Attach both tokens as HTTP-only cookies."""
    common = dict(
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
        path="/",
    )
    response.set_cookie(
        ACCESS_COOKIE,
        access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **common,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600,
        **common,
    )


def clear_auth_cookies(response: Response) -> None:
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            name,
            path="/",
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite=settings.COOKIE_SAMESITE,
        )


# ─────────────────────────────────────────────────────────────
# 🌐 CORS installer (allow-list, not '*')
# ─────────────────────────────────────────────────────────────
def configure_cors(app) -> None:
    """Install strict CORS from `settings.BACKEND_CORS_ORIGINS` (credentials allowed)."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PATCH"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=3600,
    )


def install_security(app) -> None:
    app.add_middleware(SecurityHeadersMiddleware)


__all__ = [
    "SecurityHeadersMiddleware",
    "install_security",
    "configure_cors",
    "set_sensitive_cache",
    "set_auth_cookies",
    "clear_auth_cookies",
]
