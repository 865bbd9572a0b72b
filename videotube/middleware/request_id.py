# videotube/middleware/request_id.py
from __future__ import annotations

"""
# VideoTube · Request ID Middleware (pure ASGI)

- Reuses a client-supplied `X-Request-ID` when it is short and log-safe.
- Generates a UUIDv4 otherwise.
- Stores the id on `request.state.request_id` and echoes it in the response.
- Binds `request_id` into the **loguru** context for the whole request, so
  every record emitted while handling it carries the id.

## Usage
    from videotube.middleware.request_id import RequestIDMiddleware
    app.add_middleware(RequestIDMiddleware)
"""

import re
import uuid

from loguru import logger
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

HEADER_NAME = "X-Request-ID"
MAX_ID_LENGTH = 128

# Letters, digits, dash, underscore, dot; rejects anything that could forge log lines
_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9._-]+$")


class RequestIDMiddleware:
    def __init__(self, app: ASGIApp, header_name: str = HEADER_NAME) -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        req_id = self._choose_request_id(Headers(scope=scope))
        scope.setdefault("state", {})["request_id"] = req_id
        name_bytes = self.header_name.lower().encode("latin-1")

        async def _send_wrapper(message: Message) -> None:
            if message.get("type") == "http.response.start":
                raw = message.setdefault("headers", [])
                message["headers"] = [(k, v) for (k, v) in raw if k.lower() != name_bytes]
                message["headers"].append((self.header_name.encode("latin-1"), req_id.encode("latin-1")))
            await send(message)

        with logger.contextualize(request_id=req_id):
            await self.app(scope, receive, _send_wrapper)

    def _choose_request_id(self, headers: Headers) -> str:
        incoming = (headers.get(self.header_name) or "").strip()
        if 0 < len(incoming) <= MAX_ID_LENGTH and _SAFE_ID_RE.fullmatch(incoming):
            return incoming
        return str(uuid.uuid4())


__all__ = ["RequestIDMiddleware"]
