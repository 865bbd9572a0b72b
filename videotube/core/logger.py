from __future__ import annotations

"""
VideoTube · Logging (Loguru)
----------------------------
Sinks are driven by `settings` (`LOG_LEVEL`, `LOG_JSON`, `LOG_TO_FILE`,
`LOG_DIR`, `LOG_FILE`, `LOG_ROTATION`, `APP_DEBUG`).

Every record carries `request_id` (bound by `RequestIDMiddleware`, "N/A"
outside a request). Extra fields whose names look like credentials are
masked before any sink sees them.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from loguru import logger

from videotube.core.config import settings

INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "fastapi", "starlette", "videotube")
_SECRET_KEYS = ("password", "token", "secret", "authorization", "cookie")


def _redact(record) -> None:
    extra = record["extra"]
    extra.setdefault("request_id", "N/A")
    for key in list(extra):
        if any(marker in key.lower() for marker in _SECRET_KEYS):
            extra[key] = "***"


def _fmt_pretty(record) -> str:
    name = record["name"].replace("<", "[").replace(">", "]")
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level:<8}</level> | "
        f"<cyan>{name}</cyan>:<cyan>{{line}}</cyan> - "
        "<level>{message}</level> | rid={extra[request_id]}\n{exception}"
    )


def _fmt_json(record) -> str:
    body: Dict[str, Any] = {
        "ts": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": record["name"],
        "line": record["line"],
        "message": record["message"],
    }
    body.update({k: v for k, v in record["extra"].items() if not k.startswith("_")})
    if record["exception"] is not None:
        body["exception"] = repr(record["exception"].value)
    record["extra"]["_json"] = json.dumps(body, ensure_ascii=False, default=str)
    return "{extra[_json]}\n"


class InterceptHandler(logging.Handler):
    """Forward stdlib `logging` records to Loguru, keeping the caller frame."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def setup_logging() -> None:
    """(Re)install sinks; safe to call once per app instance."""
    level = settings.LOG_LEVEL.upper()
    fmt = _fmt_json if settings.LOG_JSON else _fmt_pretty

    logger.remove()
    logger.configure(patcher=_redact)
    logger.add(sys.stdout, level=level, format=fmt, backtrace=settings.APP_DEBUG, diagnose=settings.APP_DEBUG)

    if settings.LOG_TO_FILE:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_dir / settings.LOG_FILE),
            level=level,
            format=_fmt_json,
            rotation=settings.LOG_ROTATION,
            enqueue=True,
            diagnose=False,
        )

    for name in INTERCEPTED_LOGGERS:
        std = logging.getLogger(name)
        std.handlers = [InterceptHandler()]
        std.setLevel(level)
        std.propagate = False


__all__ = ["setup_logging", "InterceptHandler", "logger"]
