from __future__ import annotations

import logging
import sys
import uuid
import contextvars
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

# Context vars carrying the HTTP request id and the pipeline run id across async tasks
_request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")
_run_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("run_id", default="-")


def get_request_id() -> str:
    return _request_id_ctx.get()


def get_run_id() -> str:
    return _run_id_ctx.get()


def bind_run_id(run_id: str) -> contextvars.Token:
    return _run_id_ctx.set(run_id)


def unbind_run_id(token: contextvars.Token) -> None:
    _run_id_ctx.reset(token)


class ContextFilter(logging.Filter):
    """Inject request_id and run_id from contextvars into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (shadow builtins)
        record.request_id = get_request_id()
        record.run_id = get_run_id()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a consistent, structured-ish format.

    Called once on application import/startup. Safe to call repeatedly.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Remove existing handlers to avoid duplicate logs in reload
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level.upper())
    handler.addFilter(ContextFilter())
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | request_id=%(request_id)s run_id=%(run_id)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to each request/response.

    Reuses an incoming X-Request-ID header (database webhooks forward one when
    configured), otherwise generates one, and echoes it back in the response.
    """

    async def dispatch(self, request: Request, call_next):
        incoming: Optional[str] = request.headers.get("X-Request-ID")
        rid = incoming or uuid.uuid4().hex
        request.state.request_id = rid
        token = _request_id_ctx.set(rid)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            _request_id_ctx.reset(token)
