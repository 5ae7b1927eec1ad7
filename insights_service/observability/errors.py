from __future__ import annotations

import asyncio

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from insights_service.core.logging import get_logger
from insights_service.domain.pipeline.errors import PipelineError

# Headers the browser client and the database webhook expect on every response
CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

# Timeouts surface as gateway timeouts rather than bad gateway
_TIMEOUT_STATUS = 504


def status_for(exc: PipelineError) -> int:
    if isinstance(exc.cause, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return _TIMEOUT_STATUS
    return exc.http_status


async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    logger = get_logger(__name__)
    status = status_for(exc)
    log = logger.warning if status < 500 else logger.error
    log(
        "pipeline_failed",
        extra={"stage": exc.stage, "error_code": exc.error_code, "error": exc.message},
    )
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=CORS_HEADERS)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger = get_logger(__name__)
    logger.warning("http_error", extra={"status_code": exc.status_code, "detail": exc.detail})
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": str(exc.detail),
            "code": f"HTTP_{exc.status_code}",
            "stage": "request",
            "retryable": exc.status_code == 503,
        },
        headers={**(exc.headers or {}), **CORS_HEADERS},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger = get_logger(__name__)
    logger.exception("unhandled_error", extra={"path": request.url.path, "error_type": type(exc).__name__})
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "code": "INTERNAL_SERVER_ERROR",
            "stage": "request",
            "retryable": False,
        },
        headers=CORS_HEADERS,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
