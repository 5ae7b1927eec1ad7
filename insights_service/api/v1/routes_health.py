from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from insights_service.core.config import get_settings
from insights_service.core.logging import get_logger

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    """Liveness check: process is up."""
    settings = get_settings()
    return {"status": "ok", "service": settings.APP_NAME}


@router.get("/ready")
async def ready(request: Request):
    """Readiness check: extractor is built and the database answers."""
    settings = get_settings()
    logger = get_logger(__name__)
    if getattr(request.app.state, "extractor", None) is None:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "service": settings.APP_NAME, "reason": "extractor not initialized"},
        )
    db_manager = getattr(request.app.state, "db_manager", None)
    if db_manager is not None:
        db = await db_manager.health_check()
        if not db.get("healthy"):
            logger.warning("ready_db_unhealthy", extra={"error": db.get("error")})
            return JSONResponse(
                status_code=503,
                content={"status": "unavailable", "service": settings.APP_NAME, "database": db},
            )
        return {"status": "ok", "service": settings.APP_NAME, "database": db}
    return {"status": "ok", "service": settings.APP_NAME}
