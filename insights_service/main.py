from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from insights_service.api.v1.routes_analyze import router as analyze_router
from insights_service.api.v1.routes_health import router as health_router
from insights_service.application.services.factories import build_extractor, build_insight_repository
from insights_service.core.config import get_settings
from insights_service.core.logging import RequestIdMiddleware, configure_logging, get_logger
from insights_service.infrastructure.persistence.database import create_database_manager_from_settings
from insights_service.observability.errors import register_error_handlers
from insights_service.observability.metrics import MetricsMiddleware
from insights_service.observability.metrics import router as metrics_router

# Initialize settings and logging
settings = get_settings()
configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = get_logger(__name__)
    app.state.db_manager = None
    app.state.extractor = None
    try:
        db_manager = create_database_manager_from_settings(settings)
        await db_manager.connect()
        app.state.db_manager = db_manager
        await build_insight_repository(db_manager, settings).ensure_schema()
        app.state.extractor = build_extractor(db_manager, settings)
        logger.info("extractor_ready", extra={"bucket": settings.S3_BUCKET, "model": settings.LLM_MODEL})
    except Exception as e:
        logger.error(f"Extractor initialization failed: {e}", exc_info=True)
        logger.warning("Service will answer 503 on /v1/analyze-document until configured")
    logger.info("service_startup", extra={"env": settings.ENV, "log_level": settings.LOG_LEVEL})
    try:
        yield
    finally:
        if app.state.db_manager is not None:
            await app.state.db_manager.disconnect()
        logger.info("service_shutdown")


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Middlewares
app.add_middleware(RequestIdMiddleware)
app.add_middleware(MetricsMiddleware)

register_error_handlers(app)

# Routers
app.include_router(health_router)
app.include_router(analyze_router)
app.include_router(metrics_router)
