"""
TicketBari API entry point.

A ticket marketplace backend:
- Seat reservations backed by unique seat claims
- Payments applied exactly once with a guarded inventory decrement
- Advertisement cap checked at write time
- Structured, request-correlated logging and Prometheus metrics
"""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ticketbari.api.middleware import RequestLoggingMiddleware
from ticketbari.api.router import api_router
from ticketbari.core.config import get_settings
from ticketbari.core.logging import get_logger, setup_logging
from ticketbari.core.metrics import metrics_endpoint
from ticketbari.db.session import engine, ping_database
from ticketbari.services.cache_service import close_redis, get_cache_stats, get_redis

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging()
    logger.info(
        "startup",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    # No database, no service
    try:
        await ping_database()
    except Exception as e:
        logger.critical("database_unreachable", error=str(e), exc_info=True)
        sys.exit(1)

    cache = await get_redis()
    logger.info("startup_complete", cache="redis" if cache else "off")

    yield

    await close_redis()
    await engine.dispose()
    logger.info("shutdown_complete")


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Ticket marketplace API with race-free seat booking and payment capture",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    application.add_middleware(RequestLoggingMiddleware)
    application.include_router(api_router)

    @application.get("/health", tags=["Health"])
    async def health():
        try:
            await ping_database()
            database = "ok"
        except Exception as e:
            logger.error("health_database_error", error=str(e))
            database = "unreachable"

        return {
            "status": "healthy" if database == "ok" else "degraded",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "database": database,
            "cache": await get_cache_stats(),
        }

    @application.get("/metrics", include_in_schema=False)
    async def metrics():
        return metrics_endpoint()

    @application.get("/", tags=["Root"])
    async def root():
        return {"message": f"{settings.APP_NAME} is running", "docs": "/docs"}

    return application


app = create_app()
