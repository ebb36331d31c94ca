from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
import uvicorn

from app.config import settings, setup_logging
from app.dependencies import get_service_locator
from app.services import EPGService, epg_scheduler
from app.utils.http_client import create_http_client

from app.routers import main_router, SERVICE_NAME, SERVICE_VERSION


setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("="*60)
    logger.info("Starting EPG Service...")
    logger.info("="*60)

    client = create_http_client(timeout=settings.upstream_timeout_sec)
    service = EPGService(settings, client)
    get_service_locator().register_singleton(EPGService, service)

    try:
        if settings.epg_refresh_cron:
            logger.info("Starting scheduler...")
            epg_scheduler.start(settings.epg_refresh_cron, service.refresh)
            logger.info("Scheduler started successfully")
        else:
            logger.info("Scheduled refresh disabled, EPG is built on demand")

        logger.info("="*60)
        logger.info("EPG Service started successfully")
        logger.info("="*60)
    except Exception as e:
        logger.error("="*60)
        logger.error(f"Failed to start EPG Service: {e}", exc_info=True)
        logger.error("="*60)
        await client.aclose()
        raise

    yield

    logger.info("="*60)
    logger.info("Shutting down EPG Service...")
    logger.info("="*60)

    try:
        epg_scheduler.shutdown()
    except Exception as e:
        logger.error(f"Error during scheduler shutdown: {e}", exc_info=True)

    await client.aclose()
    logger.info("HTTP client closed")

    logger.info("="*60)
    logger.info("EPG Service stopped")
    logger.info("="*60)


app = FastAPI(
    title=SERVICE_NAME,
    version=SERVICE_VERSION,
    lifespan=lifespan
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.include_router(main_router)


def run() -> None:
    """Start the HTTP server on the configured host and port"""
    logger.info(f"EPG Server running on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
