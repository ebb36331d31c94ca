from typing import Annotated
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response
import logging

from app.dependencies import get_epg_service
from app.schemas import HealthResponse
from app.services import EPGService, epg_scheduler


logger = logging.getLogger(__name__)

main_router = APIRouter()

SERVICE_NAME = "Ayna EPG Aggregator"
SERVICE_VERSION = "0.1.0"
EPG_ERROR_MESSAGE = "Error generating EPG"


@main_router.get("/")
async def root() -> dict:
    """Root endpoint with service information"""
    next_run = epg_scheduler.get_next_run_time()

    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "next_scheduled_refresh": next_run.isoformat() if next_run else None,
        "endpoints": {
            "epg": "/api/aynaepg.xml - XMLTV guide (cached for one hour)",
            "health": "/health - Health check"
        }
    }


@main_router.get("/health", response_model=HealthResponse)
async def health_check(
    service: Annotated[EPGService, Depends(get_epg_service)]
) -> HealthResponse:
    """Health check endpoint"""
    next_run = epg_scheduler.get_next_run_time()
    expires_in = service.cache.expires_in()
    return HealthResponse(
        cache_populated=expires_in is not None,
        cache_expires_in=expires_in,
        scheduler_running=epg_scheduler.running,
        next_refresh=next_run.isoformat() if next_run else None,
        last_build=service.last_build,
    )


@main_router.get("/api/aynaepg.xml")
async def get_epg_xml(
    service: Annotated[EPGService, Depends(get_epg_service)]
) -> Response:
    """
    Serve the aggregated XMLTV guide

    Served from cache when fresh; otherwise rebuilt from the upstream APIs.
    Upstream errors are logged and reported to clients as a generic 500.
    """
    try:
        xml = await service.get_epg_xml()
    except Exception as e:  # Catch-all so clients never see internals
        logger.error(f"Error generating EPG: {e}", exc_info=True)
        return PlainTextResponse(EPG_ERROR_MESSAGE, status_code=500)

    return Response(content=xml, media_type="application/xml")
