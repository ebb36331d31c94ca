"""
Services package for the EPG aggregator

This package contains all business logic and service layer components.
"""
from app.services.cache_service import EPGCache
from app.services.epg_service import EPGService
from app.services.fetch_coordinator import BuildCoordinator
from app.services.metadata_service import MetadataFetchError, fetch_channel_metadata
from app.services.scheduler_service import epg_scheduler
from app.services.xmltv_builder_service import build_xmltv_document

__all__ = [
    'EPGCache',
    'EPGService',
    'BuildCoordinator',
    'MetadataFetchError',
    'fetch_channel_metadata',
    'epg_scheduler',
    'build_xmltv_document',
]
