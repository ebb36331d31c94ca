"""
EPG Service

Runs the full aggregation pipeline (metadata, feeds, merge, XMLTV) and
serves its result through the single-slot cache.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, timezone

import httpx

from app.config import CustomSettings
from app.schemas import BuildInfo, SourceStatus
from app.services.cache_service import EPGCache
from app.services.fetch_coordinator import BuildCoordinator
from app.services.epg_merge_service import EPGMergePipeline
from app.models import MergeResult
from app.services.metadata_service import fetch_channel_metadata
from app.services.xmltv_builder_service import build_xmltv_document
from app.utils.feed_urls import build_feed_urls
from app.utils.logging_helpers import log_build_end, log_build_start


logger = logging.getLogger(__name__)


class EPGService:
    """Owns the cache and coordinator used to answer EPG requests."""

    def __init__(
        self,
        config: CustomSettings,
        client: httpx.AsyncClient,
        cache: EPGCache | None = None,
        coordinator: BuildCoordinator | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.config = config
        self.client = client
        self.cache = cache or EPGCache(ttl_seconds=config.cache_ttl_sec)
        self.coordinator = coordinator or BuildCoordinator()
        self._today = today
        self.last_build: BuildInfo | None = None

    async def get_epg_xml(self) -> bytes:
        """Return the cached document, rebuilding it on a miss"""
        return await self.coordinator.get_or_build(self.cache, self.build)

    async def refresh(self) -> bytes:
        """Rebuild and re-cache the document regardless of cache state"""
        return await self.coordinator.rebuild(self.cache, self.build)

    async def build(self) -> bytes:
        """
        Run the aggregation pipeline once

        Returns:
            Serialized XMLTV document

        Raises:
            MetadataFetchError: If the channel directory is unavailable
            ValueError: If the document cannot be serialized
        """
        log_build_start(logger)

        metadata = await fetch_channel_metadata(
            self.client,
            self.config.metadata_url,
            timeout=self.config.upstream_timeout_sec,
        )

        feed_urls = build_feed_urls(
            self.config.epg_feed_url_template,
            days=self.config.epg_days,
            today=self._today(),
        )
        pipeline = EPGMergePipeline(
            feed_urls,
            metadata,
            self.client,
            timeout=self.config.upstream_timeout_sec,
            tz_name=self.config.epg_timezone,
        )
        result = await pipeline.run()

        if result.sources_failed:
            logger.warning(
                "%s of %s feed(s) failed; serving partial EPG",
                result.sources_failed,
                len(result.sources),
            )

        xml = build_xmltv_document(
            result.document,
            generator_name=self.config.generator_info_name,
            generator_url=self.config.generator_info_url,
            language=self.config.programme_language,
        )

        self.last_build = _build_info(result)
        log_build_end(logger)
        return xml


def _build_info(result: MergeResult) -> BuildInfo:
    return BuildInfo(
        built_at=datetime.now(timezone.utc).isoformat(),
        channels=len(result.document.channels),
        programmes=len(result.document.programmes),
        sources=[SourceStatus(**summary.to_dict()) for summary in result.sources],
    )
