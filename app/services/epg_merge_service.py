"""
EPG Merge Service

Downloads the per-day EPG feeds and merges them into a single document of
channels and programmes. A failing feed is logged and skipped; the remaining
feeds are still merged.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

import httpx
from pydantic import TypeAdapter, ValidationError

from app.schemas import Feed, FeedChannel, FeedProgram
from app.models import (
    ChannelMetadata,
    EpgDocument,
    MergedProgramme,
    MergeResult,
    SourceSummary,
)
from app.utils.data_merging import ChannelRegistry, UNKNOWN_CHANNEL_ID, UNKNOWN_CHANNEL_NAME
from app.utils.http_client import fetch_json, sanitize_url_for_logging, DEFAULT_TIMEOUT
from app.utils.logging_helpers import log_merge_summary, log_source_processing
from app.utils.program_validation import validate_program_times
from app.utils.timezone import DEFAULT_TIMEZONE, format_xmltv_timestamp, parse_epoch


logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Unknown Program"
DEFAULT_DESCRIPTION = "No description available"

_feed_adapter = TypeAdapter(Feed)


class EPGMergePipeline:
    """Coordinates download and merge stages for a single build."""

    def __init__(
        self,
        sources: Sequence[str],
        metadata: Mapping[str, ChannelMetadata],
        client: httpx.AsyncClient,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        tz_name: str = DEFAULT_TIMEZONE,
    ) -> None:
        self.sources = list(sources)
        self.total_sources = len(self.sources)
        self.metadata = metadata
        self._client = client
        self._timeout = timeout
        self._tz_name = tz_name

    async def run(self) -> MergeResult:
        results = await self._collect_sources()
        document = self._merge(results)
        log_merge_summary(logger, len(document.channels), len(document.programmes))

        return MergeResult(document=document, sources=tuple(summary for summary, _ in results))

    async def _collect_sources(self) -> list[tuple[SourceSummary, list[FeedChannel]]]:
        if not self.sources:
            logger.warning("No EPG feed URLs to fetch")
            return []

        tasks = [
            asyncio.create_task(self._process_source(index, source_url))
            for index, source_url in enumerate(self.sources, start=1)
        ]

        results = list(await asyncio.gather(*tasks))
        results.sort(key=lambda result: result[0].index)
        return results

    async def _process_source(
        self,
        index: int,
        source_url: str
    ) -> tuple[SourceSummary, list[FeedChannel]]:
        sanitized_url = sanitize_url_for_logging(source_url)
        started_at = datetime.now(timezone.utc)
        log_source_processing(logger, index, self.total_sources, sanitized_url)

        try:
            payload = await fetch_json(self._client, source_url, timeout=self._timeout)
            feed = _feed_adapter.validate_python(payload)
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            logger.error(
                "[Source %s] Failed to fetch %s: %s: %s",
                index,
                sanitized_url,
                type(exc).__name__,
                exc,
            )
            return SourceSummary(
                index=index,
                source_url=sanitized_url,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
                status="failed",
                error=f"{type(exc).__name__}: {exc}",
            ), []

        logger.info(
            "[Source %s/%s] Fetched %s channels from %s",
            index,
            self.total_sources,
            len(feed),
            sanitized_url,
        )
        return SourceSummary(
            index=index,
            source_url=sanitized_url,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            status="success",
            channels_fetched=len(feed),
        ), feed

    def _merge(self, results: Sequence[tuple[SourceSummary, list[FeedChannel]]]) -> EpgDocument:
        """Merge successful feeds in URL order (single pass, no concurrency)"""
        registry = ChannelRegistry(self.metadata)
        programmes: list[MergedProgramme] = []

        for summary, feed in results:
            if summary.status != "success":
                continue

            for feed_channel in feed:
                channel_id = feed_channel.id or UNKNOWN_CHANNEL_ID
                channel_name = feed_channel.name or UNKNOWN_CHANNEL_NAME

                if registry.register(channel_id, channel_name):
                    logger.debug("[Source %s] Registered channel %s", summary.index, channel_id)

                programmes.extend(
                    build_channel_programmes(channel_id, feed_channel.programs or [], self._tz_name)
                )

        return EpgDocument(channels=registry.channels, programmes=tuple(programmes))


def sort_programs(programs: Sequence[FeedProgram]) -> list[FeedProgram]:
    """Stable sort by numeric start; unparsable starts sort first"""
    return sorted(programs, key=lambda program: parse_epoch(program.start) or 0)


def build_channel_programmes(
    channel_id: str,
    programs: Sequence[FeedProgram],
    tz_name: str = DEFAULT_TIMEZONE
) -> list[MergedProgramme]:
    """
    Turn one channel's raw programmes into XMLTV-ready programmes

    Programmes are sorted by start, then dropped if their times are invalid
    or cannot be formatted.

    Args:
        channel_id: Channel the programmes belong to
        programs: Raw feed programmes
        tz_name: Timezone for the formatted timestamps

    Returns:
        Programmes in ascending start order
    """
    programmes: list[MergedProgramme] = []
    dropped = 0

    for program in sort_programs(programs):
        times = validate_program_times(program.start, program.end)
        if times is None:
            dropped += 1
            continue

        start = format_xmltv_timestamp(times.start, tz_name)
        stop = format_xmltv_timestamp(times.end, tz_name)
        if start is None or stop is None:
            dropped += 1
            continue

        programmes.append(MergedProgramme(
            channel_id=channel_id,
            start=start,
            stop=stop,
            title=program.title or DEFAULT_TITLE,
            description=program.description or DEFAULT_DESCRIPTION,
        ))

    if dropped:
        logger.debug("Dropped %s programme(s) with unusable times on %s", dropped, channel_id)

    return programmes
