"""
Data merging utilities

This module handles channel deduplication across the feeds of a single build.
"""
import logging
from collections.abc import Mapping

from app.models import ChannelMetadata, MergedChannel

logger = logging.getLogger(__name__)

UNKNOWN_CHANNEL_ID = "unknown_id"
UNKNOWN_CHANNEL_NAME = "unknown_name"


class ChannelRegistry:
    """
    Ordered set of channels seen during one merge.

    The first feed occurrence of an id creates its entry; later occurrences are
    ignored. When the metadata directory knows the id, its name, category and
    logo are used instead of the feed-supplied name.
    """

    def __init__(self, metadata: Mapping[str, ChannelMetadata] | None = None):
        self._metadata = metadata or {}
        self._seen: set[str] = set()
        self._channels: list[MergedChannel] = []

    def __contains__(self, channel_id: str) -> bool:
        return channel_id in self._seen

    def __len__(self) -> int:
        return len(self._channels)

    def register(self, channel_id: str, feed_name: str) -> bool:
        """
        Register a channel if its id has not been seen yet

        Args:
            channel_id: Channel id from the feed (placeholder if missing)
            feed_name: Channel name from the feed (placeholder if missing)

        Returns:
            True if a new channel was added, False if it was already known
        """
        if channel_id in self._seen:
            return False

        self._seen.add(channel_id)
        self._channels.append(build_merged_channel(channel_id, feed_name, self._metadata.get(channel_id)))
        return True

    @property
    def channels(self) -> tuple[MergedChannel, ...]:
        return tuple(self._channels)


def build_merged_channel(
    channel_id: str,
    feed_name: str,
    metadata: ChannelMetadata | None
) -> MergedChannel:
    """Combine feed data with directory metadata (metadata wins)"""
    if metadata is None:
        return MergedChannel(id=channel_id, display_name=feed_name)

    logger.debug("Using directory metadata for channel %s", channel_id)
    return MergedChannel(
        id=channel_id,
        display_name=metadata.name or feed_name,
        category=metadata.category or None,
        logo_url=metadata.logo_url or None,
    )
