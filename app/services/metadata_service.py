"""
Channel Metadata Service

Fetches the channel directory (names, categories, logos) that overrides the
names carried by the EPG feeds.
"""
import logging

import httpx
from pydantic import ValidationError

from app.models import ChannelMetadata
from app.schemas import MetadataResponse
from app.utils.http_client import fetch_json, sanitize_url_for_logging, DEFAULT_TIMEOUT


logger = logging.getLogger(__name__)


class MetadataFetchError(RuntimeError):
    """Raised when the channel directory cannot be retrieved"""
    pass


async def fetch_channel_metadata(
    client: httpx.AsyncClient,
    url: str,
    timeout: float = DEFAULT_TIMEOUT
) -> dict[str, ChannelMetadata]:
    """
    Fetch the channel directory

    Args:
        client: Shared async client
        url: Metadata API URL
        timeout: Request timeout in seconds

    Returns:
        Mapping of channel id -> ChannelMetadata

    Raises:
        MetadataFetchError: On any network, HTTP or payload error
    """
    sanitized_url = sanitize_url_for_logging(url)
    logger.info(f"Fetching channel metadata from {sanitized_url}")

    try:
        payload = await fetch_json(client, url, timeout=timeout)
        response = MetadataResponse.model_validate(payload)
    except (httpx.HTTPError, ValueError, ValidationError) as e:
        logger.error(f"Channel metadata fetch failed for {sanitized_url}: {type(e).__name__}: {e}")
        raise MetadataFetchError(f"Failed to fetch channel metadata from {sanitized_url}") from e

    metadata: dict[str, ChannelMetadata] = {}
    for channel in response.channels:
        if not channel.id:
            logger.debug("Skipping metadata entry with missing id")
            continue

        metadata[channel.id] = ChannelMetadata(
            id=channel.id,
            name=channel.name,
            category=channel.category_name,
            logo_url=channel.logo
        )

    logger.info(f"Loaded metadata for {len(metadata)} channels")
    return metadata
