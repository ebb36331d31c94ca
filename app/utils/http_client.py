"""
Upstream HTTP utilities

Thin wrappers around httpx for fetching JSON documents from upstream APIs.
Failed requests are not retried; callers decide whether a failure is fatal.
"""
import logging
from typing import Any

import httpx


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
USER_AGENT = "aynaepg/0.1.0"


def create_http_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """
    Create the shared async client used for all upstream calls

    Args:
        timeout: Default timeout in seconds for connect/read/write/pool

    Returns:
        Configured httpx.AsyncClient (caller owns closing it)
    """
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
    )


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    timeout: float = DEFAULT_TIMEOUT
) -> Any:
    """
    GET a URL and decode its JSON body

    Args:
        client: Shared async client
        url: URL to fetch
        timeout: Per-request timeout in seconds

    Returns:
        Decoded JSON payload

    Raises:
        httpx.HTTPError: On transport errors, timeouts or non-2xx status
        ValueError: If the body is not valid JSON
    """
    logger.debug(f"Fetching {url}...")

    response = await client.get(url, timeout=timeout)
    response.raise_for_status()

    logger.debug(f"Fetched {len(response.content) / 1024:.1f} KB from {url}")

    return response.json()


def sanitize_url_for_logging(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    if "://" not in url:
        return url
    try:
        protocol, rest = url.split("://", 1)
        if "@" in rest:
            rest = rest.split("@", 1)[1]
            return f"{protocol}://***:***@{rest}"
        return url
    except (ValueError, IndexError):
        return url
