"""
Shared fixtures: upstream stubs served through httpx.MockTransport.
"""
from datetime import date

import httpx
import pytest

from app.config import CustomSettings


METADATA_URL = "http://metadata.test/api/aynaott.json"
FEED_TEMPLATE = "http://feeds.test/epg/{date}_minified_bundle.json"
TODAY = date(2026, 10, 19)
FEED_URLS = [
    "http://feeds.test/epg/19-10-2026_minified_bundle.json",
    "http://feeds.test/epg/20-10-2026_minified_bundle.json",
    "http://feeds.test/epg/21-10-2026_minified_bundle.json",
]


class UpstreamStub:
    """Routes requests by URL to canned JSON responses or raised errors."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.calls: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append(url)

        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route

        status, payload = route
        return httpx.Response(status, json=payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def test_settings() -> CustomSettings:
    return CustomSettings(
        metadata_url=METADATA_URL,
        epg_feed_url_template=FEED_TEMPLATE,
        epg_refresh_cron=None,
    )


@pytest.fixture
def metadata_payload() -> dict:
    return {
        "channels": [
            {"id": "c1", "name": "Channel One", "categoryName": "News", "logo": "http://x/logo.png"},
        ]
    }


@pytest.fixture
def feed_payload() -> list:
    return [
        {
            "i": "c1",
            "n": "C1",
            "epg": [{"s": "1700000000", "e": "1700003600", "n": "Show A", "d": "Desc A"}],
        }
    ]


@pytest.fixture
def upstream(metadata_payload, feed_payload) -> UpstreamStub:
    return UpstreamStub({
        METADATA_URL: (200, metadata_payload),
        FEED_URLS[0]: (200, feed_payload),
        FEED_URLS[1]: (200, []),
        FEED_URLS[2]: (200, []),
    })
