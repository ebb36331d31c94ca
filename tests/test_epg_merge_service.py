"""
Tests for feed fetching and merging.
"""
import asyncio

import httpx

from app.models import ChannelMetadata
from app.schemas import FeedProgram
from app.services.epg_merge_service import (
    DEFAULT_DESCRIPTION,
    DEFAULT_TITLE,
    EPGMergePipeline,
    build_channel_programmes,
)
from tests.conftest import FEED_URLS, UpstreamStub


def _program(start, end, title="Show", description="Desc") -> FeedProgram:
    return FeedProgram.model_validate({"s": start, "e": end, "n": title, "d": description})


def _run(stub: UpstreamStub, metadata=None, urls=FEED_URLS):
    async def scenario():
        async with stub.client() as client:
            return await EPGMergePipeline(urls, metadata or {}, client).run()

    return asyncio.run(scenario())


class TestBuildChannelProgrammes:
    """Sorting, validation and formatting of one channel's programmes."""

    def test_sorted_by_numeric_start(self):
        programs = [
            _program("1700000300", "1700000400", "Third"),
            _program("1700000100", "1700000200", "First"),
            _program("1700000200", "1700000300", "Second"),
        ]

        programmes = build_channel_programmes("c1", programs)

        assert [p.title for p in programmes] == ["First", "Second", "Third"]

    def test_numeric_not_lexical_order(self):
        programs = [_program(900, 950, "Later"), _program(1000000000, 1000000100, "Much later"), _program(100, 200, "Early")]

        programmes = build_channel_programmes("c1", programs)

        assert [p.title for p in programmes] == ["Early", "Later", "Much later"]

    def test_invalid_times_dropped(self):
        programs = [
            _program("0", "100"),
            _program("500", "400"),
            _program("abc", "100"),
            _program(None, None),
            _program("1700000000", "1700003600", "Kept"),
        ]

        programmes = build_channel_programmes("c1", programs)

        assert [p.title for p in programmes] == ["Kept"]

    def test_unformattable_times_dropped_after_validation(self):
        programs = [
            _program(10**18, 10**18 + 60, "Too far"),
            _program("1700000000", "1700003600", "Kept"),
        ]

        programmes = build_channel_programmes("c1", programs)

        assert [p.title for p in programmes] == ["Kept"]

    def test_defaults_for_missing_text(self):
        programs = [FeedProgram.model_validate({"s": 1700000000, "e": 1700003600})]

        programme = build_channel_programmes("c1", programs)[0]

        assert programme.title == DEFAULT_TITLE
        assert programme.description == DEFAULT_DESCRIPTION
        assert programme.start == "20231115041320 +0600"
        assert programme.stop == "20231115051320 +0600"
        assert programme.channel_id == "c1"


class TestEPGMergePipeline:
    """Merging across the per-day feeds."""

    def test_deduplicates_channels_across_feeds(self):
        stub = UpstreamStub({
            FEED_URLS[0]: (200, [{"i": "c1", "n": "Day One Name", "epg": [{"s": 1700000000, "e": 1700003600, "n": "A"}]}]),
            FEED_URLS[1]: (200, [{"i": "c1", "n": "Day Two Name", "epg": [{"s": 1700086400, "e": 1700090000, "n": "B"}]}]),
            FEED_URLS[2]: (200, []),
        })

        result = _run(stub)

        assert [(c.id, c.display_name) for c in result.document.channels] == [("c1", "Day One Name")]
        assert [p.title for p in result.document.programmes] == ["A", "B"]

    def test_metadata_wins_over_first_feed_name(self):
        stub = UpstreamStub({
            FEED_URLS[0]: (200, [{"i": "c1", "n": "Feed Name", "epg": []}]),
            FEED_URLS[1]: (200, []),
            FEED_URLS[2]: (200, []),
        })
        metadata = {"c1": ChannelMetadata(id="c1", name="Directory Name", category="Movies", logo_url="http://x/c1.png")}

        channel = _run(stub, metadata).document.channels[0]

        assert channel.display_name == "Directory Name"
        assert channel.category == "Movies"
        assert channel.logo_url == "http://x/c1.png"

    def test_unknown_channels_collapse(self):
        stub = UpstreamStub({
            FEED_URLS[0]: (200, [{"epg": [{"s": 1700000000, "e": 1700003600, "n": "A"}]}]),
            FEED_URLS[1]: (200, [{"n": "Named but no id"}]),
            FEED_URLS[2]: (200, []),
        })

        document = _run(stub).document

        assert [(c.id, c.display_name) for c in document.channels] == [("unknown_id", "unknown_name")]
        assert document.programmes[0].channel_id == "unknown_id"

    def test_failed_feed_is_skipped(self):
        stub = UpstreamStub({
            FEED_URLS[0]: (200, [{"i": "c1", "n": "One", "epg": [{"s": 1700000000, "e": 1700003600, "n": "A"}]}]),
            FEED_URLS[1]: httpx.ConnectError("connection refused"),
            FEED_URLS[2]: (200, [{"i": "c3", "n": "Three", "epg": [{"s": 1700172800, "e": 1700176400, "n": "C"}]}]),
        })

        result = _run(stub)

        assert [c.id for c in result.document.channels] == ["c1", "c3"]
        assert [p.title for p in result.document.programmes] == ["A", "C"]
        assert [s.status for s in result.sources] == ["success", "failed", "success"]
        assert result.sources_failed == 1
        assert "ConnectError" in result.sources[1].error

    def test_http_error_and_malformed_payload_are_skipped(self):
        stub = UpstreamStub({
            FEED_URLS[0]: (503, {"error": "unavailable"}),
            FEED_URLS[1]: (200, {"not": "a list"}),
            FEED_URLS[2]: (200, [{"i": "c3", "n": "Three", "epg": []}]),
        })

        result = _run(stub)

        assert [c.id for c in result.document.channels] == ["c3"]
        assert result.sources_failed == 2

    def test_every_url_fetched_once(self):
        stub = UpstreamStub({url: (200, []) for url in FEED_URLS})

        result = _run(stub)

        assert sorted(stub.calls) == sorted(FEED_URLS)
        assert result.document.channels == ()
        assert [s.index for s in result.sources] == [1, 2, 3]

    def test_malformed_programme_only_drops_itself(self):
        stub = UpstreamStub({
            FEED_URLS[0]: (200, [
                {
                    "i": "c1",
                    "n": "One",
                    "epg": [
                        {"s": 1700000000, "e": 1700003600, "n": "A", "d": "Desc A"},
                        {"s": True, "e": 1700007200, "n": "Boolean start"},
                        {"s": 1700003600, "e": 1700007200, "n": False, "d": ["not", "text"]},
                        42,
                    ],
                },
                {"i": "c2", "n": {"nested": "name"}, "epg": "not a list"},
                "not a channel",
            ]),
            FEED_URLS[1]: (200, [{"i": "c3", "n": "Three", "epg": [{"s": 1700086400, "e": 1700090000, "n": "C"}]}]),
            FEED_URLS[2]: (200, []),
        })

        result = _run(stub)
        document = result.document

        assert [s.status for s in result.sources] == ["success", "success", "success"]
        assert [(c.id, c.display_name) for c in document.channels] == [
            ("c1", "One"),
            ("c2", "unknown_name"),
            ("c3", "Three"),
        ]
        assert [(p.channel_id, p.title, p.description) for p in document.programmes] == [
            ("c1", "A", "Desc A"),
            ("c1", DEFAULT_TITLE, DEFAULT_DESCRIPTION),
            ("c3", "C", DEFAULT_DESCRIPTION),
        ]

    def test_metadata_wins_when_channel_first_appears_in_later_feed(self):
        stub = UpstreamStub({
            FEED_URLS[0]: (200, [{"i": "c1", "n": "Only Day One", "epg": []}]),
            FEED_URLS[1]: (200, [{"i": "c2", "n": "Feed Name Day Two", "epg": []}]),
            FEED_URLS[2]: (200, [{"i": "c2", "n": "Feed Name Day Three", "epg": []}]),
        })
        metadata = {"c2": ChannelMetadata(id="c2", name="Directory Two", category="Kids", logo_url="http://x/c2.png")}

        channels = _run(stub, metadata).document.channels

        assert [c.id for c in channels] == ["c1", "c2"]
        assert channels[0].display_name == "Only Day One"
        assert channels[1].display_name == "Directory Two"
        assert channels[1].category == "Kids"
        assert channels[1].logo_url == "http://x/c2.png"
