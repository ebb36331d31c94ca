"""
Domain dataclasses shared across the EPG aggregation pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


@dataclass(frozen=True, slots=True)
class ChannelMetadata:
    """Channel directory entry from the metadata API."""
    id: str
    name: str | None = None
    category: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True, slots=True)
class MergedChannel:
    """Channel as it will appear in the XMLTV document."""
    id: str
    display_name: str
    category: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True, slots=True)
class MergedProgramme:
    """Programme with formatted XMLTV timestamps."""
    channel_id: str
    start: str
    stop: str
    title: str
    description: str


@dataclass(frozen=True, slots=True)
class EpgDocument:
    """Merged channels followed by their programmes."""
    channels: tuple[MergedChannel, ...] = ()
    programmes: tuple[MergedProgramme, ...] = ()


@dataclass(slots=True)
class SourceSummary:
    """Outcome of fetching a single feed URL."""
    index: int
    source_url: str
    started_at: datetime
    completed_at: datetime
    status: Literal["success", "failed"]
    channels_fetched: int = 0
    error: str | None = None

    @property
    def duration_seconds(self) -> float:
        return max(0.0, (self.completed_at - self.started_at).total_seconds())

    def to_dict(self) -> dict:
        payload = {
            "source_index": self.index,
            "source_url": self.source_url,
            "status": self.status,
            "channels_fetched": self.channels_fetched,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
            "duration_seconds": self.duration_seconds,
        }
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Merged document plus per-source outcomes."""
    document: EpgDocument
    sources: tuple[SourceSummary, ...] = ()

    @property
    def sources_failed(self) -> int:
        return sum(1 for summary in self.sources if summary.status == "failed")


__all__ = [
    "ChannelMetadata",
    "MergedChannel",
    "MergedProgramme",
    "EpgDocument",
    "SourceSummary",
    "MergeResult",
]
