from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _text_or_none(value: Any) -> str | None:
    """Keep strings, stringify numbers, treat anything else as absent"""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _records(value: Any) -> Any:
    """Drop non-object entries from a list; leave non-lists for validation to reject"""
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return value


def _records_or_none(value: Any) -> Any:
    """Like _records, but a non-list value counts as absent"""
    if isinstance(value, list):
        return _records(value)
    return None


UpstreamText = Annotated[str | None, BeforeValidator(_text_or_none)]


class UpstreamModel(BaseModel):
    """Lenient base for upstream payloads: unknown keys ignored, odd field types read as absent"""
    model_config = ConfigDict(extra="ignore")


class MetadataChannel(UpstreamModel):
    """Channel entry of the metadata API"""
    id: UpstreamText = None
    name: UpstreamText = None
    category_name: UpstreamText = Field(None, alias="categoryName")
    logo: UpstreamText = None


class MetadataResponse(UpstreamModel):
    """Metadata API payload"""
    channels: Annotated[list[MetadataChannel], BeforeValidator(_records)]


class FeedProgram(UpstreamModel):
    """Programme entry of a minified EPG feed"""
    start: UpstreamText = Field(None, alias="s", description="Start, epoch seconds")
    end: UpstreamText = Field(None, alias="e", description="End, epoch seconds")
    title: UpstreamText = Field(None, alias="n")
    description: UpstreamText = Field(None, alias="d")


class FeedChannel(UpstreamModel):
    """Channel entry of a minified EPG feed"""
    id: UpstreamText = Field(None, alias="i")
    name: UpstreamText = Field(None, alias="n")
    programs: Annotated[list[FeedProgram] | None, BeforeValidator(_records_or_none)] = Field(None, alias="epg")


Feed = Annotated[list[FeedChannel], BeforeValidator(_records)]


class SourceStatus(BaseModel):
    """Outcome of a single feed URL in the last build"""
    source_index: int
    source_url: str
    status: str
    channels_fetched: int
    duration_seconds: float
    error: str | None = None


class BuildInfo(BaseModel):
    """Summary of the last successful build"""
    built_at: str = Field(..., description="ISO8601 UTC timestamp of the build")
    channels: int
    programmes: int
    sources: list[SourceStatus]


class HealthResponse(BaseModel):
    """Health check payload"""
    status: str = "ok"
    cache_populated: bool
    cache_expires_in: float | None = Field(None, description="Seconds until the cached document expires")
    scheduler_running: bool
    next_refresh: str | None = None
    last_build: BuildInfo | None = None
