from zoneinfo import ZoneInfo
import logging

from croniter import croniter
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

DEFAULT_METADATA_URL = "https://ayna-api.buddyxiptv.com/api/aynaott.json"
DEFAULT_FEED_URL_TEMPLATE = (
    "https://cloudtv.akamaized.net/AynaOTT/BDcontent/channels/epg/"
    "652fcf82a2649538da6fc6e3_{date}_minified_bundle.json"
)


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    metadata_url: str = DEFAULT_METADATA_URL
    epg_feed_url_template: str = DEFAULT_FEED_URL_TEMPLATE
    epg_days: int = 3  # Today plus the following days
    upstream_timeout_sec: float = 15.0
    cache_ttl_sec: int = 3600  # One hour
    epg_refresh_cron: str | None = None  # UTC cron, disabled unless set

    epg_timezone: str = "Asia/Dhaka"
    programme_language: str = "bn"
    generator_info_name: str = "Bangladesh EPG Generator"
    generator_info_url: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        """Validate listening port range."""
        if not 0 < value < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @field_validator("metadata_url", "epg_feed_url_template")
    @classmethod
    def validate_upstream_urls(cls, value: str, info) -> str:
        """Validate upstream URLs are HTTP/HTTPS."""
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"{info.field_name} must be HTTP/HTTPS: {value}")
        return value

    @field_validator("epg_feed_url_template")
    @classmethod
    def validate_feed_template(cls, value: str) -> str:
        """Ensure the feed template has a date placeholder."""
        if "{date}" not in value:
            raise ValueError("epg_feed_url_template must contain a '{date}' placeholder")
        return value

    @field_validator("epg_days")
    @classmethod
    def validate_epg_days(cls, value: int) -> int:
        """Validate day range is positive and reasonable."""
        if value < 1:
            raise ValueError("epg_days must be >= 1")
        if value > 14:
            raise ValueError("epg_days must be <= 14")
        return value

    @field_validator("upstream_timeout_sec", "cache_ttl_sec")
    @classmethod
    def validate_positive(cls, value, info):
        """Ensure timeouts and TTLs are positive."""
        if value <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return value

    @field_validator("epg_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Validate timezone string"""
        try:
            ZoneInfo(value)
            return value
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Invalid timezone: {value}. Must be a valid IANA timezone") from exc

    @field_validator("epg_refresh_cron", mode="before")
    @classmethod
    def parse_refresh_cron(cls, value):
        """Treat empty strings as a disabled schedule."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("epg_refresh_cron")
    @classmethod
    def validate_cron_expression(cls, value: str | None) -> str | None:
        """Validate cron expression is valid."""
        if value is None:
            return value
        try:
            croniter(value)
            return value
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Invalid cron expression '{value}': {exc}") from exc

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Listen: %s:%s", self.host, self.port)
        logger.info("  Metadata URL: %s", self.metadata_url)
        logger.info("  Feed URL Template: %s", self.epg_feed_url_template)
        logger.info("  Feed Days: %s", self.epg_days)
        logger.info("  Upstream Timeout: %ss", self.upstream_timeout_sec)
        logger.info("  Cache TTL: %ss", self.cache_ttl_sec)
        logger.info("  Refresh Schedule: %s", self.epg_refresh_cron or "disabled")
        logger.info("  Timezone: %s", self.epg_timezone)


settings = CustomSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
