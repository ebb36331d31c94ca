"""
Date and Time utilities

Converts upstream epoch values into XMLTV timestamps. Conversion failures are
reported as ``None`` rather than raised so callers can skip the record.
"""
from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo
import logging
import math

logger = logging.getLogger(__name__)

XMLTV_TIME_FORMAT = "%Y%m%d%H%M%S %z"
DEFAULT_TIMEZONE = "Asia/Dhaka"


def parse_epoch(value: object) -> int | None:
    """
    Coerce an upstream epoch value to whole seconds

    Args:
        value: int, float or numeric string (e.g. 1700000000 or "1700000000")

    Returns:
        Integer seconds, or None if the value is not numeric
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)

    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if math.isfinite(number) else None

    return None


@lru_cache(maxsize=8)
def _get_zone(tz_name: str) -> ZoneInfo:
    return ZoneInfo(tz_name)


def format_xmltv_timestamp(value: object, tz_name: str = DEFAULT_TIMEZONE) -> str | None:
    """
    Format epoch seconds as an XMLTV timestamp

    Args:
        value: Epoch seconds (int, float or numeric string)
        tz_name: IANA timezone used for the civil time and offset

    Returns:
        Timestamp like '20231115041320 +0600', or None when the value is
        non-numeric, not positive, or outside the representable range
    """
    seconds = parse_epoch(value)
    if seconds is None or seconds <= 0:
        return None

    try:
        dt = datetime.fromtimestamp(seconds, tz=_get_zone(tz_name))
    except (OverflowError, OSError, ValueError):
        logger.debug("Epoch value out of range: %r", value)
        return None

    return dt.strftime(XMLTV_TIME_FORMAT)
