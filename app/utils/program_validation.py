"""
Programme time validation
"""
from dataclasses import dataclass

from app.utils.timezone import parse_epoch


@dataclass(frozen=True, slots=True)
class ProgramTimes:
    """Validated programme boundaries in epoch seconds."""
    start: int
    end: int


def validate_program_times(start: object, end: object) -> ProgramTimes | None:
    """
    Check that a programme's raw start/end are usable

    Returns:
        ProgramTimes when both parse as integers, start > 0 and end > start;
        None otherwise
    """
    start_time = parse_epoch(start)
    end_time = parse_epoch(end)

    if start_time is None or end_time is None:
        return None

    if start_time <= 0 or end_time <= start_time:
        return None

    return ProgramTimes(start=start_time, end=end_time)
