"""
Structured logging helpers for consistent log formatting.
"""
import logging
from datetime import datetime, timezone


def log_source_processing(logger: logging.Logger, idx: int, total: int, url: str) -> None:
    """
    Log source processing header.

    Args:
        logger: Logger instance
        idx: Current source index (1-based)
        total: Total number of sources
        url: Source URL being processed
    """
    logger.info(f"Processing source {idx}/{total}: {url}")


def log_build_start(logger: logging.Logger) -> None:
    """Log EPG build start."""
    logger.info(f"EPG build started at {datetime.now(timezone.utc).isoformat()}")


def log_build_end(logger: logging.Logger) -> None:
    """Log EPG build end."""
    logger.info(f"EPG build completed at {datetime.now(timezone.utc).isoformat()}")


def log_merge_summary(
    logger: logging.Logger,
    channels_count: int,
    programmes_count: int
) -> None:
    """
    Log merge operation summary.

    Args:
        logger: Logger instance
        channels_count: Number of merged channels
        programmes_count: Number of merged programmes
    """
    logger.info(f"Merge summary - Channels: {channels_count}, Programmes: {programmes_count}")
