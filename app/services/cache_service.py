"""
EPG Result Cache

Single-slot, time-limited store for the most recently built XMLTV document.
"""
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass


logger = logging.getLogger(__name__)

CACHE_KEY = "epg"
DEFAULT_TTL_SECONDS = 3600


@dataclass(frozen=True, slots=True)
class CacheEntry:
    key: str
    value: bytes
    expires_at: float


class EPGCache:
    """
    Holds one serialized EPG document until its TTL elapses.

    All reads and writes of the slot happen under a lock so a request can
    never observe a partially replaced entry.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            ttl_seconds: Lifetime of a stored document
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: CacheEntry | None = None

    def get(self) -> bytes | None:
        """Return the cached document, or None if empty or expired"""
        with self._lock:
            entry = self._entry
            if entry is None:
                return None

            if self._clock() >= entry.expires_at:
                logger.info("Cached EPG expired")
                self._entry = None
                return None

            return entry.value

    def set(self, value: bytes) -> None:
        """Store a document and restart its TTL"""
        with self._lock:
            self._entry = CacheEntry(
                key=CACHE_KEY,
                value=value,
                expires_at=self._clock() + self.ttl_seconds,
            )
        logger.info(f"Cached EPG document ({len(value)} bytes) for {self.ttl_seconds}s")

    def clear(self) -> None:
        """Drop the cached document"""
        with self._lock:
            self._entry = None

    def expires_in(self) -> float | None:
        """Seconds until expiry, or None if nothing valid is cached"""
        with self._lock:
            if self._entry is None:
                return None
            remaining = self._entry.expires_at - self._clock()
            return remaining if remaining > 0 else None
