"""
Build Coordination

Coordinates EPG rebuilds on cache misses so that concurrent requests share a
single upstream fetch instead of each starting their own.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable

from app.services.cache_service import EPGCache


logger = logging.getLogger(__name__)


class BuildCoordinator:
    """
    Serializes EPG rebuilds behind an asyncio.Lock.

    The cache is checked once without the lock and again after acquiring it,
    so requests that queued behind a running build reuse its result. A failed
    build stores nothing; the next waiter then attempts its own build.
    """

    def __init__(self):
        """Initialize the coordinator with a lock."""
        self._build_lock = asyncio.Lock()

    async def get_or_build(
        self,
        cache: EPGCache,
        build_func: Callable[[], Awaitable[bytes]]
    ) -> bytes:
        """
        Return the cached document or build, cache and return a new one.

        Args:
            cache: Result cache to consult and fill
            build_func: Async function producing a fresh XMLTV document

        Returns:
            Serialized XMLTV document

        Raises:
            Any exception raised by build_func
        """
        cached = cache.get()
        if cached is not None:
            logger.debug("Serving EPG from cache")
            return cached

        if self._build_lock.locked():
            logger.info("EPG build already in progress, waiting for it")

        async with self._build_lock:
            cached = cache.get()
            if cached is not None:
                logger.debug("EPG built by a concurrent request, serving from cache")
                return cached

            return await self.rebuild(cache, build_func, locked=True)

    async def rebuild(
        self,
        cache: EPGCache,
        build_func: Callable[[], Awaitable[bytes]],
        *,
        locked: bool = False
    ) -> bytes:
        """
        Build unconditionally and replace the cached document.

        Args:
            cache: Result cache to fill
            build_func: Async function producing a fresh XMLTV document
            locked: True when the caller already holds the build lock
        """
        if not locked:
            async with self._build_lock:
                return await self.rebuild(cache, build_func, locked=True)

        document = await build_func()
        cache.set(document)
        return document
