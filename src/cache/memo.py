"""
Memoizing fetch protocol on top of LRUCache.

The in-flight future is cached, not the settled value, so a second caller
arriving before the first fetch settles awaits the same future. A future
that fails is dropped from the cache so the next call retries cleanly.
"""

import asyncio
import copy
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional

from .lru_cache import MISSING, CacheEntry, LRUCache

logger = logging.getLogger(__name__)


class MemoizedFetch:
    """Deduplicate concurrent fetches for one provider."""

    def __init__(self, cache: LRUCache, enabled: bool = True):
        self.cache = cache
        self.enabled = enabled
        self.fetch_count = 0

    async def fetch(
        self,
        key: Hashable,
        factory: Callable[[], Awaitable[Any]],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Return a private copy of the result for key, fetching at most once.

        Args:
            key: Cache key computed by the caller from its request options
            factory: Zero-argument callable returning an awaitable fetch
            metadata: Opaque annotation stored with the entry for find()

        Returns:
            Deep copy of the settled value
        """
        if not self.enabled:
            self.fetch_count += 1
            return copy.deepcopy(await factory())

        pending = self.cache.get(key)
        if pending is not MISSING and _failed(pending):
            # Settled with an error before the rollback callback ran
            self.cache.remove(key)
            pending = MISSING
        if pending is MISSING:
            pending = self._start(key, factory, metadata)
        else:
            logger.debug(f"Memo hit for {key!r}")

        data = await pending
        return copy.deepcopy(data)

    def _start(
        self,
        key: Hashable,
        factory: Callable[[], Awaitable[Any]],
        metadata: Optional[Dict[str, Any]],
    ) -> "asyncio.Future[Any]":
        # Registered before the caller's first await, closing the miss/miss race
        pending = asyncio.ensure_future(factory())
        self.fetch_count += 1
        self.cache.add(key, pending, metadata)
        pending.add_done_callback(lambda done: self._forget_failure(key, done))
        logger.debug(f"Memo miss for {key!r}, fetch started")
        return pending

    def _forget_failure(self, key: Hashable, done: "asyncio.Future[Any]") -> None:
        if not _failed(done):
            return

        # Only drop the entry if it still holds this attempt
        entry = self.cache.find(lambda item: item.key == key and item.value is done)
        if entry is not None:
            self.cache.remove(key)
            logger.warning(f"Fetch for {key!r} failed; removed from cache so it can be retried")

    def find(self, predicate: Callable[[CacheEntry], bool]) -> Optional[CacheEntry]:
        return self.cache.find(predicate)

    def invalidate(self, key: Hashable) -> bool:
        return self.cache.remove(key)

    def clear(self) -> None:
        self.cache.clear()


def _failed(pending: Any) -> bool:
    if not isinstance(pending, asyncio.Future) or not pending.done():
        return False
    return pending.cancelled() or pending.exception() is not None
