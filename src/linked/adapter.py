"""
Source adapters: request hooks composed with a memoized cache.

A source supplies hooks; Adapter runs them in a fixed pipeline:

  build_request_options → get_cache_key → perform_request → normalize_response
      (memoized)                                              ↓
  post_process_response ← annotate_records ← private deep copy

Only the normalized response is cached. Annotation and post-processing
always work on the caller's own copy.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Dict, Hashable, Optional, Protocol, runtime_checkable

from cache import LRUCache, MemoizedFetch
from cache import CacheConfigError as InvalidCacheSize

from .config import AdapterConfig
from .errors import CacheConfigError

logger = logging.getLogger(__name__)


@runtime_checkable
class Provider(Protocol):
    async def fetch(self, options: Dict[str, Any], *prior_results: Any) -> Any:
        ...


class SourceHooks(Protocol):
    """
    Customization points for one data source.

    perform_request is required, and get_cache_key is required whenever
    caching is enabled. The rest fall back to pass-through when absent.
    perform_request may return a value or an awaitable.
    """

    def build_request_options(self, options: Dict[str, Any], *prior_results: Any) -> Dict[str, Any]:
        ...

    def get_cache_key(self, options: Dict[str, Any]) -> Hashable:
        ...

    def perform_request(self, options: Dict[str, Any]) -> Any:
        ...

    def normalize_response(self, raw: Any, options: Dict[str, Any]) -> Any:
        ...

    def annotate_records(self, records: Any, options: Dict[str, Any]) -> Any:
        ...

    def post_process_response(self, records: Any, options: Dict[str, Any]) -> Any:
        ...


def _copy_options(options: Dict[str, Any], *prior_results: Any) -> Dict[str, Any]:
    return dict(options)


def _passthrough(records: Any, options: Dict[str, Any]) -> Any:
    return records


class Adapter:
    """Provider that fetches through a source's hooks with memoization."""

    def __init__(self, hooks: SourceHooks, cache_enabled: bool = True, cache_size: int = 3):
        self.hooks = hooks
        self.cache_enabled = cache_enabled
        try:
            self.cache = LRUCache(cache_size)
        except InvalidCacheSize as exc:
            raise CacheConfigError(str(exc)) from exc
        self._memo = MemoizedFetch(self.cache, enabled=cache_enabled)

        if cache_enabled and not callable(getattr(hooks, "get_cache_key", None)):
            raise CacheConfigError(
                f"{type(hooks).__name__} must implement get_cache_key when caching is enabled"
            )

        self._build_options = getattr(hooks, "build_request_options", _copy_options)
        self._normalize = getattr(hooks, "normalize_response", _passthrough)
        self._annotate = getattr(hooks, "annotate_records", _passthrough)
        self._post_process = getattr(hooks, "post_process_response", _passthrough)

        logger.info(
            f"Adapter initialized for {type(hooks).__name__} "
            f"(cache_enabled={cache_enabled}, cache_size={cache_size})"
        )

    @classmethod
    def from_config(cls, hooks: SourceHooks, config: AdapterConfig) -> "Adapter":
        return cls(hooks, cache_enabled=config.cache_enabled, cache_size=config.cache_size)

    @property
    def fetch_count(self) -> int:
        """Number of underlying requests actually started."""
        return self._memo.fetch_count

    async def fetch(self, options: Optional[Dict[str, Any]] = None, *prior_results: Any) -> Any:
        options = self._build_options(dict(options or {}), *prior_results)

        cache_key = self.hooks.get_cache_key(options) if self.cache_enabled else None
        # `_cache_meta` lets a source annotate the entry for approximate matching
        records = await self._memo.fetch(
            cache_key,
            lambda: self._retrieve(options),
            options.get("_cache_meta"),
        )

        records = self._annotate(records, options)
        return self._post_process(records, options)

    async def _retrieve(self, options: Dict[str, Any]) -> Any:
        raw = self.hooks.perform_request(options)
        if inspect.isawaitable(raw):
            raw = await raw
        return self._normalize(raw, options)

    def clear_cache(self) -> None:
        self._memo.clear()

