"""
Recency cache and memoizing fetch protocol.
"""

from .lru_cache import LRUCache, CacheEntry, CacheConfigError, MISSING
from .memo import MemoizedFetch

__all__ = ['LRUCache', 'CacheEntry', 'CacheConfigError', 'MISSING', 'MemoizedFetch']
