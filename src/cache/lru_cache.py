"""
Recency Cache
Bounded in-memory LRU store with promotion on read and approximate lookup.

Implements:
- has(key) → bool (no promotion)
- get(key, default=MISSING) → value | default (promotes)
- add(key, value, metadata) (evicts the tail when over capacity)
- remove(key) → bool
- clear()
- find(predicate) → CacheEntry | None
- get_stats() → {hits, misses, writes, evictions, entries, ...}

Entries live in a slot arena and are linked by index, most recently used
at the head and least recently used at the tail.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional

logger = logging.getLogger(__name__)


class CacheConfigError(ValueError):
    """Invalid cache construction parameters."""


class _Missing:
    """Sentinel type for cache misses."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass
class CacheEntry:
    """A cached value plus the metadata attached to it at write time."""
    key: Hashable
    value: Any
    metadata: Dict[str, Any] = field(default_factory=dict)
    prev: Optional[int] = None
    next: Optional[int] = None


class LRUCache:
    """
    Fixed-capacity least-recently-used cache.

    A capacity of 0 disables caching entirely. There is no unlimited mode.
    """

    def __init__(self, max_size: int = 3):
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 0:
            raise CacheConfigError(f'Cache "max_size" must be an integer >= 0, got {max_size!r}')

        self.max_size = max_size
        self._reset()

        self.stats = {
            "hits": 0,
            "misses": 0,
            "writes": 0,
            "evictions": 0,
        }

        logger.debug(f"LRUCache initialized (max_size={max_size})")

    def _reset(self) -> None:
        self._index: Dict[Hashable, int] = {}
        self._slots: List[Optional[CacheEntry]] = []
        self._free: List[int] = []
        self._head: Optional[int] = None
        self._tail: Optional[int] = None

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: Hashable) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[Hashable]:
        """Iterate keys from most to least recently used."""
        for entry in self._walk():
            yield entry.key

    @property
    def head(self) -> Optional[CacheEntry]:
        return self._slots[self._head] if self._head is not None else None

    @property
    def tail(self) -> Optional[CacheEntry]:
        return self._slots[self._tail] if self._tail is not None else None

    def has(self, key: Hashable) -> bool:
        """Check key membership without updating recency."""
        return key in self._index

    def get(self, key: Hashable, default: Any = MISSING) -> Any:
        """Return the cached value and promote it to most recently used."""
        slot = self._index.get(key)
        if slot is None:
            self.stats["misses"] += 1
            return default

        entry = self._slots[slot]
        self.stats["hits"] += 1
        if slot != self._head:
            self._insert(entry.key, entry.value, entry.metadata)
        return entry.value

    def add(self, key: Hashable, value: Any, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Insert at head, replacing any existing entry for the same key."""
        if self.max_size == 0:
            return
        self.stats["writes"] += 1
        self._insert(key, value, metadata if metadata is not None else {})

    def remove(self, key: Hashable) -> bool:
        slot = self._index.get(key)
        if slot is None:
            return False
        self._unlink(slot)
        return True

    def clear(self) -> None:
        self._reset()

    def find(self, predicate: Callable[[CacheEntry], bool]) -> Optional[CacheEntry]:
        """
        Return the most recent entry matching predicate, or None.

        Useful for "approximate match" semantics, eg a requested region that
        is a subset of a region already cached under a different key. The
        predicate may remove the entry it is given.
        """
        slot = self._head
        while slot is not None:
            entry = self._slots[slot]
            if entry is None:
                break
            following = entry.next
            if predicate(entry):
                return entry
            # Still linked: its next pointer reflects any removal the predicate made
            slot = entry.next if self._slots[slot] is entry else following
        return None

    def get_stats(self) -> Dict[str, Any]:
        total_requests = self.stats["hits"] + self.stats["misses"]
        hit_rate = (self.stats["hits"] / total_requests * 100) if total_requests > 0 else 0

        return {
            "hits": self.stats["hits"],
            "misses": self.stats["misses"],
            "hit_rate_percent": round(hit_rate, 1),
            "total_requests": total_requests,
            "writes": self.stats["writes"],
            "evictions": self.stats["evictions"],
            "entries": len(self),
            "max_size": self.max_size,
        }

    def _walk(self) -> Iterator[CacheEntry]:
        slot = self._head
        while slot is not None:
            entry = self._slots[slot]
            slot = entry.next
            yield entry

    def _insert(self, key: Hashable, value: Any, metadata: Dict[str, Any]) -> None:
        prior = self._index.get(key)
        if prior is not None:
            self._unlink(prior)

        entry = CacheEntry(key, value, metadata, prev=None, next=self._head)
        if self._free:
            slot = self._free.pop()
            self._slots[slot] = entry
        else:
            slot = len(self._slots)
            self._slots.append(entry)

        if self._head is not None:
            self._slots[self._head].prev = slot
        else:
            self._tail = slot
        self._head = slot
        self._index[key] = slot

        if len(self._index) > self.max_size:
            evicted = self._slots[self._tail]
            self._unlink(self._tail)
            self.stats["evictions"] += 1
            logger.debug(f"Evicted least recently used key {evicted.key!r}")

    def _unlink(self, slot: int) -> None:
        entry = self._slots[slot]

        if entry.prev is not None:
            self._slots[entry.prev].next = entry.next
        else:
            self._head = entry.next

        if entry.next is not None:
            self._slots[entry.next].prev = entry.prev
        else:
            self._tail = entry.prev

        del self._index[entry.key]
        self._slots[slot] = None
        self._free.append(slot)
