import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    timestamp: float = field(default=0.0)


class ResultCache:
    """
    In-process cache of computed query results with absolute expiry.

    An entry is served while ``now - timestamp <= ttl``. A lookup that finds
    an expired entry drops it; every ``set`` also sweeps expired entries and,
    once ``max_size`` is reached, evicts the oldest insertion. Cached payloads
    are handed out as-is and must be treated as read-only.

    The instance is owned by the container and shared by the query engine and
    the mutation handlers; it has no lock because resolvers run on a single
    event loop.
    """

    def __init__(
        self,
        ttl_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
        max_size: int = 1000,
    ):
        self._entries: Dict[str, CacheEntry] = {}
        self._ttl = ttl_seconds
        self._clock = clock
        self._max_size = max_size
        self.hits = 0
        self.misses = 0

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp > self._ttl

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        if self._expired(entry, self._clock()):
            del self._entries[key]
            self.misses += 1
            return None
        self.hits += 1
        return entry.value

    def set(self, key: str, value: Any) -> None:
        now = self._clock()
        self._entries.pop(key, None)
        self.sweep(now)
        while len(self._entries) >= self._max_size:
            # dicts keep insertion order, so the first key is the oldest
            del self._entries[next(iter(self._entries))]
        self._entries[key] = CacheEntry(value=value, timestamp=now)

    def sweep(self, now: Optional[float] = None) -> None:
        """
        Drop every expired entry
        """
        now = self._clock() if now is None else now
        expired = [key for key, entry in self._entries.items() if self._expired(entry, now)]
        for key in expired:
            del self._entries[key]

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def invalidate_all(self) -> None:
        self._entries.clear()
        logger.debug("Result cache flushed")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries


def listing_key(page: int, limit: int, sort_by: str, sort_order: str, filter_name: Optional[str]) -> str:
    """
    Fingerprint of an employee listing query
    """
    return f"{page}_{limit}_{sort_by}_{sort_order}_{filter_name or ''}"


def entity_key(employee_id: str) -> str:
    return f"employee_{employee_id}"
