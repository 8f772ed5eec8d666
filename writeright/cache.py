"""
Result Cache for WriteRight
===========================
Bounded LRU cache of analysis results keyed by text.

- Keys are a hash of the exact text; the text itself is stored and
  compared on read so a hash collision is a miss, never a wrong result.
- Texts shorter than ``min_length`` are neither stored nor served.
- At capacity, the entry with the oldest access time is evicted.
"""

import hashlib
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from config_logging import get_logger
from .base import AnalysisResult

__version__ = "1.0.0"

logger = get_logger('cache')

DEFAULT_CAPACITY = 100
DEFAULT_MIN_LENGTH = 5


def sha256_key(text: str) -> str:
    return hashlib.sha256(text.encode('utf-8')).hexdigest()


@dataclass
class CacheEntry:
    """A cached result plus the text it was computed for."""
    key: str
    text: str
    value: AnalysisResult
    last_access: float


class TextCache:
    """
    Thread-safe LRU cache of AnalysisResult by text.

    Entries are kept in access order so the least recently used entry
    is always first.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        min_length: int = DEFAULT_MIN_LENGTH,
        hash_func: Callable[[str], str] = sha256_key,
        clock: Callable[[], float] = time.time
    ):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be positive: {capacity}")

        self.capacity = capacity
        self.min_length = min_length
        self._hash = hash_func
        self._clock = clock

        self._entries: 'OrderedDict[str, CacheEntry]' = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, text: str) -> Optional[AnalysisResult]:
        """Return the cached result for text, or None on a miss."""
        if len(text) < self.min_length:
            return None

        key = self._hash(text)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.text != text:
                self._misses += 1
                return None

            entry.last_access = self._clock()
            self._entries.move_to_end(key)
            self._hits += 1
            return entry.value

    def set(self, text: str, value: AnalysisResult):
        """Store a result; overwrites any entry under the same key."""
        if len(text) < self.min_length:
            return

        key = self._hash(text)
        with self._lock:
            now = self._clock()
            if key in self._entries:
                self._entries[key] = CacheEntry(key, text, value, now)
                self._entries.move_to_end(key)
                return

            if len(self._entries) >= self.capacity:
                evicted_key, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug("Cache eviction", key=evicted_key[:12], size=len(self._entries))

            self._entries[key] = CacheEntry(key, text, value, now)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def stats(self) -> Dict[str, Any]:
        """Hit/miss/eviction counters for diagnostics."""
        with self._lock:
            return {
                'size': len(self._entries),
                'capacity': self.capacity,
                'hits': self._hits,
                'misses': self._misses,
                'evictions': self._evictions,
            }
