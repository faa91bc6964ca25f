"""
Recent Capture Cache

Bounded, insertion-ordered set of fingerprints for recently captured text.
Process-local and never persisted: a restart forgets all history, which
only risks a repeat capture, never a blocked one.
"""

import threading
from typing import Dict, List


class RecentCaptureCache:
    """
    FIFO-bounded fingerprint set.

    - contains() is a hash lookup
    - record() inserts; once size exceeds capacity the oldest insert is evicted
    - Re-recording a present fingerprint does not refresh its position (FIFO, not LRU)

    Access is serialized with a lock so eviction and insertion stay atomic
    when the cache is shared across threads.
    """

    def __init__(self, capacity: int = 200):
        """
        Initialize the cache.

        Args:
            capacity: Maximum number of fingerprints held
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._entries: Dict[str, None] = {}
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def contains(self, fingerprint: str) -> bool:
        with self._lock:
            return fingerprint in self._entries

    def record(self, fingerprint: str) -> None:
        """Insert a fingerprint, evicting the oldest one if over capacity."""
        with self._lock:
            if fingerprint in self._entries:
                return
            self._entries[fingerprint] = None
            if len(self._entries) > self._capacity:
                oldest = next(iter(self._entries))
                del self._entries[oldest]

    def snapshot(self) -> List[str]:
        """Fingerprints in insertion order, oldest first"""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, fingerprint: str) -> bool:
        return self.contains(fingerprint)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
