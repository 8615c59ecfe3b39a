"""
Time-to-live snapshot cache in front of a record store.

The cache holds one whole key -> record snapshot. It is a performance
optimization only: once the TTL elapses the snapshot is discarded and the
store becomes the authority again.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from ..core.types import ProcessedRecord

DEFAULT_TTL_SECONDS = 600.0


class RecordCache:
    """Thread-safe TTL cache for a full record snapshot.

    Readers receive the snapshot dictionary itself; writers always install a
    new dictionary instead of mutating the current one, so a reader iterating
    an older snapshot is never disturbed. Concurrent refreshes are last-writer-
    wins.

    Attributes:
        ttl_seconds: Lifetime of a snapshot after it is installed
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds < 0:
            raise ValueError("Cache TTL must be non-negative")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._records: dict[str, ProcessedRecord] | None = None
        self._loaded_at = 0.0

    def get(self) -> dict[str, ProcessedRecord] | None:
        """Return the current snapshot, or None if empty or expired."""
        with self._lock:
            if self._records is None:
                return None
            if self._clock() - self._loaded_at >= self.ttl_seconds:
                self._records = None
                return None
            return self._records

    def replace(self, records: dict[str, ProcessedRecord]) -> None:
        """Install a new snapshot and restart its TTL."""
        with self._lock:
            self._records = records
            self._loaded_at = self._clock()

    def invalidate(self) -> None:
        """Drop the snapshot so the next read goes to the store."""
        with self._lock:
            self._records = None
