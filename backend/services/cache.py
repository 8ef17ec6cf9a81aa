"""Single-value in-memory TTL cache. No Redis needed at this scale.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
the source is loaded once per worker. Within a worker, the lock makes the
check-then-load sequence single-flight: concurrent misses trigger one load.
"""

import threading
import time
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class SnapshotCache(Generic[T]):
    """Holds one value produced by ``loader`` and replaces it after ``ttl_seconds``.

    The value is swapped by reference, never mutated, so readers that already
    hold the previous snapshot keep working on it.
    """

    def __init__(
        self,
        loader: Callable[[], T],
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._value: T | None = None
        self._loaded_at: float | None = None

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def loaded_at(self) -> float | None:
        return self._loaded_at

    @property
    def stale_value(self) -> T | None:
        """Last loaded value regardless of age, or None if never loaded."""
        return self._value

    def _fresh(self, value: T | None, loaded_at: float | None) -> bool:
        if value is None or loaded_at is None:
            return False
        return self._clock() - loaded_at < self._ttl

    def is_fresh(self) -> bool:
        return self._fresh(self._value, self._loaded_at)

    def get(self) -> T:
        """Return the cached value, loading it first if missing or expired.

        Loader exceptions propagate; the previous value is kept but not returned.
        """
        # Read both fields once so a concurrent invalidate() can't hand back None
        value, loaded_at = self._value, self._loaded_at
        if self._fresh(value, loaded_at):
            return value  # type: ignore[return-value]

        with self._lock:
            # Another thread may have reloaded while we waited
            value, loaded_at = self._value, self._loaded_at
            if self._fresh(value, loaded_at):
                return value  # type: ignore[return-value]
            now = self._clock()
            value = self._loader()
            self._value = value
            self._loaded_at = now
            return value

    def invalidate(self) -> None:
        with self._lock:
            self._value = None
            self._loaded_at = None
