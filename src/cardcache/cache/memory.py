"""Bounded in-memory cache for decoded images."""

import threading
from collections import OrderedDict
from typing import Any

DEFAULT_COUNT_LIMIT = 100
DEFAULT_COST_LIMIT = 50 * 1024 * 1024  # 50MB


class MemoryCache:
    """Thread-safe cache bounded by entry count and total cost.

    Entries are evicted once either limit is exceeded. The current eviction
    order is least-recently-used, but callers should treat it as
    implementation-defined and rely only on the bounds.
    """

    def __init__(
        self,
        count_limit: int = DEFAULT_COUNT_LIMIT,
        total_cost_limit: int = DEFAULT_COST_LIMIT,
    ):
        """Initialize an empty cache.

        Args:
            count_limit: Maximum number of entries
            total_cost_limit: Maximum sum of entry costs

        Raises:
            ValueError: If either limit is not positive
        """
        if count_limit <= 0:
            raise ValueError(f"count_limit must be positive, got {count_limit}")
        if total_cost_limit <= 0:
            raise ValueError(
                f"total_cost_limit must be positive, got {total_cost_limit}"
            )

        self.count_limit = count_limit
        self.total_cost_limit = total_cost_limit
        self._entries: OrderedDict[str, tuple[Any, int]] = OrderedDict()
        self._total_cost = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Return the cached value for key, or None."""
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            self._entries.move_to_end(key)
            return item[0]

    def put(self, key: str, value: Any, cost: int = 0) -> None:
        """Insert or replace a value, evicting entries to respect the limits.

        A value whose own cost exceeds the cost limit is not kept.
        """
        if cost < 0:
            raise ValueError(f"cost must be non-negative, got {cost}")

        with self._lock:
            self._pop(key)
            if cost > self.total_cost_limit:
                return

            self._entries[key] = (value, cost)
            self._total_cost += cost

            while (
                len(self._entries) > self.count_limit
                or self._total_cost > self.total_cost_limit
            ):
                oldest = next(iter(self._entries))
                self._pop(oldest)

    def remove(self, key: str) -> None:
        with self._lock:
            self._pop(key)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._total_cost = 0

    @property
    def total_cost(self) -> int:
        with self._lock:
            return self._total_cost

    def _pop(self, key: str) -> None:
        # Caller holds the lock
        item = self._entries.pop(key, None)
        if item is not None:
            self._total_cost -= item[1]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
