"""Unit tests for the bounded MemoryCache."""

import sys
import threading
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from cardcache.cache.memory import MemoryCache


class TestMemoryCacheBounds:
    """Test count and cost limits. Eviction order is not asserted."""

    def test_get_missing_returns_none(self) -> None:
        assert MemoryCache().get("nope") is None

    def test_put_then_get(self) -> None:
        cache = MemoryCache()
        cache.put("url", "image", cost=10)
        assert cache.get("url") == "image"
        assert "url" in cache
        assert cache.total_cost == 10

    def test_count_limit(self) -> None:
        cache = MemoryCache(count_limit=3)
        for i in range(10):
            cache.put(f"k{i}", i, cost=1)

        assert len(cache) == 3
        assert cache.total_cost == 3

    def test_cost_limit(self) -> None:
        cache = MemoryCache(count_limit=100, total_cost_limit=100)
        for i in range(10):
            cache.put(f"k{i}", i, cost=30)

        assert cache.total_cost <= 100
        assert len(cache) == 3

    def test_oversized_item_not_kept(self) -> None:
        cache = MemoryCache(total_cost_limit=100)
        cache.put("small", 1, cost=10)
        cache.put("huge", 2, cost=101)

        assert cache.get("huge") is None
        assert cache.get("small") == 1

    def test_replace_updates_cost(self) -> None:
        cache = MemoryCache()
        cache.put("k", "a", cost=40)
        cache.put("k", "b", cost=5)

        assert cache.get("k") == "b"
        assert cache.total_cost == 5
        assert len(cache) == 1

    def test_remove_and_clear(self) -> None:
        cache = MemoryCache()
        cache.put("a", 1, cost=3)
        cache.put("b", 2, cost=4)

        cache.remove("a")
        cache.remove("missing")
        assert cache.get("a") is None
        assert cache.total_cost == 4

        cache.clear()
        assert len(cache) == 0
        assert cache.total_cost == 0

    @pytest.mark.parametrize(
        "kwargs", [{"count_limit": 0}, {"total_cost_limit": -1}]
    )
    def test_invalid_limits_rejected(self, kwargs) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            MemoryCache(**kwargs)

    def test_negative_cost_rejected(self) -> None:
        with pytest.raises(ValueError, match="cost must be non-negative"):
            MemoryCache().put("k", 1, cost=-1)

    def test_concurrent_puts_respect_bounds(self) -> None:
        cache = MemoryCache(count_limit=50, total_cost_limit=1000)

        def worker(offset: int) -> None:
            for i in range(200):
                cache.put(f"{offset}-{i}", i, cost=7)
                cache.get(f"{offset}-{i // 2}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(cache) <= 50
        assert cache.total_cost <= 1000
        assert cache.total_cost == 7 * len(cache)
