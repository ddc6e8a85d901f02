"""Tests for the in-memory cache."""

from datetime import UTC, datetime, timedelta

from macro_planner.services.cache import InMemoryCache


def test_cache_expires_entries() -> None:
    now = datetime(2024, 5, 8, tzinfo=UTC)
    clock = {"now": now}
    cache = InMemoryCache(clock=lambda: clock["now"])

    cache.set("fdc:food:1", {"name": "Rice"}, ttl_seconds=60)
    assert cache.get("fdc:food:1") == {"name": "Rice"}

    clock["now"] = now + timedelta(seconds=60)
    assert cache.get("fdc:food:1") is None
    assert cache.get("missing") is None
