"""Tests for staffdesk/store/cache.py: TTL cache with an injected clock."""

from staffdesk.store import TTLCache


def test_get_before_expiry(clock):
    cache = TTLCache(ttl=10, clock=clock)
    cache.set("all_staff", [1])
    clock.advance(9.9)
    assert cache.get("all_staff") == [1]


def test_expired_entry_is_dropped(clock):
    cache = TTLCache(ttl=10, clock=clock)
    cache.set("all_staff", [1])
    clock.advance(10)
    assert cache.get("all_staff") is None
    assert len(cache) == 0


def test_invalidate_by_fragment(clock):
    cache = TTLCache(ttl=10, clock=clock)
    cache.set("all_staff", [1])
    cache.set("all_shows", [2])
    assert cache.invalidate("staff") == 1
    assert cache.keys() == ["all_shows"]


def test_instances_are_isolated(clock):
    a = TTLCache(ttl=10, clock=clock)
    b = TTLCache(ttl=10, clock=clock)
    a.set("k", 1)
    assert b.get("k") is None
    a.clear()
    assert a.get("k") is None
