"""Tests for FetchCache and integrity tags."""

from cascade.fetch.cache import FetchCache
from cascade.fetch.integrity import compute_integrity_tag, verify_integrity_tag


class TestIntegrityTags:
    """Tests for integrity tag computation."""

    def test_tag_is_key_order_independent(self) -> None:
        """Structurally equal payloads share a tag."""
        assert compute_integrity_tag({"a": 1, "b": {"c": 2}}) == compute_integrity_tag(
            {"b": {"c": 2}, "a": 1}
        )

    def test_tag_changes_with_content(self) -> None:
        """Different payloads have different tags."""
        assert compute_integrity_tag({"a": 1}) != compute_integrity_tag({"a": 2})

    def test_verify(self) -> None:
        """Verification accepts the right tag, in either case, and rejects others."""
        tag = compute_integrity_tag({"a": 1})
        assert len(tag) == 64
        assert verify_integrity_tag({"a": 1}, tag)
        assert verify_integrity_tag({"a": 1}, tag.upper())
        assert not verify_integrity_tag({"a": 2}, tag)


class TestFetchCache:
    """Tests for TTL and integrity behaviour of FetchCache."""

    def test_entry_served_within_ttl(self, fake_clock) -> None:
        """An entry is fresh while younger than the TTL."""
        cache = FetchCache(clock=fake_clock)
        cache.put("remote", {"a": 1})

        fake_clock.advance(299.999)
        entry = cache.get("remote", ttl=300.0)

        assert entry is not None
        assert entry.data == {"a": 1}

    def test_entry_expires_at_ttl(self, fake_clock) -> None:
        """An entry as old as the TTL is evicted."""
        cache = FetchCache(clock=fake_clock)
        cache.put("remote", {"a": 1})

        fake_clock.advance(300.0)

        assert cache.get("remote", ttl=300.0) is None
        assert "remote" not in cache
        assert cache.stats().evictions == 1

    def test_corrupted_entry_evicted(self, fake_clock) -> None:
        """An entry whose data no longer matches its tag is discarded."""
        cache = FetchCache(clock=fake_clock)
        cache.put("remote", {"a": 1})
        cache.peek("remote").data["a"] = 2

        assert cache.get("remote", ttl=300.0) is None
        assert len(cache) == 0

    def test_entries_are_copies(self, fake_clock) -> None:
        """Mutating stored or returned data does not affect the cache."""
        cache = FetchCache(clock=fake_clock)
        data = {"a": {"b": 1}}
        cache.put("remote", data)
        data["a"]["b"] = 2

        entry = cache.get("remote", ttl=60.0)
        entry.data["a"]["b"] = 3

        assert cache.get("remote", ttl=60.0).data == {"a": {"b": 1}}

    def test_newer_put_supersedes(self, fake_clock) -> None:
        """A later put replaces the entry and resets its age."""
        cache = FetchCache(clock=fake_clock)
        cache.put("remote", {"v": 1})
        fake_clock.advance(50)
        cache.put("remote", {"v": 2})
        fake_clock.advance(50)

        assert cache.get("remote", ttl=60.0).data == {"v": 2}

    def test_stats_and_invalidate(self, fake_clock) -> None:
        """Hits and misses are counted and invalidate drops the entry."""
        cache = FetchCache(clock=fake_clock)
        assert cache.get("remote", ttl=60.0) is None
        cache.put("remote", {"a": 1})
        assert cache.get("remote", ttl=60.0) is not None

        stats = cache.stats()
        assert (stats.size, stats.hits, stats.misses) == (1, 1, 1)

        assert cache.invalidate("remote") is True
        assert cache.invalidate("remote") is False

    def test_clear(self, fake_clock) -> None:
        """clear drops every entry."""
        cache = FetchCache(clock=fake_clock)
        cache.put("a", {})
        cache.put("b", {})
        cache.clear()
        assert len(cache) == 0
