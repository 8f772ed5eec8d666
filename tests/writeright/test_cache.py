"""
Tests for the Result Cache
==========================
"""

import threading

import pytest

from writeright.base import AnalysisResult, Correction, CorrectionKind
from writeright.cache import TextCache, sha256_key


def _result(word: str) -> AnalysisResult:
    return AnalysisResult.build([Correction(word, ("fix",), CorrectionKind.SPELLING)])


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        self.now += 1.0
        return self.now


class TestTextCache:
    """Tests for TextCache."""

    def test_miss_returns_none(self):
        assert TextCache().get("hello world") is None

    def test_hit_returns_stored_result(self):
        cache = TextCache()
        result = _result("teh")
        cache.set("hello world", result)
        assert cache.get("hello world") == result

    def test_empty_result_is_a_hit(self):
        """An empty result is a value, distinct from a miss."""
        cache = TextCache()
        cache.set("nothing wrong here", AnalysisResult.empty())
        assert cache.get("nothing wrong here") == AnalysisResult.empty()

    def test_short_text_never_stored(self):
        cache = TextCache(min_length=5)
        cache.set("abcd", _result("abcd"))
        assert cache.size() == 0
        assert cache.get("abcd") is None

    def test_key_is_order_sensitive(self):
        cache = TextCache()
        cache.set("dog bites man", _result("a"))
        assert cache.get("man bites dog") is None

    def test_hash_collision_is_a_miss(self):
        cache = TextCache(hash_func=lambda text: "same-key")
        cache.set("first text", _result("first"))
        assert cache.get("second text") is None

    def test_collision_overwrites(self):
        cache = TextCache(hash_func=lambda text: "same-key")
        cache.set("first text", _result("first"))
        cache.set("second text", _result("second"))
        assert cache.size() == 1
        assert cache.get("first text") is None
        assert cache.get("second text") == _result("second")

    def test_set_existing_overwrites_value(self):
        cache = TextCache()
        cache.set("hello world", _result("one"))
        cache.set("hello world", _result("two"))
        assert cache.size() == 1
        assert cache.get("hello world") == _result("two")

    def test_capacity_bound_evicts_least_recent(self):
        cache = TextCache(capacity=3)
        for text in ("text one", "text two", "text three", "text four"):
            cache.set(text, _result(text))

        assert cache.size() == 3
        assert cache.get("text one") is None
        assert cache.get("text four") is not None

    def test_hit_refreshes_entry(self):
        clock = FakeClock()
        cache = TextCache(capacity=2, clock=clock)
        cache.set("text one", _result("1"))
        cache.set("text two", _result("2"))
        cache.get("text one")
        cache.set("text three", _result("3"))

        assert cache.get("text two") is None
        assert cache.get("text one") is not None
        assert cache.get("text three") is not None

    def test_overwrite_refreshes_entry(self):
        cache = TextCache(capacity=2)
        cache.set("text one", _result("1"))
        cache.set("text two", _result("2"))
        cache.set("text one", _result("1b"))
        cache.set("text three", _result("3"))

        assert cache.get("text two") is None
        assert cache.get("text one") == _result("1b")

    def test_clear(self):
        cache = TextCache()
        cache.set("hello world", _result("x"))
        cache.clear()
        assert cache.size() == 0
        assert len(cache) == 0

    def test_stats(self):
        cache = TextCache(capacity=1)
        cache.set("text one", _result("1"))
        cache.get("text one")
        cache.get("missing text")
        cache.set("text two", _result("2"))

        stats = cache.stats()
        assert stats == {'size': 1, 'capacity': 1, 'hits': 1, 'misses': 1, 'evictions': 1}

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            TextCache(capacity=0)

    def test_sha256_key_is_deterministic(self):
        assert sha256_key("hello") == sha256_key("hello")
        assert sha256_key("hello") != sha256_key("Hello")

    def test_concurrent_writes_respect_capacity(self):
        cache = TextCache(capacity=10)

        def writer(offset):
            for i in range(50):
                cache.set(f"thread {offset} text {i}", _result(str(i)))

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert cache.size() == 10
