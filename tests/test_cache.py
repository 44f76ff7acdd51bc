# tests/test_cache.py

import pytest

from trigeval.core.cache import CacheManager
from trigeval.core.validator import ValidationResult

# --- Test Cases ---

def test_make_key_strips_surrounding_whitespace():
    assert CacheManager.make_key("  sin(t) \n") == "sin(t)"
    assert CacheManager.make_key("sin( t )") == "sin( t )" # inner whitespace is significant


@pytest.mark.parametrize("kwargs", [
    {"max_size": 0},
    {"eviction_fraction": 0.0},
    {"eviction_fraction": 1.5},
])
def test_invalid_arguments(kwargs):
    with pytest.raises(ValueError):
        CacheManager(**kwargs)


def test_compiled_eviction_drops_oldest_share():
    """Overflowing a 10-entry cache evicts floor(10 * 0.3) = 3 oldest entries."""
    cache = CacheManager(max_size=10)
    for i in range(10):
        cache.put_compiled(f"k{i}", object())
    cache.put_compiled("k10", object())
    assert cache.compiled_size == 8
    for i in range(3):
        assert cache.get_compiled(f"k{i}") is None
    assert cache.get_compiled("k3") is not None
    assert cache.get_compiled("k10") is not None


def test_compiled_eviction_is_fifo_not_lru():
    """Reading an entry does not protect it from eviction."""
    cache = CacheManager(max_size=3, eviction_fraction=0.34)
    for key in ("a", "b", "c"):
        cache.put_compiled(key, object())
    assert cache.get_compiled("a") is not None
    cache.put_compiled("d", object())
    assert cache.get_compiled("a") is None
    assert cache.compiled_size == 3


def test_small_cache_evicts_at_least_one():
    cache = CacheManager(max_size=2) # floor(2 * 0.3) = 0 -> 1
    for i in range(5):
        cache.put_compiled(f"k{i}", object())
        assert cache.compiled_size <= 2
    assert cache.get_compiled("k4") is not None
    assert cache.get_compiled("k3") is not None


def test_overwriting_existing_key_does_not_evict():
    cache = CacheManager(max_size=2)
    cache.put_compiled("a", 1)
    cache.put_compiled("b", 2)
    cache.put_compiled("a", 3)
    assert cache.compiled_size == 2
    assert cache.get_compiled("a") == 3
    assert cache.get_compiled("b") == 2


def test_validation_map_clears_on_overflow():
    cache = CacheManager(max_size=2)
    cache.put_validation("a", ValidationResult())
    cache.put_validation("b", ValidationResult())
    cache.put_validation("b", ValidationResult()) # existing key, no clear
    assert cache.validation_size == 2
    cache.put_validation("c", ValidationResult())
    assert cache.validation_size == 1
    assert cache.get_validation("a") is None
    assert cache.get_validation("c") is not None


def test_stats_and_clear():
    cache = CacheManager(max_size=50)
    cache.put_compiled("sin(t)", object())
    cache.put_validation("sin(t)", ValidationResult())
    cache.put_validation(" sin(t)", ValidationResult())
    stats = cache.stats()
    assert stats == {
        "expression_cache_size": 1,
        "validation_cache_size": 2,
        "max_cache_size": 50,
        "total_cache_memory_estimate": "3.00 KB",
    }
    cache.clear()
    assert cache.stats()["expression_cache_size"] == 0
    assert cache.stats()["validation_cache_size"] == 0
    assert cache.stats()["total_cache_memory_estimate"] == "0.00 KB"
