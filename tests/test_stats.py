# tests/test_stats.py

import pytest

from trigeval.core.stats import StatsCollector

# --- Test Fixtures ---

@pytest.fixture
def stats(fake_clock):
    return StatsCollector(clock=fake_clock)

# --- Test Cases ---

def test_initial_state(stats):
    snapshot = stats.snapshot()
    assert snapshot["total_evaluations"] == 0
    assert snapshot["cache_hit_rate"] == 0.0
    assert snapshot["success_rate"] == 0.0
    assert snapshot["failure_rate"] == 0.0 # no division by zero
    assert snapshot["evaluations_per_second"] == 0.0
    assert snapshot["average_evaluation_time"] == 0.0


def test_counters(stats):
    stats.record(1.0, success=True)
    stats.record(1.0, success=True, cache_hit=True)
    stats.record(1.0, success=False, cache_hit=True)
    assert stats.total_evaluations == 3
    assert stats.successful_evaluations == 2
    assert stats.failed_evaluations == 1
    assert stats.cache_hits == 2
    assert stats.total_evaluations == stats.successful_evaluations + stats.failed_evaluations


def test_rates(stats):
    for success in (True, True, True, False):
        stats.record(0.5, success=success, cache_hit=success)
    assert stats.success_rate == pytest.approx(75.0)
    assert stats.failure_rate == pytest.approx(25.0)
    assert stats.cache_hit_rate == pytest.approx(75.0)


def test_latency_is_exponential_moving_average(stats):
    """alpha = 0.1, seeded at 0."""
    stats.record(10.0, success=True)
    assert stats.average_evaluation_time == pytest.approx(1.0)
    stats.record(10.0, success=True)
    assert stats.average_evaluation_time == pytest.approx(1.9)


def test_evaluations_per_second(stats, fake_clock):
    stats.record(0.1, success=True)
    fake_clock.now += 1.0
    stats.record(0.1, success=True)
    fake_clock.now += 1.0
    stats.record(0.1, success=True)
    assert stats.evaluations_per_second() == pytest.approx(1.5) # 3 calls over 2 s
    assert stats.last_evaluation_time == fake_clock.now


def test_evaluations_per_second_drops_to_zero_when_idle(stats, fake_clock):
    stats.record(0.1, success=True)
    fake_clock.now += 0.5
    stats.record(0.1, success=True)
    fake_clock.now += 11.0
    assert stats.evaluations_per_second() == 0.0


def test_reset(stats):
    stats.record(3.0, success=False, cache_hit=True)
    stats.reset()
    snapshot = stats.snapshot()
    assert snapshot["total_evaluations"] == 0
    assert snapshot["failed_evaluations"] == 0
    assert snapshot["average_evaluation_time"] == 0.0
    assert snapshot["last_evaluation_time"] == 0.0
    assert stats.cache_hits == 0
