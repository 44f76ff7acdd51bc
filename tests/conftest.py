# tests/conftest.py

"""
Shared fixtures for the trigeval test suite.
"""

import logging

import pytest

from trigeval.core.evaluator import ExpressionEvaluator, set_default_evaluator


@pytest.fixture
def evaluator() -> ExpressionEvaluator:
    """A fresh evaluator with its own caches and statistics."""
    return ExpressionEvaluator()


@pytest.fixture(autouse=True)
def isolate_engine_state():
    """Resets the shared default evaluator and the package logger around each test."""
    set_default_evaluator(None)
    yield
    set_default_evaluator(None)
    package_logger = logging.getLogger("trigeval")
    for handler in list(package_logger.handlers):
        handler.close()
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


class FakeClock:
    """Manually advanced clock for time-dependent statistics."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
