# trigeval/core/evaluator.py

"""
The evaluate façade: the single entry point collaborators use.

Each ``evaluate`` call runs validate -> cache lookup -> compile (on miss)
-> execute -> record stats, and always returns a finite float. Every failure
path ends in a fallback of 0, one failure in the stats and one logged
``EvaluationErrorRecord``.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from .cache import CacheManager
from .compiler import ExpressionCompiler
from .exceptions import (EvaluationErrorRecord, ExpressionError,
                         ExpressionValidationError)
from .executor import ExpressionExecutor
from .stats import StatsCollector
from .validator import ExpressionValidator, ValidationResult

if TYPE_CHECKING:
    from trigeval.config.models import EngineConfig

logger = logging.getLogger(__name__)

BENCHMARK_EXPRESSIONS = (
    "sin(t) + cos(time)",
    "sqrt(t * t + time * time)",
    "exp(t) * log(time + 1)",
    "pow(sin(t), 2) + pow(cos(time), 2)",
    "abs(tan(t * PI / 4))",
    "min(max(t, 0), 1) * 100",
    "atan2(sin(t), cos(time))",
    "hypot(t, time, 1)",
)


@dataclass
class BenchmarkResult:
    """Timing summary of a benchmark run (times in milliseconds)."""
    iterations: int
    total_time: float
    average_time: float
    operations_per_second: float
    success_rate: float
    test_results: List[Dict[str, Any]] = field(default_factory=list)


class ExpressionEvaluator:
    """
    Validates, compiles, caches and runs formula expressions.

    Caches and statistics belong to the instance, so independent evaluators
    never share state. Not thread-safe.
    """

    def __init__(
        self,
        max_cache_size: int = 1000,
        max_expression_length: int = 2000,
        max_nesting_depth: int = 20,
        evaluation_timeout_ms: float = 100.0,
        eviction_fraction: float = 0.3,
        latency_smoothing: float = 0.1,
        complexity_warning: int = 100,
        complexity_critical: int = 500,
        idle_window_s: float = 10.0,
        memory_per_entry_bytes: int = 1024,
    ):
        self.cache = CacheManager(max_cache_size, eviction_fraction, memory_per_entry_bytes)
        self.stats = StatsCollector(latency_smoothing, idle_window_s)
        self.validator = ExpressionValidator(
            max_expression_length=max_expression_length,
            max_nesting_depth=max_nesting_depth,
            complexity_warning=complexity_warning,
            complexity_critical=complexity_critical,
            cache=self.cache,
        )
        self.compiler = ExpressionCompiler()
        self.executor = ExpressionExecutor(evaluation_timeout_ms)
        self.last_error: Optional[EvaluationErrorRecord] = None

    @classmethod
    def from_config(cls, engine_config: "EngineConfig") -> "ExpressionEvaluator":
        """Builds an evaluator from the ``engine`` section of the configuration."""
        return cls(**engine_config.model_dump())

    # --- Public operations ---

    def validate_expression(self, expression: str) -> ValidationResult:
        """Validates expression text (memoized by raw text)."""
        return self.validator.validate(expression)

    def evaluate(self, expression: str, context: Optional[Mapping[str, Any]] = None) -> float:
        """
        Evaluates an expression against a variable context.

        Never raises. Returns 0.0 when the expression is invalid, fails to
        compile, fails at run time or produces a non-finite value.

        Example:
            >>> ExpressionEvaluator().evaluate("sin(t * PI) * cos(time * 0.5)", {"t": 0.5, "time": 0})
            1.0
        """
        start = time.perf_counter()
        cache_hit = False
        try:
            validation = self.validator.validate(expression)
            if not validation.is_valid:
                raise ExpressionValidationError(f"Invalid expression: {', '.join(validation.errors)}")

            key = self.cache.make_key(expression)
            compiled = self.cache.get_compiled(key)
            cache_hit = compiled is not None
            if compiled is None:
                compiled = self.compiler.compile(expression)
                self.cache.put_compiled(key, compiled)

            result = self.executor.run(compiled, context)
        except ExpressionError as e:
            self._handle_failure(str(e), start, cache_hit)
            return 0.0
        except Exception as e:
            logger.error(f"Unexpected error evaluating {expression!r}: {e}", exc_info=True)
            self._handle_failure(f"Evaluation failed: {e}", start, cache_hit)
            return 0.0

        self.stats.record(self._elapsed_ms(start), success=True, cache_hit=cache_hit)
        return result

    def clear_cache(self) -> None:
        """Wipes the validation and compiled-expression caches."""
        self.cache.clear()

    def get_cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats()

    def get_evaluation_stats(self) -> Dict[str, Any]:
        return self.stats.snapshot()

    def reset_stats(self) -> None:
        self.stats.reset()

    def run_benchmark(self, iterations: int = 1000) -> BenchmarkResult:
        """
        Runs a fixed suite of representative expressions through ``evaluate``.

        Args:
            iterations: Number of evaluations; expressions rotate through the suite.

        Returns:
            A BenchmarkResult; ``test_results`` holds the first ten calls.
        """
        if iterations <= 0:
            raise ValueError("iterations must be positive")

        results: List[Dict[str, Any]] = []
        success_count = 0
        start = time.perf_counter()
        for i in range(iterations):
            expression = BENCHMARK_EXPRESSIONS[i % len(BENCHMARK_EXPRESSIONS)]
            context = {"t": i * 0.1, "time": i * 0.05}
            eval_start = time.perf_counter()
            value = self.evaluate(expression, context)
            eval_time = self._elapsed_ms(eval_start)
            if len(results) < 10:
                results.append({"expression": expression, "time": eval_time, "result": value})
            if math.isfinite(value):
                success_count += 1

        total_time = self._elapsed_ms(start)
        average_time = total_time / iterations
        return BenchmarkResult(
            iterations=iterations,
            total_time=total_time,
            average_time=average_time,
            operations_per_second=1000.0 / average_time if average_time > 0 else float("inf"),
            success_rate=success_count / iterations * 100,
            test_results=results,
        )

    # --- Internals ---

    @staticmethod
    def _elapsed_ms(start: float) -> float:
        return (time.perf_counter() - start) * 1000.0

    def _handle_failure(self, message: str, start: float, cache_hit: bool) -> None:
        record = EvaluationErrorRecord(message=message)
        self.last_error = record
        logger.warning(f"Expression evaluator error [{record.kind}]: {record.message}")
        self.stats.record(self._elapsed_ms(start), success=False, cache_hit=cache_hit)


# --- Process-wide default instance ---

_default_evaluator: Optional[ExpressionEvaluator] = None


def get_default_evaluator() -> ExpressionEvaluator:
    """Returns the shared evaluator, creating it on first use."""
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = ExpressionEvaluator()
    return _default_evaluator


def set_default_evaluator(evaluator: Optional[ExpressionEvaluator]) -> None:
    """Replaces the shared evaluator (None recreates it on next use)."""
    global _default_evaluator
    _default_evaluator = evaluator


def validate_expression(expression: str) -> ValidationResult:
    return get_default_evaluator().validate_expression(expression)


def evaluate(expression: str, context: Optional[Mapping[str, Any]] = None) -> float:
    return get_default_evaluator().evaluate(expression, context)


def clear_cache() -> None:
    get_default_evaluator().clear_cache()


def get_cache_stats() -> Dict[str, Any]:
    return get_default_evaluator().get_cache_stats()


def get_evaluation_stats() -> Dict[str, Any]:
    return get_default_evaluator().get_evaluation_stats()


def reset_stats() -> None:
    get_default_evaluator().reset_stats()
