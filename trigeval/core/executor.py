# trigeval/core/executor.py

"""
Runs compiled expressions with latency monitoring and result coercion.

The timeout is advisory: evaluation is synchronous and cannot be
interrupted, so a slow call is only logged after it finishes.
"""

import logging
import math
import numbers
import time
from typing import Any, Callable, Mapping, Optional

from .exceptions import ExpressionExecutionError

logger = logging.getLogger(__name__)

DEFAULT_EVALUATION_TIMEOUT_MS = 100.0


def coerce_result(value: Any) -> float:
    """Returns value as a float, or 0.0 when it is not a finite real number."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return 0.0
    value = float(value)
    return value if math.isfinite(value) else 0.0


class ExpressionExecutor:
    """Invokes compiled callables against an evaluation context."""

    def __init__(self, timeout_ms: float = DEFAULT_EVALUATION_TIMEOUT_MS):
        self.timeout_ms = timeout_ms
        self.last_duration_ms = 0.0

    def run(self, compiled: Callable[[Mapping[str, Any]], Any],
            context: Optional[Mapping[str, Any]] = None) -> float:
        """
        Executes ``compiled(context)``.

        Returns:
            The result as a finite float (non-numeric or non-finite -> 0.0).

        Raises:
            ExpressionExecutionError: If the callable itself raises.
        """
        start = time.perf_counter()
        try:
            result = compiled(context if context is not None else {})
        except Exception as e:
            raise ExpressionExecutionError(f"Function execution failed: {type(e).__name__}: {e}") from e
        finally:
            self.last_duration_ms = (time.perf_counter() - start) * 1000.0

        if self.last_duration_ms > self.timeout_ms:
            source = getattr(compiled, "source", compiled)
            logger.warning(
                f"Expression evaluation took {self.last_duration_ms:.2f}ms "
                f"(threshold: {self.timeout_ms}ms): {source!r}"
            )
        return coerce_result(result)
