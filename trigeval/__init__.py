# trigeval/__init__.py

"""
trigeval: a safe formula engine for parametric curve art.

Formulas over a curve parameter ``t`` and an animation ``time`` are
validated, compiled once and evaluated many times; evaluation never raises.
"""

from .version import __version__
from .core.evaluator import (
    ExpressionEvaluator,
    BenchmarkResult,
    get_default_evaluator,
    set_default_evaluator,
    validate_expression,
    evaluate,
    clear_cache,
    get_cache_stats,
    get_evaluation_stats,
    reset_stats,
)
from .core.validator import ValidationResult
from .core.compiler import CompiledExpression
from .core.exceptions import (
    ExpressionError,
    ExpressionValidationError,
    ExpressionCompileError,
    ExpressionExecutionError,
    EvaluationErrorRecord,
)
from .core.sampling import CurveSamples, sample_curve, save_samples

__all__ = [
    "__version__",
    "ExpressionEvaluator",
    "BenchmarkResult",
    "get_default_evaluator",
    "set_default_evaluator",
    "validate_expression",
    "evaluate",
    "clear_cache",
    "get_cache_stats",
    "get_evaluation_stats",
    "reset_stats",
    "ValidationResult",
    "CompiledExpression",
    "ExpressionError",
    "ExpressionValidationError",
    "ExpressionCompileError",
    "ExpressionExecutionError",
    "EvaluationErrorRecord",
    "CurveSamples",
    "sample_curve",
    "save_samples",
]
