# trigeval/core/exceptions.py

"""
Error types raised inside the expression engine.

None of these escape ``ExpressionEvaluator.evaluate``; the façade turns
each of them into an ``EvaluationErrorRecord`` and a fallback value of 0.
"""

import time
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

EXPRESSION_EVALUATION_ERROR = "EXPRESSION_EVALUATION_ERROR"


class ExpressionError(Exception):
    """Base exception for expression engine errors."""
    pass


class ExpressionValidationError(ExpressionError):
    """Raised when an expression fails validation (empty, too long, forbidden...)."""
    pass


class ExpressionCompileError(ExpressionError):
    """Raised when a validated expression cannot be turned into a callable."""
    pass


class ParseError(ExpressionCompileError):
    """Raised by the parser; carries the character offset of the failure."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class ExpressionExecutionError(ExpressionError):
    """Raised when invoking a compiled expression fails."""
    pass


@dataclass
class EvaluationErrorRecord:
    """Structured, always-recoverable error surfaced through logging."""
    message: str
    kind: str = EXPRESSION_EVALUATION_ERROR
    timestamp: float = field(default_factory=time.time)
    recoverable: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
