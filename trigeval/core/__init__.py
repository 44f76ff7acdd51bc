# trigeval/core/__init__.py

"""
Core expression engine for trigeval.

Contains modules for:
- Allow-list registry of functions and constants
- Tokenizer and parser for the formula grammar
- Validation (syntax, security, complexity, dependencies)
- Compilation into cached callables
- Execution with latency monitoring
- Bounded caches and rolling statistics
- The evaluate façade and curve sampling
"""

from . import registry
from . import parser
from . import validator
from . import compiler
from . import executor
from . import cache
from . import stats
from . import evaluator
from . import sampling

__all__ = [
    "registry",
    "parser",
    "validator",
    "compiler",
    "executor",
    "cache",
    "stats",
    "evaluator",
    "sampling",
]
