# trigeval/core/registry.py

"""
Allow-list of the functions and constants an expression may reference.

Anything not listed here is either a free variable (bare identifier) or,
when called, rejected by the validator. The compiler binds names straight
to the callables below; nothing is looked up dynamically.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Optional

import numpy as np


@dataclass(frozen=True)
class FunctionSpec:
    """An allow-listed function and the number of arguments it accepts."""
    name: str
    func: Callable[..., float]
    min_args: int = 1
    max_args: Optional[int] = 1  # None means variadic

    def accepts(self, n_args: int) -> bool:
        if n_args < self.min_args:
            return False
        return self.max_args is None or n_args <= self.max_args

    def arity_label(self) -> str:
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args} to {self.max_args}"


# --- Helpers with browser-math semantics ---

def round_half_up(x: float) -> float:
    """Rounds .5 towards +inf (2.5 -> 3, -2.5 -> -2), unlike Python's round()."""
    return float(math.floor(x + 0.5))


def sign(x: float) -> float:
    if x > 0:
        return 1.0
    if x < 0:
        return -1.0
    return float(x)  # 0.0, -0.0 and nan pass through


def fround(x: float) -> float:
    """Nearest single-precision value."""
    return float(np.float32(x))


def cbrt(x: float) -> float:
    return float(np.cbrt(x))


def exp2(x: float) -> float:
    return math.pow(2.0, x)


def remainder(x: float, y: float) -> float:
    return x - round_half_up(x / y) * y


def minimum(*args: float) -> float:
    """Like min(), but any NaN argument makes the result NaN whatever its position."""
    if any(math.isnan(arg) for arg in args):
        return math.nan
    return min(args)


def maximum(*args: float) -> float:
    if any(math.isnan(arg) for arg in args):
        return math.nan
    return max(args)


def clamp(value: float, lower: float, upper: float) -> float:
    return minimum(maximum(value, lower), upper)


def _int_to_float(func: Callable[[float], int]) -> Callable[[float], float]:
    def wrapper(x: float) -> float:
        return float(func(x))
    wrapper.__name__ = func.__name__
    return wrapper


def _spec(name: str, func: Callable[..., float], min_args: int = 1,
          max_args: Optional[int] = 1) -> FunctionSpec:
    return FunctionSpec(name, func, min_args, max_args)


SAFE_FUNCTIONS: Dict[str, FunctionSpec] = {spec.name: spec for spec in (
    # Trigonometric
    _spec("sin", math.sin),
    _spec("cos", math.cos),
    _spec("tan", math.tan),
    _spec("asin", math.asin),
    _spec("acos", math.acos),
    _spec("atan", math.atan),
    _spec("atan2", math.atan2, 2, 2),
    # Hyperbolic
    _spec("sinh", math.sinh),
    _spec("cosh", math.cosh),
    _spec("tanh", math.tanh),
    _spec("asinh", math.asinh),
    _spec("acosh", math.acosh),
    _spec("atanh", math.atanh),
    # Exponential and logarithmic
    _spec("exp", math.exp),
    _spec("exp2", exp2),
    _spec("expm1", math.expm1),
    _spec("log", math.log),
    _spec("log10", math.log10),
    _spec("log2", math.log2),
    _spec("log1p", math.log1p),
    # Power and root
    _spec("pow", math.pow, 2, 2),
    _spec("sqrt", math.sqrt),
    _spec("cbrt", cbrt),
    _spec("hypot", math.hypot, 1, None),
    # Rounding and sign
    _spec("abs", abs),
    _spec("sign", sign),
    _spec("floor", _int_to_float(math.floor)),
    _spec("ceil", _int_to_float(math.ceil)),
    _spec("round", round_half_up),
    _spec("trunc", _int_to_float(math.trunc)),
    _spec("fround", fround),
    # Min/max
    _spec("min", minimum, 1, None),
    _spec("max", maximum, 1, None),
    _spec("clamp", clamp, 3, 3),
    # Misc
    _spec("fmod", math.fmod, 2, 2),
    _spec("remainder", remainder, 2, 2),
    _spec("gamma", math.gamma),
)}

_BASE_CONSTANTS: Dict[str, float] = {
    "PI": math.pi,
    "pi": math.pi,
    "E": math.e,
    "e": math.e,
    "LN2": math.log(2.0),
    "LN10": math.log(10.0),
    "LOG2E": 1.0 / math.log(2.0),
    "LOG10E": 1.0 / math.log(10.0),
    "SQRT1_2": math.sqrt(0.5),
    "SQRT2": math.sqrt(2.0),
}

# Derived constants, in closed form over pi
DERIVED_CONSTANTS: Dict[str, float] = {
    "TAU": math.pi * 2,
    "PHI": (1 + math.sqrt(5)) / 2,
    "DEG2RAD": math.pi / 180,
    "RAD2DEG": 180 / math.pi,
}

SAFE_CONSTANTS: Dict[str, float] = {**_BASE_CONSTANTS, **DERIVED_CONSTANTS}

# Names weighted by the complexity score
COMMON_FUNCTIONS: FrozenSet[str] = frozenset({"sin", "cos", "tan", "exp", "log", "pow"})
EXPENSIVE_FUNCTIONS: FrozenSet[str] = frozenset({"gamma", "hypot"})

# The two variables every evaluation context carries
REQUIRED_VARIABLES = ("t", "time")


def is_function(name: str) -> bool:
    return name in SAFE_FUNCTIONS


def is_constant(name: str) -> bool:
    return name in SAFE_CONSTANTS


def is_known_name(name: str) -> bool:
    """True for any allow-listed function or constant name."""
    return name in SAFE_FUNCTIONS or name in SAFE_CONSTANTS
