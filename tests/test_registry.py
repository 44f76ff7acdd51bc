# tests/test_registry.py

"""
Tests for the allow-list registry in trigeval.core.registry.
"""

import math

import pytest

from trigeval.core import registry

# --- Test Cases ---

def test_function_groups_are_allow_listed():
    """Every name weighted by the complexity score must be a real function."""
    assert registry.COMMON_FUNCTIONS <= set(registry.SAFE_FUNCTIONS)
    assert registry.EXPENSIVE_FUNCTIONS <= set(registry.SAFE_FUNCTIONS)


def test_functions_and_constants_do_not_overlap():
    assert not set(registry.SAFE_FUNCTIONS) & set(registry.SAFE_CONSTANTS)


@pytest.mark.parametrize("name", sorted(registry.SAFE_FUNCTIONS))
def test_every_function_accepts_its_minimum_arity(name):
    """Each allow-listed function runs with its minimum number of (positive) arguments."""
    spec = registry.SAFE_FUNCTIONS[name]
    args = [0.5] * max(spec.min_args, 1)
    if name == "acosh":
        args = [1.5]
    value = spec.func(*args)
    assert isinstance(value, float) or isinstance(value, int)


def test_derived_constants_closed_form():
    assert registry.SAFE_CONSTANTS["TAU"] == pytest.approx(2 * math.pi)
    assert registry.SAFE_CONSTANTS["PHI"] == pytest.approx(1.6180339887)
    assert registry.SAFE_CONSTANTS["DEG2RAD"] * 180 == pytest.approx(math.pi)
    assert registry.SAFE_CONSTANTS["RAD2DEG"] == pytest.approx(57.29577951)
    assert registry.SAFE_CONSTANTS["pi"] == registry.SAFE_CONSTANTS["PI"]
    assert registry.SAFE_CONSTANTS["e"] == registry.SAFE_CONSTANTS["E"] == math.e


def test_log_constants():
    assert registry.SAFE_CONSTANTS["LN2"] == pytest.approx(math.log(2))
    assert registry.SAFE_CONSTANTS["LOG2E"] == pytest.approx(math.log2(math.e))
    assert registry.SAFE_CONSTANTS["LOG10E"] == pytest.approx(math.log10(math.e))
    assert registry.SAFE_CONSTANTS["SQRT1_2"] == pytest.approx(math.sqrt(0.5))


@pytest.mark.parametrize("value, expected", [
    (2.5, 3.0),
    (-2.5, -2.0),
    (0.49, 0.0),
    (-0.51, -1.0),
])
def test_round_half_up(value, expected):
    """Halves round towards positive infinity."""
    assert registry.round_half_up(value) == expected


def test_sign_keeps_zero():
    assert registry.sign(-3.0) == -1.0
    assert registry.sign(7.0) == 1.0
    assert registry.sign(0.0) == 0.0
    assert math.isnan(registry.sign(float("nan")))


def test_remainder_and_clamp():
    assert registry.remainder(5.0, 3.0) == pytest.approx(-1.0)
    assert registry.clamp(5.0, 0.0, 1.0) == 1.0
    assert registry.clamp(-5.0, 0.0, 1.0) == 0.0


def test_fround_is_single_precision():
    assert registry.fround(0.1) == pytest.approx(0.1, rel=1e-7)
    assert registry.fround(0.1) != 0.1


def test_arity_checks():
    assert registry.SAFE_FUNCTIONS["atan2"].accepts(2)
    assert not registry.SAFE_FUNCTIONS["atan2"].accepts(1)
    assert registry.SAFE_FUNCTIONS["max"].accepts(7)
    assert not registry.SAFE_FUNCTIONS["max"].accepts(0)
    assert registry.SAFE_FUNCTIONS["clamp"].arity_label() == "3"
    assert registry.SAFE_FUNCTIONS["hypot"].arity_label() == "at least 1"


def test_name_lookups():
    assert registry.is_function("sin")
    assert not registry.is_function("PI")
    assert registry.is_constant("PI")
    assert registry.is_known_name("gamma")
    assert not registry.is_known_name("eval")


@pytest.mark.parametrize("func, args", [
    (registry.minimum, (1.0, math.nan)),
    (registry.minimum, (math.nan, 1.0)),
    (registry.maximum, (1.0, math.nan, 2.0)),
    (registry.maximum, (math.nan, 1.0)),
    (registry.clamp, (math.nan, 0.0, 1.0)),
    (registry.clamp, (0.5, math.nan, 1.0)),
])
def test_nan_propagates_regardless_of_position(func, args):
    assert math.isnan(func(*args))


def test_min_max_plain_values():
    assert registry.minimum(3.0) == 3.0
    assert registry.minimum(2.0, -1.0, 5.0) == -1.0
    assert registry.maximum(2.0, -1.0, 5.0) == 5.0
