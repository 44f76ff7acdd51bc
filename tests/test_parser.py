# tests/test_parser.py

"""
Tests for the tokenizer and parser in trigeval.core.parser.
"""

import pytest

from trigeval.core.exceptions import ParseError
from trigeval.core.parser import (ERROR, IDENT, NUMBER, OPERATOR, BinaryOp, Call,
                                  Name, Number, UnaryOp, iter_nodes, parse, tokenize)

# --- Tokenizer ---

def test_tokenize_basic_expression():
    tokens = tokenize("200 * sin(3 * t + time)")
    assert [tok.type for tok in tokens] == [
        NUMBER, OPERATOR, IDENT, "LPAREN", NUMBER, OPERATOR, IDENT, OPERATOR, IDENT, "RPAREN"
    ]
    assert tokens[2].value == "sin"
    assert tokens[2].pos == 6


@pytest.mark.parametrize("text", ["1e-3", "2.5E+10", ".5", "3.", "42"])
def test_tokenize_numbers(text):
    tokens = tokenize(text)
    assert len(tokens) == 1
    assert tokens[0].type == NUMBER
    assert tokens[0].value == text


def test_tokenize_double_star_is_one_operator():
    tokens = tokenize("t**2")
    assert [tok.value for tok in tokens] == ["t", "**", "2"]


def test_tokenize_never_raises_on_foreign_characters():
    """Characters outside the grammar become ERROR tokens."""
    tokens = tokenize("t $ {x}; y")
    errors = [tok.value for tok in tokens if tok.type == ERROR]
    assert errors == ["$", "{", "}", ";"]
    assert tokens[-1].value == "y"

# --- Parser ---

def test_parse_precedence():
    tree = parse("1 + 2 * 3")
    assert isinstance(tree, BinaryOp) and tree.op == "+"
    assert isinstance(tree.left, Number) and tree.left.value == 1.0
    assert isinstance(tree.right, BinaryOp) and tree.right.op == "*"


def test_parse_power_is_right_associative():
    tree = parse("2 ^ 3 ** 2")
    assert tree.op == "^"
    assert isinstance(tree.left, Number)
    assert isinstance(tree.right, BinaryOp) and tree.right.op == "^"


def test_unary_minus_binds_looser_than_power():
    tree = parse("-2 ^ 2")
    assert isinstance(tree, UnaryOp) and tree.op == "-"
    assert isinstance(tree.operand, BinaryOp)


def test_power_accepts_signed_exponent():
    tree = parse("2 ^ -1")
    assert isinstance(tree.right, UnaryOp)


def test_parse_call_with_arguments():
    tree = parse("atan2(sin(t), 1)")
    assert isinstance(tree, Call) and tree.name == "atan2"
    assert len(tree.args) == 2
    assert isinstance(tree.args[0], Call)


def test_parse_call_without_arguments():
    tree = parse("min()")
    assert isinstance(tree, Call) and tree.args == []


def test_parse_left_associative_chain():
    tree = parse("10 - 4 - 3")
    assert tree.op == "-"
    assert isinstance(tree.left, BinaryOp)
    assert isinstance(tree.right, Number) and tree.right.value == 3.0


@pytest.mark.parametrize("text", [
    "",
    "1 +",
    "(1",
    "1)",
    "1 2",
    "2t",
    "sin(1,)",
    "t $ 2",
    "* t",
])
def test_parse_errors(text):
    with pytest.raises(ParseError):
        parse(text)


def test_parse_error_reports_position():
    with pytest.raises(ParseError) as excinfo:
        parse("1 2")
    assert excinfo.value.position == 2
    assert "position 2" in str(excinfo.value)


def test_iter_nodes_visits_everything():
    tree = parse("a * sin(t) + -b")
    names = [node.name for node in iter_nodes(tree) if isinstance(node, Name)]
    assert names == ["a", "t", "b"]
    assert sum(1 for _ in iter_nodes(tree)) == 7
