# trigeval/core/parser.py

"""
Tokenizer and recursive-descent parser for the restricted formula grammar.

Grammar (lowest precedence first)::

    expression     := additive
    additive       := multiplicative (('+' | '-') multiplicative)*
    multiplicative := unary (('*' | '/' | '%') unary)*
    unary          := ('+' | '-')* power
    power          := primary (('^' | '**') unary)?
    primary        := NUMBER | IDENT | IDENT '(' arguments? ')' | '(' expression ')'
    arguments      := expression (',' expression)*

Both ``^`` and ``**`` mean exponentiation and associate to the right, so
``2 ^ 3 ^ 2`` is ``2 ^ 9``. As in Python, ``-2 ^ 2`` is ``-(2 ^ 2)``.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .exceptions import ParseError

# --- Tokens ---

NUMBER = "NUMBER"
IDENT = "IDENT"
OPERATOR = "OPERATOR"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
COMMA = "COMMA"
ERROR = "ERROR"

_TOKEN_SPEC: List[Tuple[str, str]] = [
    (NUMBER, r'(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?'),
    (IDENT, r'[A-Za-z_][A-Za-z0-9_]*'),
    (OPERATOR, r'\*\*|[-+*/%^]'),
    (LPAREN, r'\('),
    (RPAREN, r'\)'),
    (COMMA, r','),
    ("WHITESPACE", r'\s+'),
    (ERROR, r'(?s:.)'),
]
_TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC))


@dataclass(frozen=True)
class Token:
    """Token from the lexer."""
    type: str
    value: str
    pos: int = 0


def tokenize(text: str) -> List[Token]:
    """
    Splits text into tokens.

    Never raises: characters outside the grammar come back as ERROR tokens so
    that callers doing lexical analysis (the validator) can still inspect the
    rest of the text. The parser rejects ERROR tokens.
    """
    tokens: List[Token] = []
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        if kind == "WHITESPACE":
            continue
        tokens.append(Token(kind, match.group(), match.start()))
    return tokens

# --- Syntax tree ---

@dataclass
class Node:
    pos: int = field(default=0, kw_only=True)


@dataclass
class Number(Node):
    value: float


@dataclass
class Name(Node):
    name: str


@dataclass
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass
class Call(Node):
    name: str
    args: List[Node]


def iter_nodes(root: Node) -> Iterator[Node]:
    """Depth-first walk over a tree, without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, BinaryOp):
            stack.append(node.right)
            stack.append(node.left)
        elif isinstance(node, UnaryOp):
            stack.append(node.operand)
        elif isinstance(node, Call):
            stack.extend(reversed(node.args))

# --- Parser ---

ADDITIVE_OPS = ("+", "-")
MULTIPLICATIVE_OPS = ("*", "/", "%")
POWER_OPS = ("^", "**")


class Parser:
    """Parses a token list into a syntax tree."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def current(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _at_operator(self, ops: Tuple[str, ...]) -> bool:
        token = self.current()
        return token is not None and token.type == OPERATOR and token.value in ops

    def _end_pos(self) -> int:
        if not self.tokens:
            return 0
        last = self.tokens[-1]
        return last.pos + len(last.value)

    def expect(self, token_type: str, description: str) -> Token:
        token = self.current()
        if token is None:
            raise ParseError(f"Expected {description}, got end of expression", self._end_pos())
        if token.type != token_type:
            raise ParseError(f"Expected {description}, got '{token.value}'", token.pos)
        return self.advance()

    def parse(self) -> Node:
        """Parses the whole token list; trailing tokens are an error."""
        if not self.tokens:
            raise ParseError("Empty expression", 0)
        try:
            node = self.parse_additive()
        except RecursionError:
            raise ParseError("Expression nested too deeply to parse") from None
        token = self.current()
        if token is not None:
            raise ParseError(f"Unexpected '{token.value}'", token.pos)
        return node

    def parse_additive(self) -> Node:
        left = self.parse_multiplicative()
        while self._at_operator(ADDITIVE_OPS):
            op = self.advance()
            right = self.parse_multiplicative()
            left = BinaryOp(op.value, left, right, pos=op.pos)
        return left

    def parse_multiplicative(self) -> Node:
        left = self.parse_unary()
        while self._at_operator(MULTIPLICATIVE_OPS):
            op = self.advance()
            right = self.parse_unary()
            left = BinaryOp(op.value, left, right, pos=op.pos)
        return left

    def parse_unary(self) -> Node:
        signs: List[Token] = []
        while self._at_operator(ADDITIVE_OPS):
            signs.append(self.advance())
        node = self.parse_power()
        for sign in reversed(signs):
            node = UnaryOp(sign.value, node, pos=sign.pos)
        return node

    def parse_power(self) -> Node:
        base = self.parse_primary()
        if self._at_operator(POWER_OPS):
            op = self.advance()
            exponent = self.parse_unary()
            return BinaryOp("^", base, exponent, pos=op.pos)
        return base

    def parse_primary(self) -> Node:
        token = self.current()
        if token is None:
            raise ParseError("Unexpected end of expression", self._end_pos())

        if token.type == NUMBER:
            self.advance()
            return Number(float(token.value), pos=token.pos)

        if token.type == IDENT:
            self.advance()
            nxt = self.current()
            if nxt is not None and nxt.type == LPAREN:
                return self.parse_call(token)
            return Name(token.value, pos=token.pos)

        if token.type == LPAREN:
            self.advance()
            node = self.parse_additive()
            self.expect(RPAREN, "')'")
            return node

        if token.type == ERROR:
            raise ParseError(f"Unexpected character '{token.value}'", token.pos)
        raise ParseError(f"Unexpected '{token.value}'", token.pos)

    def parse_call(self, name: Token) -> Call:
        self.expect(LPAREN, "'('")
        args: List[Node] = []
        token = self.current()
        if token is not None and token.type == RPAREN:
            self.advance()
            return Call(name.value, args, pos=name.pos)
        while True:
            args.append(self.parse_additive())
            token = self.current()
            if token is not None and token.type == COMMA:
                self.advance()
                continue
            self.expect(RPAREN, "',' or ')'")
            return Call(name.value, args, pos=name.pos)


def parse(text: str) -> Node:
    """Tokenizes and parses text into a syntax tree."""
    return Parser(tokenize(text)).parse()
