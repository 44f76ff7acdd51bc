# trigeval/core/compiler.py

"""
Turns a validated expression into a reusable callable.

The expression is parsed with the restricted grammar and the tree is
compiled into nested closures. Allow-listed names are bound to trusted
callables and constants at compile time; every other identifier becomes a
free variable read from the evaluation context on each call. No source text
is generated or evaluated.
"""

import logging
import math
import operator
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from . import registry
from .exceptions import ExpressionCompileError, ParseError
from .executor import coerce_result
from .parser import BinaryOp, Call, Name, Node, Number, UnaryOp, iter_nodes, parse

logger = logging.getLogger(__name__)

Context = Mapping[str, Any]
Evaluator = Callable[[Context], float]

_BINARY_OPERATORS: Dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "%": math.fmod,   # sign follows the dividend
    "^": math.pow,    # domain errors raise instead of going complex
}

_CHAIN_LEVELS = (frozenset({"+", "-"}), frozenset({"*", "/", "%"}))

# Faults the compiled callable absorbs, returning 0
RUNTIME_FAULTS = (ArithmeticError, ValueError, TypeError, KeyError, RecursionError)


class CompiledExpression:
    """
    Callable ``context -> float`` built from one expression text.

    ``t`` and ``time`` default to 0 when missing from the context; any other
    free variable must be present. Non-finite results and runtime faults
    (division by zero, domain errors, missing variables) yield 0.
    """

    __slots__ = ("source", "tree", "variables", "functions", "_fn")

    def __init__(self, source: str, tree: Node, fn: Evaluator,
                 variables: Tuple[str, ...], functions: Tuple[str, ...]):
        self.source = source
        self.tree = tree
        self.variables = variables
        self.functions = functions
        self._fn = fn

    def __call__(self, context: Optional[Context] = None) -> float:
        try:
            result = self._fn(context if context is not None else {})
        except RUNTIME_FAULTS as e:
            logger.debug(f"Runtime fault in {self.source!r}: {type(e).__name__}: {e}")
            return 0.0
        return coerce_result(result)

    def __repr__(self) -> str:
        return f"<CompiledExpression {self.source!r} variables={list(self.variables)}>"


class ExpressionCompiler:
    """Parses expression text and builds the closure tree."""

    def compile(self, expression: str) -> CompiledExpression:
        """
        Compiles expression text.

        Raises:
            ExpressionCompileError: On a grammar error, a call to a name that is
                not an allow-listed function, or a wrong number of arguments.
        """
        if not isinstance(expression, str):
            raise ExpressionCompileError(f"Expression must be a string, got {type(expression).__name__}")
        try:
            tree = parse(expression)
            fn = self._compile_node(tree)
        except ParseError as e:
            raise ExpressionCompileError(f"Failed to compile expression: {e}") from e
        except RecursionError:
            raise ExpressionCompileError("Failed to compile expression: nested too deeply") from None

        variables: Dict[str, None] = {}
        functions: Dict[str, None] = {}
        for node in iter_nodes(tree):
            if isinstance(node, Name) and not registry.is_constant(node.name):
                variables.setdefault(node.name, None)
            elif isinstance(node, Call):
                functions.setdefault(node.name, None)

        compiled = CompiledExpression(expression, tree, fn, tuple(variables), tuple(functions))
        logger.debug(f"Compiled {compiled!r}")
        return compiled

    # --- Node compilation ---

    def _compile_node(self, node: Node) -> Evaluator:
        if isinstance(node, Number):
            return _constant(node.value)
        if isinstance(node, Name):
            return self._compile_name(node)
        if isinstance(node, UnaryOp):
            return self._compile_unary(node)
        if isinstance(node, BinaryOp):
            return self._compile_binary(node)
        if isinstance(node, Call):
            return self._compile_call(node)
        raise ExpressionCompileError(f"Unsupported node: {type(node).__name__}")

    def _compile_name(self, node: Name) -> Evaluator:
        name = node.name
        if registry.is_constant(name):
            return _constant(registry.SAFE_CONSTANTS[name])
        if registry.is_function(name):
            raise ExpressionCompileError(f"Function '{name}' used without arguments")
        if name in registry.REQUIRED_VARIABLES:
            return lambda ctx: ctx.get(name, 0)
        return lambda ctx: ctx[name]

    def _compile_unary(self, node: UnaryOp) -> Evaluator:
        negate = False
        while isinstance(node, UnaryOp):
            if node.op == "-":
                negate = not negate
            node = node.operand
        operand = self._compile_node(node)
        if negate:
            return lambda ctx: -operand(ctx)
        return lambda ctx: +operand(ctx)

    def _compile_binary(self, node: BinaryOp) -> Evaluator:
        level = next((ops for ops in _CHAIN_LEVELS if node.op in ops), None)
        if level is None:
            left = self._compile_node(node.left)
            right = self._compile_node(node.right)
            op = _BINARY_OPERATORS[node.op]
            return lambda ctx: op(left(ctx), right(ctx))

        # Left-associative chains (a + b - c + ...) run as one loop
        rest: List[Tuple[Callable[[float, float], float], Evaluator]] = []
        while isinstance(node, BinaryOp) and node.op in level:
            rest.append((_BINARY_OPERATORS[node.op], self._compile_node(node.right)))
            node = node.left
        first = self._compile_node(node)
        rest.reverse()

        if len(rest) == 1:
            op, right = rest[0]
            return lambda ctx: op(first(ctx), right(ctx))

        def chain(ctx: Context) -> float:
            acc = first(ctx)
            for op, operand in rest:
                acc = op(acc, operand(ctx))
            return acc
        return chain

    def _compile_call(self, node: Call) -> Evaluator:
        spec = registry.SAFE_FUNCTIONS.get(node.name)
        if spec is None:
            raise ExpressionCompileError(f"Unknown or forbidden function: {node.name}")
        if not spec.accepts(len(node.args)):
            raise ExpressionCompileError(
                f"{node.name}() takes {spec.arity_label()} argument(s), got {len(node.args)}"
            )
        func = spec.func
        args = [self._compile_node(arg) for arg in node.args]
        if len(args) == 1:
            a = args[0]
            return lambda ctx: func(a(ctx))
        if len(args) == 2:
            a, b = args
            return lambda ctx: func(a(ctx), b(ctx))
        return lambda ctx: func(*[arg(ctx) for arg in args])


def _constant(value: float) -> Evaluator:
    return lambda ctx: value
