# trigeval/core/validator.py

"""
Static checks on raw expression text: syntax, security, complexity and
dependency analysis.

Validation is lexical: apart from parenthesis balance and
nesting it does not run the grammar. A text can therefore validate and still
fail to compile; the façade handles that case.
"""

import logging
import re
from dataclasses import dataclass, field, asdict
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Pattern, Tuple

from . import registry
from .parser import IDENT, LPAREN, OPERATOR, tokenize

if TYPE_CHECKING:
    from .cache import CacheManager

logger = logging.getLogger(__name__)

DEFAULT_MAX_EXPRESSION_LENGTH = 2000
DEFAULT_MAX_NESTING_DEPTH = 20
DEFAULT_COMPLEXITY_WARNING = 100
DEFAULT_COMPLEXITY_CRITICAL = 500

EMPTY_EXPRESSION_ERROR = "Expression cannot be empty"
UNBALANCED_PARENTHESES_ERROR = "Unbalanced parentheses"
SYNTAX_WARNING = "Potentially invalid syntax detected"
HIGH_COMPLEXITY_WARNING = "High complexity expression may impact performance"
EXTREME_COMPLEXITY_WARNING = "Extremely complex expression may cause significant performance issues"

# Heuristic patterns; any match adds a single warning and never blocks evaluation.
_SUSPICIOUS_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r'\)\s*\('),            # adjacent groups without an operator
    re.compile(r'\d\s*[a-zA-Z]'),      # a digit directly touching a letter
    re.compile(r'[+\-*/^]{2,}'),       # consecutive operators
    re.compile(r'[+\-*/^]\s*$'),       # trailing operator
    re.compile(r'^\s*[*/^]'),          # leading multiplication/division/power
)

# Constructs that never belong in a formula. Any match is an error.
_FORBIDDEN_PATTERNS: Tuple[Tuple[Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), name) for pattern, name in (
        (r'\beval\s*\(', "eval function"),
        (r'\bexec\s*\(', "exec function"),
        (r'\bcompile\s*\(', "compile function"),
        (r'\bfunction\s*\(', "function declaration"),
        (r'\bdef\s+', "function declaration"),
        (r'\blambda\b', "lambda expression"),
        (r'=>', "arrow function"),
        (r'\bwhile\s*\(', "while loop"),
        (r'\bfor\s*\(', "for loop"),
        (r'\bdo\s*\{', "do-while loop"),
        (r'\bif\s*\(', "conditional statement"),
        (r'\bnew\s+', "constructor call"),
        (r'\bimport\s+', "import statement"),
        (r'__import__', "import statement"),
        (r'\bexport\s+', "export statement"),
        (r'\brequire\s*\(', "require call"),
        (r'__\w*__', "dunder attribute access"),
        (r'\b(?:globals|locals|vars|getattr|setattr|open)\s*\(', "host builtin access"),
        (r'\b(?:process|global|globalThis|window|document|os|sys)\.', "host object access"),
        (r'\bconsole\.', "console object access"),
        (r'setTimeout|setInterval', "timer function"),
        (r'XMLHttpRequest|fetch|urllib|requests\.', "network request"),
    )
)


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating one expression text.

    Immutable: the same instance is served from the cache to every caller.
    """
    is_valid: bool = True
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    complexity: int = 0
    functions_used: Tuple[str, ...] = ()
    variables_used: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {key: list(value) if isinstance(value, tuple) else value
                for key, value in asdict(self).items()}


@dataclass
class _Findings:
    """Mutable collector filled by the individual checks."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    complexity: int = 0
    functions_used: List[str] = field(default_factory=list)
    variables_used: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def freeze(self) -> ValidationResult:
        return ValidationResult(
            is_valid=not self.errors,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            complexity=self.complexity,
            functions_used=tuple(self.functions_used),
            variables_used=tuple(self.variables_used),
        )


def has_balanced_parentheses(expression: str) -> bool:
    """Running depth counter; fails as soon as it goes negative."""
    depth = 0
    for char in expression:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def nesting_depth(expression: str) -> int:
    """Maximum number of concurrently open parentheses."""
    max_depth = 0
    depth = 0
    for char in expression:
        if char == "(":
            depth += 1
            max_depth = max(max_depth, depth)
        elif char == ")":
            depth -= 1
    return max_depth


class ExpressionValidator:
    """
    Produces a ValidationResult for raw expression text.

    Results are memoized by raw text in the given cache manager (the
    evaluator passes its own). Without one every call recomputes.
    Empty input is rejected before the cache is touched.
    """

    def __init__(
        self,
        max_expression_length: int = DEFAULT_MAX_EXPRESSION_LENGTH,
        max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH,
        complexity_warning: int = DEFAULT_COMPLEXITY_WARNING,
        complexity_critical: int = DEFAULT_COMPLEXITY_CRITICAL,
        cache: Optional["CacheManager"] = None,
    ):
        self.max_expression_length = max_expression_length
        self.max_nesting_depth = max_nesting_depth
        self.complexity_warning = complexity_warning
        self.complexity_critical = complexity_critical
        self.cache = cache

    def validate(self, expression: Optional[str]) -> ValidationResult:
        """Validates expression text; cached results are returned as-is."""
        if isinstance(expression, str) and self.cache is not None:
            cached = self.cache.get_validation(expression)
            if cached is not None:
                return cached

        findings = _Findings()

        if expression is None or not isinstance(expression, str) or not expression.strip():
            if expression is not None and not isinstance(expression, str):
                findings.add_error(f"Expression must be a string, got {type(expression).__name__}")
            else:
                findings.add_error(EMPTY_EXPRESSION_ERROR)
            return findings.freeze()

        if len(expression) > self.max_expression_length:
            findings.add_error(f"Expression too long (max {self.max_expression_length} characters)")

        self._check_syntax(expression, findings)
        self._check_security(expression, findings)
        self._analyze(expression, findings)
        result = findings.freeze()

        if self.cache is not None:
            self.cache.put_validation(expression, result)
        logger.debug(f"Validated expression {expression!r}: valid={result.is_valid}, "
                     f"complexity={result.complexity}")
        return result

    # --- Checks ---

    def _check_syntax(self, expression: str, findings: _Findings) -> None:
        if not has_balanced_parentheses(expression):
            findings.add_error(UNBALANCED_PARENTHESES_ERROR)

        if nesting_depth(expression) > self.max_nesting_depth:
            findings.add_error(f"Nesting too deep (max {self.max_nesting_depth} levels)")

        for pattern in _SUSPICIOUS_PATTERNS:
            if pattern.search(expression):
                findings.add_warning(SYNTAX_WARNING)
                break

    def _check_security(self, expression: str, findings: _Findings) -> None:
        for pattern, name in _FORBIDDEN_PATTERNS:
            if pattern.search(expression):
                findings.add_error(f"Forbidden pattern detected: {name}")

    def _analyze(self, expression: str, findings: _Findings) -> None:
        """
        One lexer pass yields the call names, the free variables and the
        complexity counts. Every call-like identifier must be allow-listed.
        """
        tokens = tokenize(expression)
        functions: Dict[str, None] = {}
        identifiers: Dict[str, None] = {}
        score = len(expression) * 0.1

        for i, token in enumerate(tokens):
            if token.type == OPERATOR:
                score += len(token.value) # one per symbol, so "**" weighs 2
            elif token.type == LPAREN:
                score += 2
            elif token.type == IDENT:
                if token.value in registry.COMMON_FUNCTIONS:
                    score += 3
                elif token.value in registry.EXPENSIVE_FUNCTIONS:
                    score += 5
                is_call = i + 1 < len(tokens) and tokens[i + 1].type == LPAREN
                if is_call:
                    if not registry.is_function(token.value):
                        findings.add_error(f"Unknown or forbidden function: {token.value}")
                    functions.setdefault(token.value, None)
                else:
                    identifiers.setdefault(token.value, None)

        findings.complexity = int(registry.round_half_up(score))
        if findings.complexity > self.complexity_warning:
            findings.add_warning(HIGH_COMPLEXITY_WARNING)
        if findings.complexity > self.complexity_critical:
            findings.add_warning(EXTREME_COMPLEXITY_WARNING)

        findings.functions_used = list(functions)
        findings.variables_used = [
            name for name in identifiers
            if not registry.is_known_name(name) and name not in functions
        ]
