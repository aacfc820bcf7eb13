"""Validator engine.

Compiles author-supplied predicate strings into sandboxed single-argument
predicates and applies them to candidate values.

Predicates are evaluated with simpleeval, never with ``eval``: only
comparisons, arithmetic, boolean combinators, literals, subscripts and a
small whitelist of functions are available, and the only name in scope is
the predicate's argument.  Accepted source forms::

    value >= 0 && value <= 2
    v => v.startswith("https://")
    (v) => { return len(v) > 0; }
    lambda v: v in ["a", "b"]

JavaScript-style ``&&``, ``||``, ``!``, ``===`` and ``!==`` plus the
literals ``true``, ``false``, ``null`` and ``undefined`` are translated
outside string literals.

Compilation and evaluation both fail closed: a predicate that cannot be
compiled, exceeds the step budget, or raises while running rejects the
value.  The step budget covers the size of the source, the size of its
syntax tree and the bit length of every integer the arithmetic produces.

Shipped in this module
----------------------
- PredicateCompileError — a predicate source that cannot be compiled
- BoundedEval           — simpleeval evaluator with capped integer arithmetic
- CompiledPredicate     — parsed predicate, callable with one argument
- PredicateCache        — thread-safe cache keyed by source text
- ValidationResult      — pass/fail plus user-facing message
- ValidatorEngine       — compile-once, evaluate-many front end
"""
from __future__ import annotations

import ast
import copy
import logging
import math
import operator
import re
import threading
from dataclasses import dataclass, field
from typing import Any

from simpleeval import (
    DEFAULT_OPERATORS,
    EvalWithCompoundTypes,
    NumberTooHigh,
    safe_mult,
    safe_power,
)

from agentsurface.config.defaults import DEFAULT_SETTINGS
from agentsurface.config.settings import SurfaceSettings
from agentsurface.schema.descriptor import FieldDescriptor
from agentsurface.schema.errors import AgentSurfaceError, ErrorSeverity
from agentsurface.schema.field import Validator

logger = logging.getLogger(__name__)

DEFAULT_ARGUMENT = "value"

SAFE_FUNCTIONS: dict[str, Any] = {
    "len": len,
    "abs": abs,
    "min": min,
    "max": max,
    "round": round,
    "lower": lambda s: s.lower() if isinstance(s, str) else s,
    "upper": lambda s: s.upper() if isinstance(s, str) else s,
    "int": int,
    "float": float,
    "str": str,
    "bool": bool,
}

_LITERALS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
    "True": True,
    "False": False,
    "None": None,
}

_ARROW = re.compile(
    r"^\s*(?:\(\s*(?P<paren>[A-Za-z_]\w*)\s*\)|(?P<bare>[A-Za-z_]\w*))\s*=>\s*(?P<body>.+)$",
    re.DOTALL,
)
_LAMBDA = re.compile(r"^\s*lambda\s+(?P<arg>[A-Za-z_]\w*)\s*:\s*(?P<body>.+)$", re.DOTALL)
_BLOCK = re.compile(r"^\{\s*return\s+(?P<expr>.+?)\s*;?\s*\}$", re.DOTALL)

# Longest tokens first so "!==" wins over "!=" and "!".
_JS_OPERATORS: tuple[tuple[str, str], ...] = (
    ("===", "=="),
    ("!==", "!="),
    ("&&", " and "),
    ("||", " or "),
    ("!=", "!="),
    ("!", " not "),
)


class PredicateCompileError(AgentSurfaceError):
    """Raised when a predicate source cannot be compiled into a predicate."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(
            f"Cannot compile validator predicate: {reason}",
            severity=ErrorSeverity.MEDIUM,
            context={"source": source},
        )
        self.source = source
        self.reason = reason


# ---------------------------------------------------------------------------
# Bounded evaluator
# ---------------------------------------------------------------------------


class BoundedEval(EvalWithCompoundTypes):
    """simpleeval evaluator whose integer results are capped at *max_int_bits*.

    simpleeval limits string repetition and the exponent of ``**`` but not the
    size of integer results, so a handful of nodes such as
    ``(4000000 ** 4000000) * 3`` can run for minutes.  ``*``, ``**`` and
    ``<<`` estimate the bit length of their result before computing it and
    raise :class:`simpleeval.NumberTooHigh` above the cap.
    """

    def __init__(
        self,
        max_int_bits: int,
        names: dict[str, Any] | None = None,
        functions: dict[str, Any] | None = None,
    ) -> None:
        self.max_int_bits = max_int_bits
        operators = dict(DEFAULT_OPERATORS)
        operators[ast.Pow] = self._power
        operators[ast.Mult] = self._mult
        operators[ast.LShift] = self._lshift
        super().__init__(operators=operators, functions=functions, names=names)

    def _check_bits(self, bits: float, operation: str) -> None:
        if bits > self.max_int_bits:
            raise NumberTooHigh(
                f"{operation} would produce about {int(bits)} bits; "
                f"the limit is {self.max_int_bits}"
            )

    def _power(self, base: Any, exponent: Any) -> Any:  # noqa: ANN401
        if _both_ints(base, exponent) and exponent > 0 and abs(base) > 1:
            self._check_bits(exponent * math.log2(abs(base)), "power")
        return safe_power(base, exponent)

    def _mult(self, left: Any, right: Any) -> Any:  # noqa: ANN401
        if _both_ints(left, right):
            self._check_bits(left.bit_length() + right.bit_length(), "multiplication")
        return safe_mult(left, right)

    def _lshift(self, left: Any, right: Any) -> Any:  # noqa: ANN401
        if _both_ints(left, right) and right > 0:
            self._check_bits(left.bit_length() + right, "left shift")
        return operator.lshift(left, right)


def _both_ints(left: object, right: object) -> bool:
    return isinstance(left, int) and isinstance(right, int)


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompiledPredicate:
    """A parsed predicate.

    Attributes
    ----------
    source:
        The original predicate text (the cache key).
    argument:
        Name the candidate value is bound to.
    expression:
        Python-syntax expression actually evaluated.
    tree:
        Parsed expression node handed to simpleeval.
    max_int_bits:
        Largest integer result, in bits, the evaluation may produce.
    """

    source: str
    argument: str
    expression: str
    tree: ast.Expr = field(repr=False, compare=False)
    max_int_bits: int = field(default=DEFAULT_SETTINGS.max_predicate_int_bits, compare=False)

    def __call__(self, value: Any) -> bool:  # noqa: ANN401
        """Evaluate against *value*.  Exceptions propagate to the caller."""
        names = dict(_LITERALS)
        names[self.argument] = copy.deepcopy(value)
        evaluator = BoundedEval(self.max_int_bits, names=names, functions=SAFE_FUNCTIONS)
        return bool(evaluator.eval(self.expression, previously_parsed=self.tree))


def translate_operators(source: str) -> str:
    """Rewrite JavaScript boolean operators outside string literals."""
    out: list[str] = []
    quote: str | None = None
    index = 0
    while index < len(source):
        char = source[index]
        if quote is not None:
            out.append(char)
            if char == "\\" and index + 1 < len(source):
                out.append(source[index + 1])
                index += 2
                continue
            if char == quote:
                quote = None
            index += 1
            continue
        if char in "'\"":
            quote = char
            out.append(char)
            index += 1
            continue
        for token, replacement in _JS_OPERATORS:
            if source.startswith(token, index):
                out.append(replacement)
                index += len(token)
                break
        else:
            out.append(char)
            index += 1
    return "".join(out)


def split_predicate(source: str) -> tuple[str, str]:
    """Split a predicate source into ``(argument, body)``."""
    match = _ARROW.match(source)
    if match is not None:
        argument = match.group("paren") or match.group("bare")
        body = match.group("body").strip()
        block = _BLOCK.match(body)
        if block is not None:
            body = block.group("expr")
        return argument, body.rstrip(";").strip()
    match = _LAMBDA.match(source)
    if match is not None:
        return match.group("arg"), match.group("body").strip()
    return DEFAULT_ARGUMENT, source.strip().rstrip(";").strip()


def compile_predicate(
    source: str,
    settings: SurfaceSettings = DEFAULT_SETTINGS,
) -> CompiledPredicate:
    """Compile *source* into a :class:`CompiledPredicate`.

    Raises
    ------
    PredicateCompileError
        If the source is empty, too long, not a single expression, or
        larger than the step budget allows.
    """
    if not isinstance(source, str) or not source.strip():
        raise PredicateCompileError(str(source), "predicate source is empty")
    if len(source) > settings.max_predicate_length:
        raise PredicateCompileError(
            source,
            f"predicate is longer than {settings.max_predicate_length} characters",
        )

    argument, body = split_predicate(source)
    if argument in _LITERALS:
        raise PredicateCompileError(source, f"{argument!r} cannot be used as the argument name")
    expression = translate_operators(body).strip()

    try:
        # Parenthesised so that line breaks inside the expression are allowed.
        module = ast.parse(f"(\n{expression}\n)")
    except SyntaxError as exc:
        raise PredicateCompileError(source, f"syntax error: {exc.msg}") from exc
    if len(module.body) != 1 or not isinstance(module.body[0], ast.Expr):
        raise PredicateCompileError(source, "predicate must be a single expression")

    node_count = sum(1 for _ in ast.walk(module.body[0]))
    if node_count > settings.max_predicate_nodes:
        raise PredicateCompileError(
            source,
            f"predicate has {node_count} syntax nodes; the limit is {settings.max_predicate_nodes}",
        )

    return CompiledPredicate(
        source=source,
        argument=argument,
        expression=expression,
        tree=module.body[0],
        max_int_bits=settings.max_predicate_int_bits,
    )


class PredicateCache:
    """Thread-safe cache of compilation outcomes keyed by predicate source.

    Compilation is a pure function of the source text, so entries never need
    invalidating; repopulating after eviction yields the same result.  Failed
    compilations are cached too.
    """

    def __init__(self, maxsize: int = 1024) -> None:
        self._maxsize = maxsize
        self._entries: dict[str, CompiledPredicate | PredicateCompileError] = {}
        self._lock = threading.Lock()

    def get(self, source: str) -> CompiledPredicate | PredicateCompileError | None:
        return self._entries.get(source)

    def put(self, source: str, outcome: CompiledPredicate | PredicateCompileError) -> None:
        with self._lock:
            if source not in self._entries and len(self._entries) >= self._maxsize:
                self._entries.pop(next(iter(self._entries)))
            self._entries[source] = outcome

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, source: object) -> bool:
        return source in self._entries


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one candidate value.

    Attributes
    ----------
    passed:
        ``True`` when the value was accepted.
    message:
        User-facing failure message; ``None`` on success.
    field_name:
        The field validated, when known.
    """

    passed: bool
    message: str | None = None
    field_name: str | None = None

    def __bool__(self) -> bool:
        return self.passed

    def to_dict(self) -> dict[str, object]:
        return {"field": self.field_name, "passed": self.passed, "message": self.message}


def default_message(label: str) -> str:
    return f"Invalid value for {label}"


class ValidatorEngine:
    """Compile-once, evaluate-many validator front end.

    Safe to share between threads: the only shared state is the predicate
    cache.

    Examples
    --------
    >>> engine = ValidatorEngine()
    >>> engine.check(Validator(predicate_source="value >= 0 && value <= 2"), 3).passed
    False
    """

    def __init__(self, settings: SurfaceSettings | None = None) -> None:
        self._settings = settings or DEFAULT_SETTINGS
        self._cache = PredicateCache(self._settings.predicate_cache_size)

    @property
    def settings(self) -> SurfaceSettings:
        return self._settings

    @property
    def cache(self) -> PredicateCache:
        return self._cache

    def compile(self, source: str) -> CompiledPredicate:
        """Return the compiled predicate for *source*, compiling at most once.

        Raises
        ------
        PredicateCompileError
            If *source* cannot be compiled (the failure is cached as well).
        """
        outcome = self._cache.get(source)
        if outcome is None:
            try:
                outcome = compile_predicate(source, self._settings)
            except PredicateCompileError as exc:
                outcome = exc
            self._cache.put(source, outcome)
        if isinstance(outcome, PredicateCompileError):
            raise outcome
        return outcome

    def check(
        self,
        validator: Validator,
        value: Any,  # noqa: ANN401
        label: str = "this field",
        field_name: str | None = None,
    ) -> ValidationResult:
        """Run *validator* against *value*.

        Never raises: compile failures, evaluation faults and falsy results
        all produce a failed :class:`ValidationResult`.
        """
        failure = ValidationResult(
            passed=False,
            message=validator.message or default_message(label),
            field_name=field_name,
        )
        try:
            predicate = self.compile(validator.predicate_source)
        except PredicateCompileError as exc:
            logger.warning("Validator for %s rejected value: %s", label, exc)
            return failure

        try:
            passed = predicate(value)
        except Exception as exc:  # noqa: BLE001
            logger.debug(
                "Validator %r raised %s for %s; treating as failure.",
                validator.predicate_source,
                type(exc).__name__,
                label,
            )
            return failure

        if not passed:
            return failure
        return ValidationResult(passed=True, field_name=field_name)

    def validate_field(self, descriptor: FieldDescriptor, value: Any) -> ValidationResult:  # noqa: ANN401
        """Validate *value* against the validator attached to *descriptor*."""
        if descriptor.validator is None:
            return ValidationResult(passed=True, field_name=descriptor.name)
        return self.check(descriptor.validator, value, descriptor.label, descriptor.name)
