"""Validator engine package for agentsurface-sdk."""
from __future__ import annotations

from agentsurface.validation.engine import (
    CompiledPredicate,
    PredicateCache,
    PredicateCompileError,
    ValidationResult,
    ValidatorEngine,
    compile_predicate,
)

__all__ = [
    "CompiledPredicate",
    "PredicateCache",
    "PredicateCompileError",
    "ValidationResult",
    "ValidatorEngine",
    "compile_predicate",
]
