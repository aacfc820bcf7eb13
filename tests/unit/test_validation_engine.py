"""Unit tests for agentsurface.validation.engine."""
from __future__ import annotations

import threading
import time

import pytest

from agentsurface.config.settings import SurfaceSettings
from agentsurface.pipeline import build_descriptors
from agentsurface.schema.field import FieldSchema, Validator, ValueType
from agentsurface.validation.engine import (
    PredicateCache,
    PredicateCompileError,
    ValidatorEngine,
    compile_predicate,
    split_predicate,
    translate_operators,
)


def _check(source: str, value: object, message: str | None = None) -> bool:
    return ValidatorEngine().check(Validator(predicate_source=source, message=message), value).passed


# ---------------------------------------------------------------------------
# Source handling
# ---------------------------------------------------------------------------


class TestTranslateOperators:
    def test_boolean_operators(self) -> None:
        assert translate_operators("a && b || !c") == "a  and  b  or   not c"

    def test_strict_equality(self) -> None:
        assert translate_operators("a === 1 && b !== 2") == "a == 1  and  b != 2"

    def test_not_equal_untouched(self) -> None:
        assert translate_operators("a != 1") == "a != 1"

    def test_string_literals_untouched(self) -> None:
        assert translate_operators("value == '&&' || value == \"!\"") == (
            "value == '&&'  or  value == \"!\""
        )


class TestSplitPredicate:
    @pytest.mark.parametrize(
        ("source", "argument", "body"),
        [
            ("value > 1", "value", "value > 1"),
            ("v => v > 1", "v", "v > 1"),
            ("(x) => x > 1;", "x", "x > 1"),
            ("(x) => { return x > 1; }", "x", "x > 1"),
            ("lambda n: n > 1", "n", "n > 1"),
        ],
    )
    def test_forms(self, source: str, argument: str, body: str) -> None:
        assert split_predicate(source) == (argument, body)


class TestCompilePredicate:
    def test_compiles_expression(self) -> None:
        predicate = compile_predicate("value >= 0 && value <= 2")
        assert predicate.argument == "value"
        assert predicate(1) is True
        assert predicate(3) is False

    def test_multiline_expression(self) -> None:
        predicate = compile_predicate("value > 0 &&\n value < 10")
        assert predicate(5) is True

    @pytest.mark.parametrize("source", ["", "   ", "value >", "x = 1", "a; b", "import os"])
    def test_invalid_sources(self, source: str) -> None:
        with pytest.raises(PredicateCompileError):
            compile_predicate(source)

    def test_length_budget(self) -> None:
        settings = SurfaceSettings(max_predicate_length=10)
        with pytest.raises(PredicateCompileError, match="longer than 10"):
            compile_predicate("value > 1000000", settings)

    def test_node_budget(self) -> None:
        settings = SurfaceSettings(max_predicate_nodes=5)
        with pytest.raises(PredicateCompileError, match="syntax nodes"):
            compile_predicate("value > 1 and value < 2 and value != 3", settings)

    def test_literal_argument_name_rejected(self) -> None:
        with pytest.raises(PredicateCompileError):
            compile_predicate("true => true")


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


class TestEvaluation:
    def test_range(self) -> None:
        assert _check("value >= 0 && value <= 2", 1.5) is True
        assert _check("value >= 0 && value <= 2", 3) is False

    def test_arrow_with_functions(self) -> None:
        assert _check("v => len(v) > 0 && v.startswith('https://')", "https://x") is True
        assert _check("v => len(v) > 0 && v.startswith('https://')", "http://x") is False

    def test_js_literals(self) -> None:
        assert _check("value !== null", "x") is True
        assert _check("value === true", True) is True

    def test_compound_values(self) -> None:
        assert _check("value['url'] != '' && len(value['tools']) <= 3", {"url": "u", "tools": []})
        assert _check("'a' in value", ["a", "b"]) is True

    def test_negation(self) -> None:
        assert _check("!(value < 0)", 1) is True


class TestFailsClosed:
    @pytest.mark.parametrize(
        ("source", "value"),
        [
            ("value > 0", "text"),
            ("value / 0 > 1", 5),
            ("value['missing'] == 1", {}),
            ("other > 1", 5),
            ("open('/etc/passwd')", 1),
            ("value.__class__", 1),
            ("__import__('os')", 1),
            ("value >", 1),
            ("9 ** 9 ** 9 > value", 1),
            ("value => (4000000 ** 4000000) * (3999999 ** 4000000) > value", 1),
            ("(value << 100000000) > 0", 1),
            ("value * 10 ** 2000 * 10 ** 2000 > 0", 7),
        ],
    )
    def test_fault_is_failure(self, source: str, value: object) -> None:
        assert _check(source, value) is False

    def test_large_integer_arithmetic_fails_fast(self) -> None:
        engine = ValidatorEngine()
        started = time.perf_counter()
        result = engine.check(
            Validator(
                predicate_source="value => (4000000 ** 4000000) * (3999999 ** 4000000)"
                " * (3999998 ** 4000000) * (3999997 ** 4000000) > value"
            ),
            1,
        )
        assert result.passed is False
        assert time.perf_counter() - started < 1.0

    def test_integer_limit_is_configurable(self) -> None:
        engine = ValidatorEngine(SurfaceSettings(max_predicate_int_bits=32))
        assert engine.check(Validator(predicate_source="value < 2 ** 20"), 5).passed
        assert not engine.check(Validator(predicate_source="value < 2 ** 40"), 5).passed

    def test_moderate_integers_still_evaluate(self) -> None:
        assert _check("value < 2 ** 64 && value * 1000 << 3 > 0", 12345) is True

    def test_no_ambient_names(self) -> None:
        assert _check("len(value) > 0 and ValidatorEngine", "x") is False

    def test_value_not_mutated(self) -> None:
        value = {"tools": ["a"]}
        _check("value['tools'].append('b') or true", value)
        assert value == {"tools": ["a"]}


class TestMessages:
    def test_custom_message(self) -> None:
        result = ValidatorEngine().check(
            Validator(predicate_source="value <= 2", message="Temperature must be at most 2"),
            3,
            label="Temperature",
        )
        assert result.passed is False
        assert result.message == "Temperature must be at most 2"
        assert not result

    def test_generic_message(self) -> None:
        result = ValidatorEngine().check(Validator(predicate_source="value <= 2"), 3, label="Temperature")
        assert result.message == "Invalid value for Temperature"

    def test_success_has_no_message(self) -> None:
        result = ValidatorEngine().check(Validator(predicate_source="value <= 2"), 1)
        assert result.passed is True
        assert result.message is None

    def test_validate_field_uses_label(self) -> None:
        descriptor = build_descriptors(
            [
                FieldSchema(
                    "max_tokens",
                    ValueType.NUMBER,
                    1,
                    {"uiConfig": {"validator": "value > 0"}},
                )
            ]
        )[0]
        result = ValidatorEngine().validate_field(descriptor, -1)
        assert result.message == "Invalid value for Max tokens"
        assert result.field_name == "max_tokens"
        assert result.to_dict()["passed"] is False

    def test_validate_field_without_validator_passes(self) -> None:
        descriptor = build_descriptors([FieldSchema("x")])[0]
        assert ValidatorEngine().validate_field(descriptor, "anything").passed


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class TestPredicateCache:
    def test_compiles_once_per_source(self) -> None:
        engine = ValidatorEngine()
        first = engine.compile("value > 1")
        second = engine.compile("value > 1")
        assert first is second
        assert len(engine.cache) == 1

    def test_compile_failure_cached(self) -> None:
        engine = ValidatorEngine()
        with pytest.raises(PredicateCompileError):
            engine.compile("value >")
        assert "value >" in engine.cache
        with pytest.raises(PredicateCompileError):
            engine.compile("value >")

    def test_eviction_respects_maxsize(self) -> None:
        cache = PredicateCache(maxsize=2)
        for source in ("value > 1", "value > 2", "value > 3"):
            cache.put(source, compile_predicate(source))
        assert len(cache) == 2
        assert "value > 1" not in cache
        assert "value > 3" in cache

    def test_clear(self) -> None:
        engine = ValidatorEngine()
        engine.compile("value > 1")
        engine.cache.clear()
        assert len(engine.cache) == 0

    def test_concurrent_use(self) -> None:
        engine = ValidatorEngine()
        validator = Validator(predicate_source="value >= 0 && value <= 2")
        results: list[bool] = []
        lock = threading.Lock()

        def worker(value: float) -> None:
            passed = engine.check(validator, value).passed
            with lock:
                results.append(passed)

        threads = [threading.Thread(target=worker, args=(i % 4,)) for i in range(40)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 30
        assert results.count(False) == 10
        assert len(engine.cache) == 1
