"""Unit tests for agentsurface.schema.field."""
from __future__ import annotations

import copy

import pytest
from pydantic import ValidationError

from agentsurface.schema.field import (
    MISSING,
    FieldSchema,
    UIConfig,
    UIType,
    Validator,
    ValueType,
)


# ---------------------------------------------------------------------------
# MISSING
# ---------------------------------------------------------------------------


class TestMissing:
    def test_is_falsy_singleton(self) -> None:
        assert not MISSING
        assert copy.deepcopy(MISSING) is MISSING
        assert repr(MISSING) == "MISSING"


# ---------------------------------------------------------------------------
# ValueType
# ---------------------------------------------------------------------------


class TestValueType:
    @pytest.mark.parametrize(
        ("value_type", "value"),
        [
            (ValueType.STRING, "hi"),
            (ValueType.NUMBER, 3),
            (ValueType.NUMBER, 1.5),
            (ValueType.BOOLEAN, False),
            (ValueType.OBJECT, {"a": 1}),
            (ValueType.ARRAY, [1, 2]),
            (ValueType.ARRAY, (1, 2)),
        ],
    )
    def test_accepts(self, value_type: ValueType, value: object) -> None:
        assert value_type.accepts(value)

    @pytest.mark.parametrize(
        ("value_type", "value"),
        [
            (ValueType.NUMBER, True),
            (ValueType.NUMBER, "3"),
            (ValueType.STRING, 3),
            (ValueType.BOOLEAN, 0),
            (ValueType.ARRAY, "abc"),
            (ValueType.OBJECT, [1]),
            (ValueType.STRING, None),
        ],
    )
    def test_rejects(self, value_type: ValueType, value: object) -> None:
        assert not value_type.accepts(value)

    def test_zero_values(self) -> None:
        assert ValueType.STRING.zero_value() == ""
        assert ValueType.NUMBER.zero_value() == 0
        assert ValueType.BOOLEAN.zero_value() is False
        assert ValueType.OBJECT.zero_value() == {}
        assert ValueType.ARRAY.zero_value() == []

    def test_zero_values_are_fresh_objects(self) -> None:
        first = ValueType.OBJECT.zero_value()
        first["x"] = 1
        assert ValueType.OBJECT.zero_value() == {}

    def test_infer(self) -> None:
        assert ValueType.infer(True) is ValueType.BOOLEAN
        assert ValueType.infer(0.2) is ValueType.NUMBER
        assert ValueType.infer({}) is ValueType.OBJECT
        assert ValueType.infer([]) is ValueType.ARRAY
        assert ValueType.infer(None) is ValueType.STRING
        assert ValueType.infer(MISSING) is ValueType.STRING

    def test_coerce(self) -> None:
        assert ValueType.coerce("integer") is ValueType.NUMBER
        assert ValueType.coerce("Boolean") is ValueType.BOOLEAN
        assert ValueType.coerce(None, 5) is ValueType.NUMBER
        assert ValueType.coerce("mystery", [1]) is ValueType.ARRAY


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class TestValidator:
    def test_camel_case_keys(self) -> None:
        validator = Validator.model_validate(
            {"predicateSource": "value > 0", "message": "Must be positive"}
        )
        assert validator.predicate_source == "value > 0"
        assert validator.message == "Must be positive"

    def test_bare_string(self) -> None:
        validator = Validator.model_validate("value > 0")
        assert validator.predicate_source == "value > 0"
        assert validator.message is None

    def test_non_string_predicate_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Validator.model_validate({"predicate": 42})


# ---------------------------------------------------------------------------
# UIConfig
# ---------------------------------------------------------------------------


class TestUIConfig:
    def test_defaults(self) -> None:
        config = UIConfig()
        assert config.ui_type is UIType.TEXT
        assert config.label is None
        assert config.component_props == {}
        assert config.has_default_override is False

    @pytest.mark.parametrize("key", ["uiType", "ui_type", "type"])
    def test_ui_type_aliases(self, key: str) -> None:
        assert UIConfig.model_validate({key: "slider"}).ui_type is UIType.SLIDER

    def test_unknown_ui_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UIConfig.model_validate({"type": "carousel"})

    def test_non_string_label_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UIConfig.model_validate({"label": 12})

    def test_default_override_none_is_still_an_override(self) -> None:
        config = UIConfig.model_validate({"default": None})
        assert config.has_default_override is True
        assert config.default_override is None

    def test_folds_top_level_widget_keys(self) -> None:
        config = UIConfig.model_validate({"type": "slider", "min": 0, "max": 2, "step": 0.1})
        assert config.component_props == {"min": 0, "max": 2, "step": 0.1}

    def test_explicit_component_props_win_over_folded(self) -> None:
        config = UIConfig.model_validate(
            {"min": 0, "componentProps": {"min": 5, "max": 10}}
        )
        assert config.component_props == {"min": 5, "max": 10}

    def test_validator_nested(self) -> None:
        config = UIConfig.model_validate({"validator": "value != ''"})
        assert config.validator is not None
        assert config.validator.predicate_source == "value != ''"

    def test_extra_keys_ignored(self) -> None:
        config = UIConfig.model_validate({"label": "Model", "futureKey": True})
        assert config.label == "Model"


# ---------------------------------------------------------------------------
# FieldSchema
# ---------------------------------------------------------------------------


class TestFieldSchema:
    def test_default_missing(self) -> None:
        schema = FieldSchema("model")
        assert schema.has_default is False
        assert schema.value_type is ValueType.STRING
        assert schema.metadata == {}

    def test_is_frozen(self) -> None:
        schema = FieldSchema("model")
        with pytest.raises(AttributeError):
            schema.name = "other"  # type: ignore[misc]

    def test_from_dict(self) -> None:
        schema = FieldSchema.from_dict(
            {"name": "temperature", "default": 0.7, "type": "number", "metadata": {"a": 1}}
        )
        assert schema.name == "temperature"
        assert schema.default_value == 0.7
        assert schema.value_type is ValueType.NUMBER
        assert schema.metadata == {"a": 1}

    def test_from_dict_infers_type(self) -> None:
        schema = FieldSchema.from_dict({"name": "enabled", "defaultValue": True})
        assert schema.value_type is ValueType.BOOLEAN

    def test_from_dict_null_default_is_present(self) -> None:
        schema = FieldSchema.from_dict({"name": "prompt", "default": None})
        assert schema.has_default is True

    def test_raw_annotation_views(self) -> None:
        schema = FieldSchema(
            "mcp",
            ValueType.OBJECT,
            {},
            {"x_oap_ui_config": {"label": "Tools"}, "config_type": "oap_mcp_tools_config"},
        )
        assert schema.ui_config_raw == {"label": "Tools"}
        assert schema.config_type_raw == "oap_mcp_tools_config"

    def test_raw_views_missing(self) -> None:
        schema = FieldSchema("plain")
        assert schema.ui_config_raw is MISSING
        assert schema.config_type_raw is MISSING

    def test_malformed_metadata_passed_through(self) -> None:
        schema = FieldSchema("odd", metadata="not-a-mapping")  # type: ignore[arg-type]
        assert schema.metadata == "not-a-mapping"
        assert schema.ui_config_raw is MISSING
