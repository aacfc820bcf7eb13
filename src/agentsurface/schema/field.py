"""Field schema model for agentsurface-sdk.

``FieldSchema`` is the sole input boundary of the core: a named, typed,
defaulted parameter together with its raw annotation ``metadata``.  It is a
pure data container; malformed metadata is passed through untouched so that
the extractor can reject it field by field.

``UIConfig`` and ``Validator`` are the typed views the extractor produces
from the raw ``uiConfig`` annotation.  They are Pydantic v2 models so that
the accepted key spellings (camelCase, snake_case, and the short ``type`` /
``default`` forms) live in one place.

Shipped in this module
----------------------
- MISSING      — sentinel for "no default declared"
- ValueType    — string / number / boolean / object / array
- UIType       — text / textarea / number / boolean / slider / select / json
- Validator    — predicate source plus optional failure message
- UIConfig     — typed view of a field's ``uiConfig`` annotation
- FieldSchema  — immutable raw field definition
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr, model_validator

logger = logging.getLogger(__name__)

# Keys under which the raw metadata mapping may carry each annotation.
UI_CONFIG_KEYS: tuple[str, ...] = ("uiConfig", "ui_config", "x_oap_ui_config")
CONFIG_TYPE_KEYS: tuple[str, ...] = ("configType", "config_type")

# Top-level UI config keys that belong in ``componentProps``.
_FOLDED_PROP_KEYS: tuple[str, ...] = ("min", "max", "step", "options", "placeholder")


class _Missing:
    """Sentinel type for absent values (distinct from ``None``)."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> _Missing:
        return self


MISSING: Any = _Missing()


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ValueType(str, Enum):
    """Semantic value type of a configurable field."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"

    def accepts(self, value: object) -> bool:
        """Return ``True`` when *value* is an instance of this value type.

        ``bool`` is not a number, and strings are not arrays.
        """
        if self is ValueType.STRING:
            return isinstance(value, str)
        if self is ValueType.NUMBER:
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        if self is ValueType.BOOLEAN:
            return isinstance(value, bool)
        if self is ValueType.OBJECT:
            return isinstance(value, Mapping)
        return isinstance(value, Sequence) and not isinstance(value, (str, bytes))

    def zero_value(self) -> Any:  # noqa: ANN401
        """Type-appropriate empty value, so the UI always has something to render."""
        zeros: dict[ValueType, Any] = {
            ValueType.STRING: "",
            ValueType.NUMBER: 0,
            ValueType.BOOLEAN: False,
            ValueType.OBJECT: {},
            ValueType.ARRAY: [],
        }
        return zeros[self]

    @classmethod
    def infer(cls, value: object) -> ValueType:
        """Guess the value type from a sample value, falling back to STRING."""
        for candidate in (cls.BOOLEAN, cls.NUMBER, cls.STRING, cls.OBJECT, cls.ARRAY):
            if value is not MISSING and value is not None and candidate.accepts(value):
                return candidate
        return cls.STRING

    @classmethod
    def coerce(cls, raw: object, default_value: object = MISSING) -> ValueType:
        """Resolve a declared type tag, inferring from *default_value* when absent.

        JSON Schema's ``integer`` maps to NUMBER.  Unknown tags are logged and
        replaced by the inferred type.
        """
        if isinstance(raw, ValueType):
            return raw
        if isinstance(raw, str):
            tag = raw.strip().lower()
            if tag == "integer":
                return cls.NUMBER
            try:
                return cls(tag)
            except ValueError:
                logger.warning("Unknown value type %r; inferring from default.", raw)
        return cls.infer(default_value)


class UIType(str, Enum):
    """Rendering widget requested for a field."""

    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SLIDER = "slider"
    SELECT = "select"
    JSON = "json"


# ---------------------------------------------------------------------------
# Typed annotation views
# ---------------------------------------------------------------------------


class Validator(BaseModel):
    """A single-argument predicate attached to a field's UI configuration.

    Accepts either a mapping or a bare predicate string::

        >>> Validator.model_validate("value >= 0").predicate_source
        'value >= 0'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    predicate_source: StrictStr = Field(
        validation_alias=AliasChoices("predicateSource", "predicate_source", "predicate"),
    )
    message: StrictStr | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_string(cls, values: Any) -> Any:  # noqa: ANN401
        if isinstance(values, str):
            return {"predicate_source": values}
        return values


class UIConfig(BaseModel):
    """Typed view of a field's ``uiConfig`` annotation.

    Parameters
    ----------
    label:
        Display string.  Must be a string when present.
    ui_type:
        Requested widget; defaults to ``text``.
    description:
        Optional help text.
    default_override:
        Value shown in the UI in place of the schema default.  Use
        :attr:`has_default_override` to tell "absent" from ``None``.
    validator:
        Optional :class:`Validator`.
    component_props:
        Open bag of widget-specific parameters.  Top-level ``min``, ``max``,
        ``step``, ``options`` and ``placeholder`` are folded in.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    label: StrictStr | None = None
    ui_type: UIType = Field(
        default=UIType.TEXT,
        validation_alias=AliasChoices("uiType", "ui_type", "type"),
    )
    description: StrictStr | None = None
    default_override: Any = Field(
        default=None,
        validation_alias=AliasChoices("defaultOverride", "default_override", "default"),
    )
    validator: Validator | None = None
    component_props: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("componentProps", "component_props"),
    )

    @model_validator(mode="before")
    @classmethod
    def _fold_component_props(cls, values: Any) -> Any:  # noqa: ANN401
        """Move top-level widget keys into ``component_props``."""
        if not isinstance(values, Mapping):
            return values
        data = dict(values)
        folded = {key: data.pop(key) for key in _FOLDED_PROP_KEYS if key in data}
        if not folded:
            return data
        for key in ("componentProps", "component_props"):
            if key in data:
                explicit = data[key]
                if isinstance(explicit, Mapping):
                    data[key] = {**folded, **explicit}
                return data
        data["component_props"] = folded
        return data

    @property
    def has_default_override(self) -> bool:
        return "default_override" in self.model_fields_set


# ---------------------------------------------------------------------------
# FieldSchema
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldSchema:
    """Raw definition of one configurable field.

    Attributes
    ----------
    name:
        Unique identifier within a configuration set.
    value_type:
        Declared :class:`ValueType`.
    default_value:
        Functional default, or :data:`MISSING` when none is declared.
    metadata:
        Raw annotation mapping.  Not validated here.
    """

    name: str
    value_type: ValueType = ValueType.STRING
    default_value: Any = MISSING
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def has_default(self) -> bool:
        return self.default_value is not MISSING

    @property
    def ui_config_raw(self) -> Any:  # noqa: ANN401
        """The raw ``uiConfig`` annotation, or :data:`MISSING`."""
        return _first_present(self.metadata, UI_CONFIG_KEYS)

    @property
    def config_type_raw(self) -> Any:  # noqa: ANN401
        """The raw ``configType`` annotation, or :data:`MISSING`."""
        return _first_present(self.metadata, CONFIG_TYPE_KEYS)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> FieldSchema:
        """Build a schema from a raw field definition mapping.

        Recognised keys: ``name``, ``default`` / ``defaultValue`` /
        ``default_value``, ``type`` / ``valueType`` / ``value_type``, and
        ``metadata``.  A missing value type is inferred from the default.
        """
        default_value = MISSING
        for key in ("default", "defaultValue", "default_value"):
            if key in raw:
                default_value = raw[key]
                break
        declared_type = _first_present(raw, ("valueType", "value_type", "type"))
        metadata = raw.get("metadata")
        return cls(
            name=str(raw["name"]),
            value_type=ValueType.coerce(
                None if declared_type is MISSING else declared_type, default_value
            ),
            default_value=default_value,
            metadata=metadata if metadata is not None else {},
        )


def _first_present(mapping: Mapping[str, Any], keys: tuple[str, ...]) -> Any:  # noqa: ANN401
    if not isinstance(mapping, Mapping):
        return MISSING
    for key in keys:
        if key in mapping:
            return mapping[key]
    return MISSING
