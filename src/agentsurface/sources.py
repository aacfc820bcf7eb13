"""Builders that turn agent configuration definitions into field schemas.

Agents declare their configurable surface in several ways; each builder
below yields the same ordered ``list[FieldSchema]``.

Shipped in this module
----------------------
- fields_from_definitions — list of raw ``{name, default, type, metadata}`` dicts
- fields_from_json_schema — JSON Schema object document (``properties``)
- fields_from_model       — Pydantic v2 model class
- fields_from_dataclass   — dataclass type with ``field(metadata=...)``
- fields_from_any         — dispatch on the shape of a definition
"""
from __future__ import annotations

import dataclasses
import logging
import types
import typing
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from agentsurface.schema.errors import ConfigurationError
from agentsurface.schema.field import (
    CONFIG_TYPE_KEYS,
    MISSING,
    UI_CONFIG_KEYS,
    FieldSchema,
    ValueType,
)

logger = logging.getLogger(__name__)


def fields_from_definitions(definitions: Iterable[Mapping[str, Any]]) -> list[FieldSchema]:
    """Build schemas from raw field definition mappings.

    Raises
    ------
    ConfigurationError
        If an entry is not a mapping or has no ``name``.
    """
    fields: list[FieldSchema] = []
    for index, raw in enumerate(definitions):
        if not isinstance(raw, Mapping) or "name" not in raw:
            raise ConfigurationError(
                f"Field definition #{index} must be a mapping with a 'name' key.",
                context={"index": index},
            )
        fields.append(FieldSchema.from_dict(raw))
    return fields


# ---------------------------------------------------------------------------
# JSON Schema
# ---------------------------------------------------------------------------


def fields_from_json_schema(document: Mapping[str, Any]) -> list[FieldSchema]:
    """Build schemas from a JSON Schema object, in ``properties`` order.

    Per-property metadata is read from a ``metadata`` mapping, or from
    ``x_oap_ui_config`` / ``configType`` keys placed directly on the
    property.
    """
    properties = document.get("properties")
    if not isinstance(properties, Mapping):
        raise ConfigurationError("JSON Schema document has no 'properties' mapping.")

    fields: list[FieldSchema] = []
    for name, prop in properties.items():
        if not isinstance(prop, Mapping):
            raise ConfigurationError(
                f"JSON Schema property {name!r} must be a mapping.",
                context={"field": name},
            )
        default_value = prop.get("default", MISSING)
        fields.append(
            FieldSchema(
                name=str(name),
                value_type=ValueType.coerce(_json_type(prop), default_value),
                default_value=default_value,
                metadata=_property_metadata(prop),
            )
        )
    return fields


def _json_type(prop: Mapping[str, Any]) -> str | None:
    declared = prop.get("type")
    if isinstance(declared, list):
        non_null = [t for t in declared if t != "null"]
        return non_null[0] if non_null else None
    if isinstance(declared, str):
        return declared
    if "$ref" in prop or "allOf" in prop:
        return "object"
    for key in ("anyOf", "oneOf"):
        branches = prop.get(key)
        if isinstance(branches, list):
            for branch in branches:
                if not isinstance(branch, Mapping) or branch.get("type") == "null":
                    continue
                resolved = _json_type(branch)
                if resolved is not None:
                    return resolved
    return None


def _property_metadata(prop: Mapping[str, Any]) -> Any:  # noqa: ANN401
    nested = prop.get("metadata")
    if nested is not None and not isinstance(nested, Mapping):
        # Passed through so the extractor reports it against the field.
        return nested
    metadata: dict[str, Any] = dict(nested or {})
    for key in (*UI_CONFIG_KEYS, *CONFIG_TYPE_KEYS):
        if key in prop and key not in metadata:
            metadata[key] = prop[key]
    return metadata


# ---------------------------------------------------------------------------
# Pydantic models and dataclasses
# ---------------------------------------------------------------------------


def fields_from_model(model: type[BaseModel]) -> list[FieldSchema]:
    """Build schemas from a Pydantic v2 model class.

    Metadata is carried through ``Field(json_schema_extra=...)``, either as
    a nested ``metadata`` mapping or as top-level annotation keys.
    """
    return fields_from_json_schema(model.model_json_schema())


def fields_from_dataclass(cls: type) -> list[FieldSchema]:
    """Build schemas from a dataclass type, in field declaration order."""
    if not dataclasses.is_dataclass(cls):
        raise ConfigurationError(f"{cls!r} is not a dataclass type.")

    hints = typing.get_type_hints(cls)
    fields: list[FieldSchema] = []
    for dc_field in dataclasses.fields(cls):
        if dc_field.default is not dataclasses.MISSING:
            default_value = dc_field.default
        elif dc_field.default_factory is not dataclasses.MISSING:
            default_value = dc_field.default_factory()
        else:
            default_value = MISSING
        fields.append(
            FieldSchema(
                name=dc_field.name,
                value_type=_value_type_from_annotation(hints.get(dc_field.name), default_value),
                default_value=default_value,
                metadata=dict(dc_field.metadata),
            )
        )
    return fields


_ANNOTATION_TYPES: tuple[tuple[type, ValueType], ...] = (
    (bool, ValueType.BOOLEAN),
    (int, ValueType.NUMBER),
    (float, ValueType.NUMBER),
    (str, ValueType.STRING),
    (Mapping, ValueType.OBJECT),
    (dict, ValueType.OBJECT),
    (Sequence, ValueType.ARRAY),
    (list, ValueType.ARRAY),
    (tuple, ValueType.ARRAY),
)


def _value_type_from_annotation(annotation: Any, default_value: Any) -> ValueType:  # noqa: ANN401
    candidates = [annotation]
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        candidates = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
    for candidate in candidates:
        origin = typing.get_origin(candidate) or candidate
        if not isinstance(origin, type):
            continue
        for python_type, value_type in _ANNOTATION_TYPES:
            if issubclass(origin, python_type) and not (
                python_type is Sequence and issubclass(origin, str)
            ):
                return value_type
        if issubclass(origin, BaseModel):
            return ValueType.OBJECT
    return ValueType.infer(default_value)


def fields_from_any(definition: Any) -> list[FieldSchema]:  # noqa: ANN401
    """Build schemas from whichever definition shape *definition* has.

    Accepts a list of field schemas or raw definitions, a JSON Schema
    document, a mapping with a ``fields`` list, a Pydantic model class or a
    dataclass type.
    """
    if isinstance(definition, type):
        if issubclass(definition, BaseModel):
            return fields_from_model(definition)
        if dataclasses.is_dataclass(definition):
            return fields_from_dataclass(definition)
    if isinstance(definition, Mapping):
        if "properties" in definition:
            return fields_from_json_schema(definition)
        if isinstance(definition.get("fields"), list):
            return fields_from_definitions(definition["fields"])
    if isinstance(definition, Sequence) and not isinstance(definition, (str, bytes)):
        if all(isinstance(item, FieldSchema) for item in definition):
            return list(definition)
        return fields_from_definitions(definition)
    raise ConfigurationError(
        f"Cannot build field schemas from a {type(definition).__name__}.",
    )
