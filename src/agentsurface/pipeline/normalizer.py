"""Descriptor normalizer.

Turns category-tagged fields into :class:`FieldDescriptor` instances: fills
in labels and defaults, and checks ``componentProps`` against the requested
``uiType``.  A field whose metadata is broken is rendered as plain text and
carries its defects; it is never dropped or reordered.
"""
from __future__ import annotations

import copy
import logging
import re
from collections.abc import Mapping, Sequence
from numbers import Real
from typing import Any

from agentsurface.pipeline.classifier import ClassifiedField
from agentsurface.schema.descriptor import DescriptorSet, FieldDescriptor
from agentsurface.schema.errors import AuthoringError, InvalidComponentPropsError
from agentsurface.schema.field import UIConfig, UIType

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[_\-\s]+")


def humanize(name: str) -> str:
    """Render a field name as a display label.

    >>> humanize("max_tokens")
    'Max tokens'
    >>> humanize("systemPrompt")
    'System prompt'
    >>> humanize("HTTPTimeout")
    'Http timeout'
    """
    spaced = _SEPARATORS.sub(" ", _CAMEL_BOUNDARY.sub(" ", name)).strip()
    if not spaced:
        return name
    lowered = spaced.lower()
    return lowered[0].upper() + lowered[1:]


def normalize(classified: Sequence[ClassifiedField]) -> DescriptorSet:
    """Build the ordered descriptor set for a classified schema."""
    descriptors = [normalize_field(item) for item in classified]
    degraded = [d.name for d in descriptors if d.degraded]
    if degraded:
        logger.warning("Degraded %d field(s) to text input: %s", len(degraded), degraded)
    return DescriptorSet(descriptors)


def normalize_field(item: ClassifiedField) -> FieldDescriptor:
    """Resolve the descriptor for one classified field."""
    extracted = item.extracted
    schema = extracted.schema
    ui_config = extracted.ui_config
    defects: list[AuthoringError] = list(extracted.errors)

    label = humanize(schema.name)
    description: str | None = None
    ui_type = UIType.TEXT
    component_props: dict[str, Any] = {}

    if ui_config is not None:
        label = ui_config.label or label
        description = ui_config.description
        ui_type = ui_config.ui_type
        try:
            component_props = check_component_props(
                schema.name, ui_type, ui_config.component_props
            )
        except InvalidComponentPropsError as exc:
            defects.append(exc)
            ui_type = UIType.TEXT
            component_props = {}
    else:
        label = extracted.salvaged_label or label
        description = extracted.salvaged_description

    return FieldDescriptor(
        name=schema.name,
        category=item.category,
        ui_type=ui_type,
        label=label,
        value_type=schema.value_type,
        effective_default=_effective_default(item, ui_config),
        description=description,
        component_props=component_props,
        validator=ui_config.validator if ui_config is not None else None,
        degraded=bool(defects),
        defects=tuple(defects),
    )


def _effective_default(item: ClassifiedField, ui_config: UIConfig | None) -> Any:  # noqa: ANN401
    schema = item.extracted.schema
    if ui_config is not None and ui_config.has_default_override:
        return copy.deepcopy(ui_config.default_override)
    if schema.has_default:
        return copy.deepcopy(schema.default_value)
    return schema.value_type.zero_value()


# ---------------------------------------------------------------------------
# componentProps checks
# ---------------------------------------------------------------------------


def check_component_props(
    field_name: str,
    ui_type: UIType,
    props: Mapping[str, Any],
) -> dict[str, Any]:
    """Validate and complete *props* for *ui_type*.

    Raises
    ------
    InvalidComponentPropsError
        If a ``slider`` or ``select`` lacks what it needs to render.
    """
    if ui_type is UIType.SLIDER:
        return _check_slider(field_name, props)
    if ui_type is UIType.SELECT:
        return _check_select(field_name, props)
    return dict(props)


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _check_slider(field_name: str, props: Mapping[str, Any]) -> dict[str, Any]:
    missing = [key for key in ("min", "max", "step") if not _is_number(props.get(key))]
    if missing:
        raise InvalidComponentPropsError(
            field_name,
            f"Slider field {field_name!r} needs numeric {', '.join(missing)}.",
            context={"missing": missing},
        )
    if props["step"] <= 0:
        raise InvalidComponentPropsError(
            field_name,
            f"Slider field {field_name!r} needs a positive step, got {props['step']!r}.",
        )
    if not props["min"] < props["max"]:
        raise InvalidComponentPropsError(
            field_name,
            f"Slider field {field_name!r} needs min < max, "
            f"got min={props['min']!r} max={props['max']!r}.",
        )
    return dict(props)


def _check_select(field_name: str, props: Mapping[str, Any]) -> dict[str, Any]:
    raw_options = props.get("options")
    if not isinstance(raw_options, Sequence) or isinstance(raw_options, (str, bytes)):
        raise InvalidComponentPropsError(
            field_name,
            f"Select field {field_name!r} needs an options list.",
        )
    if not raw_options:
        raise InvalidComponentPropsError(
            field_name,
            f"Select field {field_name!r} needs at least one option.",
        )

    options: list[dict[str, Any]] = []
    values: list[Any] = []
    for index, raw in enumerate(raw_options):
        option = _coerce_option(field_name, index, raw)
        if any(_same_option(seen, option["value"]) for seen in values):
            raise InvalidComponentPropsError(
                field_name,
                f"Select field {field_name!r} repeats option value {option['value']!r}.",
            )
        values.append(option["value"])
        options.append(option)

    completed = dict(props)
    completed["options"] = options
    return completed


def _same_option(left: Any, right: Any) -> bool:  # noqa: ANN401
    # 1 == True in Python; options of different types are distinct.
    return type(left) is type(right) and left == right


def _coerce_option(field_name: str, index: int, raw: Any) -> dict[str, Any]:  # noqa: ANN401
    # Bare scalars are shorthand for {label: str(v), value: v}.
    if isinstance(raw, (str, int, float, bool)):
        return {"label": str(raw), "value": raw}
    if isinstance(raw, Mapping) and "value" in raw:
        label = raw.get("label", raw["value"])
        if not isinstance(label, (str, int, float)):
            raise InvalidComponentPropsError(
                field_name,
                f"Option {index} of select field {field_name!r} has a non-text label.",
            )
        return {**raw, "label": str(label), "value": raw["value"]}
    raise InvalidComponentPropsError(
        field_name,
        f"Option {index} of select field {field_name!r} must be a {{label, value}} pair.",
    )
