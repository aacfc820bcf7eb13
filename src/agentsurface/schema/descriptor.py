"""Render-ready field descriptors.

A :class:`FieldDescriptor` is what the UI receives for each configurable
field.  Descriptors are derived on every read and never persisted; the
:class:`DescriptorSet` keeps them in schema declaration order.
"""
from __future__ import annotations

import copy
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from agentsurface.schema.category import ConfigCategory
from agentsurface.schema.errors import AuthoringError
from agentsurface.schema.field import UIType, Validator, ValueType


@dataclass(frozen=True)
class FieldDescriptor:
    """Normalised, render-ready representation of one field.

    Attributes
    ----------
    name:
        Field name as declared in the schema.
    category:
        Functional :class:`ConfigCategory`.
    ui_type:
        Resolved widget; ``text`` when unset or degraded.
    label:
        Display label; the humanised name when none was given.
    description:
        Optional help text.
    effective_default:
        UI default override, else schema default, else the type's zero value.
    component_props:
        Widget parameters, checked against ``ui_type``.
    validator:
        Optional predicate applied at submission time.
    value_type:
        Declared :class:`ValueType`, used for type checks on merge.
    degraded:
        ``True`` when metadata problems forced a fallback rendering.
    defects:
        The recoverable authoring errors that caused the degradation.
    """

    name: str
    category: ConfigCategory
    ui_type: UIType
    label: str
    value_type: ValueType
    effective_default: Any = None
    description: str | None = None
    component_props: dict[str, Any] = field(default_factory=dict)
    validator: Validator | None = None
    degraded: bool = False
    defects: tuple[AuthoringError, ...] = ()

    def default_copy(self) -> Any:  # noqa: ANN401
        """A private copy of the effective default, safe to hand out."""
        return copy.deepcopy(self.effective_default)

    def to_dict(self) -> dict[str, object]:
        """Serialise to the camelCase shape consumed by the UI."""
        data: dict[str, object] = {
            "name": self.name,
            "category": self.category.value,
            "uiType": self.ui_type.value,
            "label": self.label,
            "description": self.description,
            "valueType": self.value_type.value,
            "effectiveDefault": self.effective_default,
            "componentProps": dict(self.component_props),
            "validator": None,
            "degraded": self.degraded,
        }
        if self.validator is not None:
            data["validator"] = {
                "predicateSource": self.validator.predicate_source,
                "message": self.validator.message,
            }
        if self.defects:
            data["defects"] = [defect.to_dict() for defect in self.defects]
        return data


class DescriptorSet(Sequence[FieldDescriptor]):
    """Ordered, immutable collection of :class:`FieldDescriptor`.

    Category tagging never removes a descriptor from the sequence: the MCP
    and RAG fields keep their declared position and are additionally
    reachable through :attr:`mcp_tools` and :attr:`rag`.
    """

    def __init__(self, descriptors: Sequence[FieldDescriptor]) -> None:
        self._descriptors: tuple[FieldDescriptor, ...] = tuple(descriptors)
        self._by_name: dict[str, FieldDescriptor] = {d.name: d for d in self._descriptors}

    def __getitem__(self, index: int) -> FieldDescriptor:  # type: ignore[override]
        return self._descriptors[index]

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._descriptors)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._by_name
        return item in self._descriptors

    def __repr__(self) -> str:
        return f"DescriptorSet(names={self.names()})"

    def names(self) -> list[str]:
        return [d.name for d in self._descriptors]

    def get(self, name: str) -> FieldDescriptor | None:
        return self._by_name.get(name)

    def general(self) -> list[FieldDescriptor]:
        """Descriptors that are not one of the special categories, in order."""
        return [d for d in self._descriptors if not d.category.is_special]

    def _single(self, category: ConfigCategory) -> FieldDescriptor | None:
        for descriptor in self._descriptors:
            if descriptor.category is category:
                return descriptor
        return None

    @property
    def mcp_tools(self) -> FieldDescriptor | None:
        return self._single(ConfigCategory.MCP_TOOLS)

    @property
    def rag(self) -> FieldDescriptor | None:
        return self._single(ConfigCategory.RAG)

    @property
    def defects(self) -> list[AuthoringError]:
        """All recoverable authoring defects, in field order."""
        return [defect for d in self._descriptors for defect in d.defects]

    def defaults(self) -> dict[str, Any]:
        """Mapping of field name to a copy of its effective default."""
        return {d.name: d.default_copy() for d in self._descriptors}

    def to_dict(self) -> dict[str, object]:
        return {
            "fields": [d.to_dict() for d in self._descriptors],
            "mcpToolsField": self.mcp_tools.name if self.mcp_tools else None,
            "ragField": self.rag.name if self.rag else None,
        }
