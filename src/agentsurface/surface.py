"""Convenience API for agentsurface-sdk.

``ConfigSurface`` wires the pipeline, the validator engine and the merger
around one agent's field schemas.

Example
-------
::

    from agentsurface import ConfigSurface
    surface = ConfigSurface.from_file("agent_schema.yaml")
    for descriptor in surface.describe():
        print(descriptor.name, descriptor.ui_type.value)
    result = surface.merge({"temperature": 1.5})
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from agentsurface.config.defaults import DEFAULT_SETTINGS
from agentsurface.config.loader import SchemaLoader
from agentsurface.config.settings import SurfaceSettings
from agentsurface.merge.merger import MergeResult, RuntimeMerger
from agentsurface.pipeline import build_descriptors
from agentsurface.report import SurfaceReport
from agentsurface.schema.descriptor import DescriptorSet
from agentsurface.schema.errors import AuthoringError
from agentsurface.schema.field import FieldSchema
from agentsurface.sources import fields_from_json_schema, fields_from_model
from agentsurface.validation.engine import ValidationResult, ValidatorEngine

logger = logging.getLogger(__name__)


class ConfigSurface:
    """The configurable surface of one agent version.

    Descriptors are rebuilt on every :meth:`describe` call; only the
    compiled-predicate cache is shared between calls.

    Parameters
    ----------
    fields:
        Field schemas in display order.
    settings:
        Engine settings; defaults to :data:`DEFAULT_SETTINGS`.
    engine:
        Validator engine to share between surfaces.
    """

    def __init__(
        self,
        fields: Iterable[FieldSchema],
        settings: SurfaceSettings | None = None,
        engine: ValidatorEngine | None = None,
    ) -> None:
        self._fields: tuple[FieldSchema, ...] = tuple(fields)
        self._settings = settings or DEFAULT_SETTINGS
        self._engine = engine or ValidatorEngine(self._settings)
        self._merger = RuntimeMerger(self._settings, self._engine)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_file(cls, path: str | Path, settings: SurfaceSettings | None = None) -> ConfigSurface:
        return cls(SchemaLoader().load(path), settings)

    @classmethod
    def from_json_schema(
        cls, document: Mapping[str, Any], settings: SurfaceSettings | None = None
    ) -> ConfigSurface:
        return cls(fields_from_json_schema(document), settings)

    @classmethod
    def from_model(cls, model: type[BaseModel], settings: SurfaceSettings | None = None) -> ConfigSurface:
        return cls(fields_from_model(model), settings)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @property
    def fields(self) -> tuple[FieldSchema, ...]:
        return self._fields

    @property
    def engine(self) -> ValidatorEngine:
        return self._engine

    def describe(self) -> DescriptorSet:
        """Build the render contract.

        Raises
        ------
        DuplicateCategoryError, DuplicateFieldError
            When the schema violates a cross-field invariant.
        """
        return build_descriptors(self._fields)

    def check(self) -> SurfaceReport:
        """Report authoring defects without raising."""
        try:
            descriptors = self.describe()
        except AuthoringError as exc:
            logger.warning("Configuration schema is invalid: %s", exc)
            return SurfaceReport.from_fatal(exc)
        return SurfaceReport.from_descriptors(descriptors)

    def validate(self, field_name: str, value: Any) -> ValidationResult:  # noqa: ANN401
        """Live validation of one candidate value, as the UI would request it.

        Unknown fields, type mismatches and validator failures all come back
        as a failed :class:`ValidationResult`.
        """
        descriptor = self.describe().get(field_name)
        if descriptor is None:
            return ValidationResult(
                passed=False,
                message=f"Unknown configuration field {field_name!r}.",
                field_name=field_name,
            )
        error = self._merger.check_value(descriptor, value)
        if error is not None:
            return ValidationResult(passed=False, message=str(error), field_name=field_name)
        return ValidationResult(passed=True, field_name=field_name)

    def merge(
        self,
        submission: Mapping[str, Any],
        previous: Mapping[str, Any] | None = None,
    ) -> MergeResult:
        """Merge *submission* into *previous* (creation when ``None``)."""
        return self._merger.merge(self.describe(), previous, submission)

    def defaults(self) -> dict[str, Any]:
        """The creation-time configuration: every field at its effective default."""
        return self.describe().defaults()

    def __repr__(self) -> str:
        return f"ConfigSurface(fields={[f.name for f in self._fields]})"
