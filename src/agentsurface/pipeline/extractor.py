"""Metadata extractor.

Reads the ``uiConfig`` and ``configType`` annotations of each
:class:`~agentsurface.schema.field.FieldSchema` into typed values.  Failures
are attached to the offending field rather than aborting the batch; the
normalizer later decides how the field is rendered.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from agentsurface.schema.category import RECOGNIZED_TOKENS
from agentsurface.schema.errors import MalformedMetadataError
from agentsurface.schema.field import MISSING, FieldSchema, UIConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractedField:
    """A field schema with its annotations read.

    Attributes
    ----------
    schema:
        The source :class:`FieldSchema`.
    ui_config:
        Parsed :class:`UIConfig`, or ``None`` when absent or malformed.
    config_type:
        A recognised category token, or ``None``.
    errors:
        Per-field :class:`MalformedMetadataError` instances.
    salvaged_label:
        Label recovered from a malformed ``uiConfig``, if it was a string.
    salvaged_description:
        Description recovered from a malformed ``uiConfig``.
    config_type_malformed:
        ``True`` when the ``configType`` annotation was present but unreadable.
    """

    schema: FieldSchema
    ui_config: UIConfig | None = None
    config_type: str | None = None
    errors: tuple[MalformedMetadataError, ...] = ()
    salvaged_label: str | None = None
    salvaged_description: str | None = None
    config_type_malformed: bool = False

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def is_malformed(self) -> bool:
        return bool(self.errors)


def extract_metadata(fields: Iterable[FieldSchema]) -> list[ExtractedField]:
    """Extract annotations from every field, preserving input order."""
    extracted = [extract_field(field_schema) for field_schema in fields]
    logger.debug("Extracted metadata for %d field(s).", len(extracted))
    return extracted


def extract_field(field_schema: FieldSchema) -> ExtractedField:
    """Extract the annotations of a single field."""
    errors: list[MalformedMetadataError] = []
    name = field_schema.name

    if not isinstance(field_schema.metadata, Mapping):
        errors.append(
            MalformedMetadataError(
                name,
                f"Metadata of field {name!r} must be a mapping, "
                f"got {type(field_schema.metadata).__name__}.",
            )
        )
        return ExtractedField(schema=field_schema, errors=tuple(errors))

    ui_config: UIConfig | None = None
    salvaged_label: str | None = None
    salvaged_description: str | None = None
    raw_ui = field_schema.ui_config_raw
    if raw_ui is not MISSING and raw_ui is not None:
        try:
            ui_config = _parse_ui_config(name, raw_ui)
        except MalformedMetadataError as exc:
            errors.append(exc)
            if isinstance(raw_ui, Mapping):
                salvaged_label = _string_or_none(raw_ui.get("label"))
                salvaged_description = _string_or_none(raw_ui.get("description"))

    config_type: str | None = None
    config_type_malformed = False
    raw_type = field_schema.config_type_raw
    if raw_type is not MISSING and raw_type is not None:
        if not isinstance(raw_type, str):
            config_type_malformed = True
            errors.append(
                MalformedMetadataError(
                    name,
                    f"configType of field {name!r} must be a string, "
                    f"got {type(raw_type).__name__}.",
                )
            )
        elif raw_type in RECOGNIZED_TOKENS:
            config_type = raw_type
        else:
            logger.warning(
                "Field %r declares unrecognised configType %r; treating it as general.",
                name,
                raw_type,
            )

    return ExtractedField(
        schema=field_schema,
        ui_config=ui_config,
        config_type=config_type,
        errors=tuple(errors),
        salvaged_label=salvaged_label,
        salvaged_description=salvaged_description,
        config_type_malformed=config_type_malformed,
    )


def _parse_ui_config(name: str, raw: Any) -> UIConfig:  # noqa: ANN401
    if not isinstance(raw, Mapping):
        raise MalformedMetadataError(
            name,
            f"uiConfig of field {name!r} must be a mapping, got {type(raw).__name__}.",
        )
    try:
        return UIConfig.model_validate(dict(raw))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'uiConfig'}: {error['msg']}"
            for error in exc.errors()
        )
        raise MalformedMetadataError(
            name,
            f"uiConfig of field {name!r} is malformed: {problems}",
            context={"errors": exc.errors(include_url=False)},
        ) from exc


def _string_or_none(value: object) -> str | None:
    return value if isinstance(value, str) else None
