"""Runtime merger.

Applies a user submission over defaults (creation) or over a previous
:class:`RuntimeConfig` (update).  Every submitted field is checked on its
own: unknown names, type mismatches and validator failures are rejected
individually while the valid fields of the same submission still merge.
The result always covers every field in the descriptor set and nothing
else.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from agentsurface.config.defaults import DEFAULT_SETTINGS
from agentsurface.config.settings import SurfaceSettings
from agentsurface.merge.runtime import RuntimeConfig
from agentsurface.schema.category import CATEGORY_VALUE_MODELS
from agentsurface.schema.descriptor import FieldDescriptor
from agentsurface.schema.errors import (
    SubmissionError,
    TypeMismatchError,
    UnknownFieldError,
    ValidationFailedError,
)
from agentsurface.validation.engine import ValidatorEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeResult:
    """Outcome of a merge.

    Attributes
    ----------
    config:
        Complete :class:`RuntimeConfig`; rejected fields keep their
        previous value (or effective default).
    rejections:
        One :class:`SubmissionError` per rejected field, in submission order.
    """

    config: RuntimeConfig
    rejections: tuple[SubmissionError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.rejections

    def rejected_fields(self) -> list[str]:
        return [error.field_name for error in self.rejections]

    def to_dict(self) -> dict[str, object]:
        return {
            "config": self.config.to_dict(),
            "rejections": [error.to_dict() for error in self.rejections],
        }


class RuntimeMerger:
    """Validates submissions and merges them into runtime configurations.

    Parameters
    ----------
    settings:
        Engine settings; defaults to :data:`DEFAULT_SETTINGS`.
    engine:
        Validator engine to share; one is created from *settings* if omitted.
    """

    def __init__(
        self,
        settings: SurfaceSettings | None = None,
        engine: ValidatorEngine | None = None,
    ) -> None:
        self._settings = settings or DEFAULT_SETTINGS
        self._engine = engine or ValidatorEngine(self._settings)

    @property
    def engine(self) -> ValidatorEngine:
        return self._engine

    def merge(
        self,
        descriptors: Sequence[FieldDescriptor],
        previous: Mapping[str, Any] | None,
        submission: Mapping[str, Any],
    ) -> MergeResult:
        """Merge *submission* over *previous* (or over defaults when ``None``)."""
        by_name = {descriptor.name: descriptor for descriptor in descriptors}
        baseline = self._baseline(descriptors, previous)
        rejections: list[SubmissionError] = []

        for name, value in submission.items():
            descriptor = by_name.get(name)
            if descriptor is None:
                rejections.append(UnknownFieldError(name))
                continue
            error = self.check_value(descriptor, value, baseline[name])
            if error is not None:
                rejections.append(error)
                continue
            baseline[name] = value

        if rejections:
            logger.debug(
                "Merge rejected %d field(s): %s",
                len(rejections),
                [error.field_name for error in rejections],
            )
        return MergeResult(config=RuntimeConfig(baseline), rejections=tuple(rejections))

    def check_value(
        self,
        descriptor: FieldDescriptor,
        value: Any,  # noqa: ANN401
        current: Any = None,  # noqa: ANN401
    ) -> SubmissionError | None:
        """Return the submission error for *value*, or ``None`` when it is acceptable.

        The validator only runs when the value differs from the field's
        effective default and from *current* (unless
        ``skip_validator_for_unchanged`` is off).
        """
        if not descriptor.value_type.accepts(value):
            return TypeMismatchError(descriptor.name, descriptor.value_type.value, value)

        shape = CATEGORY_VALUE_MODELS.get(descriptor.category)
        if shape is not None and self._settings.validate_category_values:
            try:
                shape.model_validate(value)
            except ValidationError as exc:
                return TypeMismatchError(
                    descriptor.name,
                    descriptor.value_type.value,
                    value,
                    detail=f"Value does not match the {descriptor.category.value} shape "
                    f"({exc.error_count()} error(s)).",
                )

        if descriptor.validator is None:
            return None
        if self._settings.skip_validator_for_unchanged and (
            _same(value, descriptor.effective_default) or _same(value, current)
        ):
            return None
        result = self._engine.validate_field(descriptor, value)
        if result.passed:
            return None
        return ValidationFailedError(descriptor.name, result.message or "")

    @staticmethod
    def _baseline(
        descriptors: Sequence[FieldDescriptor],
        previous: Mapping[str, Any] | None,
    ) -> dict[str, Any]:
        if previous is None:
            return {d.name: d.default_copy() for d in descriptors}
        known = {d.name for d in descriptors}
        stale = [name for name in previous if name not in known]
        if stale:
            logger.debug("Dropping fields no longer in the schema: %s", stale)
        return {
            d.name: previous[d.name] if d.name in previous else d.default_copy()
            for d in descriptors
        }


def _same(left: Any, right: Any) -> bool:  # noqa: ANN401
    # 1 == True in Python; a boolean never counts as the same as a number.
    return type(left) is type(right) and left == right


def merge(
    descriptors: Sequence[FieldDescriptor],
    previous: Mapping[str, Any] | None,
    submission: Mapping[str, Any],
    settings: SurfaceSettings | None = None,
) -> MergeResult:
    """Functional shortcut for :meth:`RuntimeMerger.merge`."""
    return RuntimeMerger(settings).merge(descriptors, previous, submission)
