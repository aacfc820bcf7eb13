"""Error taxonomy for agentsurface-sdk.

All exceptions raised by agentsurface derive from ``AgentSurfaceError`` so
that callers can catch the entire family with a single
``except AgentSurfaceError`` clause while still being able to distinguish
individual failure modes.

Every field-level error is also a *defect*: it records whether it is a
configuration authoring defect (should block deployment of the agent) or a
user submission defect (should be shown inline next to the offending field).

Shipped in this module
----------------------
- ErrorSeverity      — ordered severity enum
- DefectKind         — AUTHORING / SUBMISSION
- AgentSurfaceError  — root exception with severity and context payload
- ConfigurationError — settings or schema-file loading failures
- AuthoringError     — MalformedMetadataError, DuplicateCategoryError,
                       DuplicateFieldError, InvalidComponentPropsError
- SubmissionError    — UnknownFieldError, TypeMismatchError,
                       ValidationFailedError
"""
from __future__ import annotations

from enum import Enum


class ErrorSeverity(str, Enum):
    """Ordered severity levels for ``AgentSurfaceError`` instances.

    Severity is purely advisory metadata. It does not change the
    exception-handling semantics, but it lets logging and alerting
    infrastructure filter by impact level.
    """

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class DefectKind(str, Enum):
    """Who has to act on a defect."""

    AUTHORING = "authoring"
    SUBMISSION = "submission"


class AgentSurfaceError(Exception):
    """Root exception for all agentsurface failures.

    Parameters
    ----------
    message:
        Human-readable description of what went wrong.
    severity:
        Advisory ``ErrorSeverity`` level.  Defaults to ``HIGH``.
    context:
        Optional dict of structured metadata (field names, tokens, etc.)
        that helps diagnostics without requiring log scraping.

    Examples
    --------
    >>> try:
    ...     raise AgentSurfaceError("something broke", ErrorSeverity.MEDIUM)
    ... except AgentSurfaceError as exc:
    ...     print(exc.severity)
    ErrorSeverity.MEDIUM
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.severity: ErrorSeverity = severity
        self.context: dict[str, object] = context or {}

    @property
    def message(self) -> str:
        return str(self)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"message={str(self)!r}, "
            f"severity={self.severity.value!r})"
        )


class ConfigurationError(AgentSurfaceError):
    """Raised when settings or schema documents cannot be loaded.

    Examples: missing file, bad YAML, a schema document of the wrong shape.
    """


# ---------------------------------------------------------------------------
# Field-level defects
# ---------------------------------------------------------------------------


class FieldDefect(AgentSurfaceError):
    """Base for errors attached to a specific configurable field."""

    kind: DefectKind = DefectKind.AUTHORING

    def __init__(
        self,
        field_name: str,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message, severity, context)
        self.field_name = field_name

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain dict suitable for JSON encoding."""
        return {
            "error": type(self).__name__,
            "kind": self.kind.value,
            "field": self.field_name,
            "message": str(self),
            "severity": self.severity.value,
        }


class AuthoringError(FieldDefect):
    """A defect in the agent's configuration schema itself."""

    kind = DefectKind.AUTHORING


class SubmissionError(FieldDefect):
    """A defect in a user-submitted value."""

    kind = DefectKind.SUBMISSION

    def __init__(
        self,
        field_name: str,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.LOW,
        context: dict[str, object] | None = None,
    ) -> None:
        super().__init__(field_name, message, severity, context)


class MalformedMetadataError(AuthoringError):
    """Raised when a field's ``uiConfig`` or ``configType`` annotation is malformed.

    Recoverable: the field is degraded to a plain text input, never dropped.
    """


class InvalidComponentPropsError(AuthoringError):
    """Raised when ``componentProps`` do not satisfy the ``uiType`` requirements.

    Recoverable: the field is degraded to a plain text input.
    """


class DuplicateCategoryError(AuthoringError):
    """Raised when more than one field claims the same special category.

    Fatal for the whole configuration set.
    """

    def __init__(self, category: str, field_names: list[str]) -> None:
        super().__init__(
            field_names[-1],
            f"Category {category!r} is declared by more than one field: "
            f"{', '.join(repr(name) for name in field_names)}. "
            "At most one field may carry each special category.",
            severity=ErrorSeverity.CRITICAL,
            context={"category": category, "fields": list(field_names)},
        )
        self.category = category
        self.field_names = list(field_names)

    def to_dict(self) -> dict[str, object]:
        data = super().to_dict()
        data["fields"] = list(self.field_names)
        data["category"] = self.category
        return data


class DuplicateFieldError(AuthoringError):
    """Raised when two field schemas share the same name.

    Fatal for the whole configuration set.
    """

    def __init__(self, field_name: str) -> None:
        super().__init__(
            field_name,
            f"Field name {field_name!r} is declared more than once.",
            severity=ErrorSeverity.CRITICAL,
        )


class UnknownFieldError(SubmissionError):
    """Raised when a submission names a field absent from the schema."""

    def __init__(self, field_name: str) -> None:
        super().__init__(field_name, f"Unknown configuration field {field_name!r}.")


class TypeMismatchError(SubmissionError):
    """Raised when a submitted value does not match the field's value type."""

    def __init__(self, field_name: str, expected: str, value: object, detail: str = "") -> None:
        message = (
            f"Field {field_name!r} expects a value of type {expected!r}, "
            f"got {type(value).__name__}."
        )
        if detail:
            message = f"{message} {detail}"
        super().__init__(field_name, message, context={"expected": expected})
        self.expected = expected


class ValidationFailedError(SubmissionError):
    """Raised when a submitted value fails the field's validator predicate.

    ``str(exc)`` is the user-facing validator message.
    """
