"""Authoring report for a configuration schema.

Summarises whether an agent's configurable surface is fit to deploy: every
recoverable per-field defect is listed, and fatal classification defects
mark the whole set invalid.

Shipped in this module
----------------------
- SurfaceStatus — ordered enum: VALID / DEGRADED / INVALID
- SurfaceReport — status, descriptors (when buildable) and defects
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from agentsurface.schema.descriptor import DescriptorSet
from agentsurface.schema.errors import AuthoringError


class SurfaceStatus(str, Enum):
    """Ordered surface status values.

    VALID    — no defects.
    DEGRADED — some fields fall back to plain text; the agent can still deploy.
    INVALID  — the configuration set violates a cross-field invariant.
    """

    VALID = "valid"
    DEGRADED = "degraded"
    INVALID = "invalid"


@dataclass
class SurfaceReport:
    """Aggregate authoring report.

    Attributes
    ----------
    status:
        Worst status across all defects.
    descriptors:
        The descriptor set, or ``None`` when the set is INVALID.
    defects:
        Authoring defects, fatal ones included.
    timestamp:
        UTC time when the report was generated.
    """

    status: SurfaceStatus
    descriptors: DescriptorSet | None = None
    defects: list[AuthoringError] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @classmethod
    def from_descriptors(cls, descriptors: DescriptorSet) -> SurfaceReport:
        defects = descriptors.defects
        status = SurfaceStatus.DEGRADED if defects else SurfaceStatus.VALID
        return cls(status=status, descriptors=descriptors, defects=defects)

    @classmethod
    def from_fatal(cls, error: AuthoringError) -> SurfaceReport:
        return cls(status=SurfaceStatus.INVALID, defects=[error])

    def is_valid(self) -> bool:
        """Return ``True`` iff there are no defects at all."""
        return self.status is SurfaceStatus.VALID

    def blocks_deployment(self) -> bool:
        return self.status is SurfaceStatus.INVALID

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain dict suitable for JSON encoding."""
        return {
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "defects": [defect.to_dict() for defect in self.defects],
            "descriptors": self.descriptors.to_dict() if self.descriptors is not None else None,
        }
