"""Engine settings for agentsurface-sdk.

``SurfaceSettings`` is a Pydantic v2 model that tunes the engine itself (the
predicate sandbox budget, cache size, merge policies).  It is the validated
boundary between raw sources (YAML files, environment variables, in-memory
dicts) and the rest of the SDK; it never holds agent configuration values.

Shipped in this module
----------------------
- SurfaceSettings — Pydantic v2 model with class-method loaders
"""
from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field


class SurfaceSettings(BaseModel):
    """Validated engine settings.

    All fields have sensible defaults so the engine works with zero
    configuration.

    Parameters
    ----------
    max_predicate_length:
        Longest accepted validator source, in characters.
    max_predicate_nodes:
        Largest accepted validator syntax tree, in nodes.
    max_predicate_int_bits:
        Largest integer, in bits, that validator arithmetic may produce.
        Together with the node limit this bounds evaluation work: the
        grammar has no unbounded loops, and integer size is the one cost
        that grows faster than the tree.
    predicate_cache_size:
        Number of compiled predicates kept per engine.
    validate_category_values:
        Check MCP / RAG field submissions against their value shapes.
    skip_validator_for_unchanged:
        Only run validators for values that differ from the field's
        effective default or previous value.
    """

    model_config = {"extra": "forbid", "frozen": True}

    max_predicate_length: int = Field(default=2000, gt=0)
    max_predicate_nodes: int = Field(default=256, gt=0)
    max_predicate_int_bits: int = Field(default=4096, gt=0)
    predicate_cache_size: int = Field(default=1024, gt=0)
    validate_category_values: bool = Field(default=True)
    skip_validator_for_unchanged: bool = Field(default=True)

    # ------------------------------------------------------------------
    # Class-method loaders
    # ------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: str | Path) -> SurfaceSettings:
        """Load and validate settings from a YAML file.

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist.
        pydantic.ValidationError
            If the parsed data fails validation.
        """
        resolved = Path(path)
        if not resolved.exists():
            raise FileNotFoundError(f"Settings file not found: {resolved}")
        with resolved.open(encoding="utf-8") as fh:
            raw: object = yaml.safe_load(fh)
        data: dict[str, object] = dict(raw) if isinstance(raw, dict) else {}
        return cls.model_validate(data)

    @classmethod
    def from_env(cls, prefix: str = "AGENTSURFACE_") -> SurfaceSettings:
        """Build settings from environment variables.

        ``AGENTSURFACE_MAX_PREDICATE_NODES=64`` maps to
        ``max_predicate_nodes=64``.  Boolean values accept ``"true"`` /
        ``"1"`` / ``"yes"`` as truthy and anything else as falsy.
        Variables that do not name a setting are ignored.
        """
        data: dict[str, object] = {}
        bool_fields = {"validate_category_values", "skip_validator_for_unchanged"}

        for raw_key, raw_value in os.environ.items():
            if not raw_key.startswith(prefix):
                continue
            key = raw_key[len(prefix):].lower()
            if key not in cls.model_fields:
                continue
            if key in bool_fields:
                data[key] = raw_value.lower() in {"true", "1", "yes"}
            else:
                data[key] = raw_value

        return cls.model_validate(data)

    def merge(self, overrides: SurfaceSettings) -> SurfaceSettings:
        """Return new settings where the non-default values of *overrides* win."""
        defaults = SurfaceSettings().model_dump()
        merged = self.model_dump()
        for key, value in overrides.model_dump().items():
            if value != defaults[key]:
                merged[key] = value
        return SurfaceSettings.model_validate(merged)
