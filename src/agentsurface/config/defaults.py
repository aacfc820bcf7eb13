"""Default engine settings for agentsurface-sdk.

``DEFAULT_SETTINGS`` is the starting point used by
``SettingsLoader.load_auto()`` before applying file or environment overrides,
and the settings every component falls back to when given none.
"""
from __future__ import annotations

from agentsurface.config.settings import SurfaceSettings

DEFAULT_SETTINGS: SurfaceSettings = SurfaceSettings(
    max_predicate_length=2000,
    max_predicate_nodes=256,
    max_predicate_int_bits=4096,
    predicate_cache_size=1024,
    validate_category_values=True,
    skip_validator_for_unchanged=True,
)
"""Baseline ``SurfaceSettings`` used when no file or env settings are present."""
