"""Config package for agentsurface-sdk.

Provides engine settings, their loaders, and sensible defaults.
"""
from __future__ import annotations

from agentsurface.config.defaults import DEFAULT_SETTINGS
from agentsurface.config.loader import SchemaLoader, SettingsLoader, validate_settings
from agentsurface.config.settings import SurfaceSettings

__all__ = [
    "SurfaceSettings",
    "validate_settings",
    "SettingsLoader",
    "SchemaLoader",
    "DEFAULT_SETTINGS",
]
