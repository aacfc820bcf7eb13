"""Loaders for engine settings and agent schema documents.

``SettingsLoader`` resolves :class:`SurfaceSettings` from YAML files, JSON
files, environment variables, or auto-discovers the first available source
by searching well-known paths.  ``SchemaLoader`` reads agent configuration
schema documents (field lists or JSON Schema) into field schemas.

Shipped in this module
----------------------
- validate_settings — raw dict → SurfaceSettings, wrapping pydantic errors
- SettingsLoader    — multi-source settings loader with auto-discovery
- SchemaLoader      — YAML / JSON schema document loader
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from agentsurface.config.defaults import DEFAULT_SETTINGS
from agentsurface.config.settings import SurfaceSettings
from agentsurface.schema.errors import ConfigurationError
from agentsurface.schema.field import FieldSchema
from agentsurface.sources import fields_from_any

logger = logging.getLogger(__name__)

# Ordered list of paths searched by load_auto()
_AUTO_SEARCH_PATHS: tuple[str, ...] = (
    "agentsurface.yaml",
    "agentsurface.yml",
    "agentsurface.json",
    ".agentsurface.yaml",
    ".agentsurface.yml",
    ".agentsurface.json",
)


def validate_settings(data: dict[str, object]) -> SurfaceSettings:
    """Validate a raw dict against the ``SurfaceSettings`` schema.

    Raises
    ------
    ConfigurationError
        If the data fails Pydantic validation.  The original
        ``ValidationError`` is attached as the ``__cause__``.

    Examples
    --------
    >>> validate_settings({"max_predicate_nodes": 64}).max_predicate_nodes
    64
    """
    try:
        return SurfaceSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Settings validation failed: {exc}",
            context={"errors": exc.errors(include_url=False)},
        ) from exc


def _read_document(path: str | Path) -> Any:  # noqa: ANN401
    """Parse a YAML or JSON file, chosen by suffix (YAML when unknown)."""
    resolved = Path(path)
    if not resolved.exists():
        raise ConfigurationError(
            f"File not found: {resolved}",
            context={"path": str(resolved)},
        )
    try:
        with resolved.open(encoding="utf-8") as fh:
            if resolved.suffix == ".json":
                return json.load(fh)
            return yaml.safe_load(fh)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(
            f"Failed to parse {resolved}: {exc}",
            context={"path": str(resolved)},
        ) from exc


class SettingsLoader:
    """Loads ``SurfaceSettings`` from multiple sources.

    Examples
    --------
    >>> loader = SettingsLoader()
    >>> loader.load_env(prefix="AGENTSURFACE_TEST_UNUSED_").max_predicate_nodes
    256
    """

    def load_yaml(self, path: str | Path) -> SurfaceSettings:
        """Load settings from a YAML file.

        Raises
        ------
        ConfigurationError
            If the file cannot be read or fails validation.
        """
        raw = _read_document(path)
        data: dict[str, object] = dict(raw) if isinstance(raw, dict) else {}
        logger.debug("Loaded YAML settings from %s", path)
        return validate_settings(data)

    def load_json(self, path: str | Path) -> SurfaceSettings:
        """Load settings from a JSON file.

        Raises
        ------
        ConfigurationError
            If the file cannot be read or fails validation.
        """
        raw = _read_document(path)
        data = dict(raw) if isinstance(raw, dict) else {}
        logger.debug("Loaded JSON settings from %s", path)
        return validate_settings(data)

    def load_env(self, prefix: str = "AGENTSURFACE_") -> SurfaceSettings:
        """Build settings from environment variables.

        See :meth:`SurfaceSettings.from_env` for variable mapping rules.
        """
        try:
            settings = SurfaceSettings.from_env(prefix=prefix)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid settings in environment (prefix {prefix!r}): {exc}",
                context={"prefix": prefix},
            ) from exc
        logger.debug("Loaded settings from environment with prefix %r", prefix)
        return settings

    def load_auto(
        self,
        search_dir: str | Path | None = None,
        env_prefix: str = "AGENTSURFACE_",
    ) -> SurfaceSettings:
        """Auto-discover and load settings.

        Discovery order:

        1. Search *search_dir* (defaults to ``cwd``) for ``agentsurface.yaml``,
           ``agentsurface.yml``, ``agentsurface.json``, and hidden variants.
        2. Overlay environment variables from *env_prefix* on top.
        3. Fall back to ``DEFAULT_SETTINGS`` if nothing is found.
        """
        base_dir = Path(search_dir) if search_dir is not None else Path.cwd()
        settings: SurfaceSettings | None = None

        for candidate_name in _AUTO_SEARCH_PATHS:
            candidate = base_dir / candidate_name
            if not candidate.exists():
                continue
            try:
                if candidate.suffix in {".yaml", ".yml"}:
                    settings = self.load_yaml(candidate)
                else:
                    settings = self.load_json(candidate)
                logger.info("Auto-loaded agentsurface settings from %s", candidate)
                break
            except ConfigurationError:
                logger.warning("Could not load settings from %s; trying next.", candidate)

        if settings is None:
            settings = DEFAULT_SETTINGS
            logger.debug("No settings file found; using DEFAULT_SETTINGS.")

        if any(key.startswith(env_prefix) for key in os.environ):
            settings = settings.merge(self.load_env(prefix=env_prefix))
            logger.debug("Applied environment variable overlay.")

        return settings


class SchemaLoader:
    """Reads agent schema documents into ordered field schemas.

    A document is either a list of raw field definitions, a mapping with a
    ``fields`` list, or a JSON Schema object with ``properties``.
    """

    def load(self, path: str | Path) -> list[FieldSchema]:
        """Load a schema document from a YAML or JSON file.

        Raises
        ------
        ConfigurationError
            If the file is missing, unparsable, or of the wrong shape.
        """
        fields = self.load_data(_read_document(path))
        logger.debug("Loaded %d field schema(s) from %s", len(fields), path)
        return fields

    def load_data(self, document: Any) -> list[FieldSchema]:  # noqa: ANN401
        """Build field schemas from an already-parsed document."""
        if document is None:
            raise ConfigurationError("Schema document is empty.")
        return fields_from_any(document)


def load_document(path: str | Path) -> Any:  # noqa: ANN401
    """Parse a YAML or JSON data file (used for submissions and previous configs)."""
    return _read_document(path)
