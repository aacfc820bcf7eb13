"""agentsurface-sdk — describe, validate and merge an agent's configurable surface.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Quick-start
-----------
>>> import agentsurface
>>> agentsurface.__version__
'0.1.0'

>>> from agentsurface import ConfigSurface, FieldSchema, ValueType
>>> surface = ConfigSurface([
...     FieldSchema(
...         "temperature",
...         ValueType.NUMBER,
...         0,
...         {"uiConfig": {
...             "type": "slider",
...             "componentProps": {"min": 0, "max": 2, "step": 0.1},
...             "validator": {"predicateSource": "value >= 0 && value <= 2"},
...         }},
...     ),
... ])
>>> surface.describe()[0].ui_type.value
'slider'
>>> surface.merge({"temperature": 1.5}).config["temperature"]
1.5
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------
from agentsurface.schema.category import (
    MCP_TOOLS_TOKEN,
    RAG_TOKEN,
    ConfigCategory,
    McpToolsConfig,
    RagConfig,
)
from agentsurface.schema.descriptor import DescriptorSet, FieldDescriptor
from agentsurface.schema.errors import (
    AgentSurfaceError,
    AuthoringError,
    ConfigurationError,
    DefectKind,
    DuplicateCategoryError,
    DuplicateFieldError,
    ErrorSeverity,
    InvalidComponentPropsError,
    MalformedMetadataError,
    SubmissionError,
    TypeMismatchError,
    UnknownFieldError,
    ValidationFailedError,
)
from agentsurface.schema.field import MISSING, FieldSchema, UIConfig, UIType, Validator, ValueType

# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------
from agentsurface.pipeline import build_descriptors, classify, extract_metadata, normalize

# ---------------------------------------------------------------------------
# Validation and merge
# ---------------------------------------------------------------------------
from agentsurface.validation.engine import (
    PredicateCompileError,
    ValidationResult,
    ValidatorEngine,
)
from agentsurface.merge.merger import MergeResult, RuntimeMerger, merge
from agentsurface.merge.runtime import RuntimeConfig

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
from agentsurface.config.defaults import DEFAULT_SETTINGS
from agentsurface.config.loader import SchemaLoader, SettingsLoader
from agentsurface.config.settings import SurfaceSettings

# ---------------------------------------------------------------------------
# Sources, report and facade
# ---------------------------------------------------------------------------
from agentsurface.sources import (
    fields_from_dataclass,
    fields_from_definitions,
    fields_from_json_schema,
    fields_from_model,
)
from agentsurface.report import SurfaceReport, SurfaceStatus
from agentsurface.surface import ConfigSurface

__all__ = [
    "__version__",
    "ConfigSurface",
    # schema — fields
    "MISSING",
    "FieldSchema",
    "ValueType",
    "UIType",
    "UIConfig",
    "Validator",
    # schema — categories
    "ConfigCategory",
    "MCP_TOOLS_TOKEN",
    "RAG_TOKEN",
    "McpToolsConfig",
    "RagConfig",
    # schema — descriptors
    "FieldDescriptor",
    "DescriptorSet",
    # schema — errors
    "ErrorSeverity",
    "DefectKind",
    "AgentSurfaceError",
    "ConfigurationError",
    "AuthoringError",
    "SubmissionError",
    "MalformedMetadataError",
    "InvalidComponentPropsError",
    "DuplicateCategoryError",
    "DuplicateFieldError",
    "UnknownFieldError",
    "TypeMismatchError",
    "ValidationFailedError",
    # pipeline
    "build_descriptors",
    "extract_metadata",
    "classify",
    "normalize",
    # validation
    "ValidatorEngine",
    "ValidationResult",
    "PredicateCompileError",
    # merge
    "RuntimeConfig",
    "RuntimeMerger",
    "MergeResult",
    "merge",
    # config
    "SurfaceSettings",
    "DEFAULT_SETTINGS",
    "SettingsLoader",
    "SchemaLoader",
    # sources
    "fields_from_definitions",
    "fields_from_json_schema",
    "fields_from_model",
    "fields_from_dataclass",
    # report
    "SurfaceReport",
    "SurfaceStatus",
]
