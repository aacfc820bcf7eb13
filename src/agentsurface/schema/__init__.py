"""Schema package for agentsurface-sdk.

Exports the data model: field schemas and their typed annotations,
categories, descriptors, and the error taxonomy.
"""
from __future__ import annotations

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

__all__ = [
    # Fields
    "MISSING",
    "FieldSchema",
    "ValueType",
    "UIType",
    "UIConfig",
    "Validator",
    # Categories
    "ConfigCategory",
    "MCP_TOOLS_TOKEN",
    "RAG_TOKEN",
    "McpToolsConfig",
    "RagConfig",
    # Descriptors
    "FieldDescriptor",
    "DescriptorSet",
    # Errors
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
]
