"""Configuration categories and the value shapes of the special categories.

Two reserved ``configType`` tokens mark the fields that configure tool access
(MCP) and retrieval (RAG).  Any other field is a general parameter.

Shipped in this module
----------------------
- MCP_TOOLS_TOKEN / RAG_TOKEN — reserved ``configType`` strings
- ConfigCategory              — GENERAL / MCP_TOOLS / RAG / UNCATEGORIZED
- McpToolsConfig              — value shape of the MCP_TOOLS field
- RagConfig                   — value shape of the RAG field
"""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

MCP_TOOLS_TOKEN: str = "oap_mcp_tools_config"
RAG_TOKEN: str = "oap_rag_config"


class ConfigCategory(str, Enum):
    """Functional role of a configurable field.

    GENERAL       — ordinary parameter.
    MCP_TOOLS     — the single tool-access configuration field.
    RAG           — the single retrieval configuration field.
    UNCATEGORIZED — the field's category annotation could not be read.
    """

    GENERAL = "general"
    MCP_TOOLS = "mcp_tools"
    RAG = "rag"
    UNCATEGORIZED = "uncategorized"

    @property
    def is_special(self) -> bool:
        return self in (ConfigCategory.MCP_TOOLS, ConfigCategory.RAG)

    @classmethod
    def from_token(cls, token: str | None) -> ConfigCategory:
        """Map a ``configType`` token to its category; anything else is GENERAL."""
        return _TOKEN_TO_CATEGORY.get(token or "", cls.GENERAL)


_TOKEN_TO_CATEGORY: dict[str, ConfigCategory] = {
    MCP_TOOLS_TOKEN: ConfigCategory.MCP_TOOLS,
    RAG_TOKEN: ConfigCategory.RAG,
}

RECOGNIZED_TOKENS: frozenset[str] = frozenset(_TOKEN_TO_CATEGORY)


class McpToolsConfig(BaseModel):
    """Value carried by the MCP_TOOLS field: which server and which tools."""

    model_config = ConfigDict(extra="allow")

    url: str | None = None
    tools: list[str] = Field(default_factory=list)
    auth_required: bool = False


class RagConfig(BaseModel):
    """Value carried by the RAG field: which retrieval service and collections."""

    model_config = ConfigDict(extra="allow")

    rag_url: str | None = None
    collections: list[str] = Field(default_factory=list)


CATEGORY_VALUE_MODELS: dict[ConfigCategory, type[BaseModel]] = {
    ConfigCategory.MCP_TOOLS: McpToolsConfig,
    ConfigCategory.RAG: RagConfig,
}
