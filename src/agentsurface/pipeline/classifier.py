"""Category classifier.

Walks the extracted fields once, tags each with a
:class:`~agentsurface.schema.category.ConfigCategory`, and enforces the
cross-field invariants: field names are unique, and at most one field
carries each special category.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from agentsurface.pipeline.extractor import ExtractedField
from agentsurface.schema.category import ConfigCategory
from agentsurface.schema.errors import DuplicateCategoryError, DuplicateFieldError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifiedField:
    """An extracted field tagged with its category."""

    extracted: ExtractedField
    category: ConfigCategory

    @property
    def name(self) -> str:
        return self.extracted.name


def classify(extracted: Sequence[ExtractedField]) -> list[ClassifiedField]:
    """Tag every field with its category, preserving order.

    Raises
    ------
    DuplicateFieldError
        If two fields share a name.
    DuplicateCategoryError
        If more than one field declares the same special category.
    """
    seen_names: set[str] = set()
    claimed: dict[ConfigCategory, list[str]] = {
        ConfigCategory.MCP_TOOLS: [],
        ConfigCategory.RAG: [],
    }
    classified: list[ClassifiedField] = []

    for item in extracted:
        if item.name in seen_names:
            raise DuplicateFieldError(item.name)
        seen_names.add(item.name)

        if item.config_type_malformed:
            category = ConfigCategory.UNCATEGORIZED
        else:
            category = ConfigCategory.from_token(item.config_type)

        if category.is_special:
            claimed[category].append(item.name)
            if len(claimed[category]) > 1:
                raise DuplicateCategoryError(category.value, claimed[category])

        classified.append(ClassifiedField(extracted=item, category=category))

    logger.debug(
        "Classified %d field(s); mcp_tools=%s rag=%s",
        len(classified),
        claimed[ConfigCategory.MCP_TOOLS] or None,
        claimed[ConfigCategory.RAG] or None,
    )
    return classified
