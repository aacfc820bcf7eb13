"""Descriptor pipeline: extractor → classifier → normalizer."""
from __future__ import annotations

from collections.abc import Iterable

from agentsurface.pipeline.classifier import ClassifiedField, classify
from agentsurface.pipeline.extractor import ExtractedField, extract_field, extract_metadata
from agentsurface.pipeline.normalizer import check_component_props, humanize, normalize
from agentsurface.schema.descriptor import DescriptorSet
from agentsurface.schema.field import FieldSchema


def build_descriptors(fields: Iterable[FieldSchema]) -> DescriptorSet:
    """Run the full pipeline over *fields*.

    Raises
    ------
    DuplicateCategoryError, DuplicateFieldError
        When the configuration set as a whole is invalid.
    """
    return normalize(classify(extract_metadata(fields)))


__all__ = [
    "ClassifiedField",
    "ExtractedField",
    "build_descriptors",
    "check_component_props",
    "classify",
    "extract_field",
    "extract_metadata",
    "humanize",
    "normalize",
]
