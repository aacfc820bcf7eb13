#!/usr/bin/env python3
"""Example: Schema Sources

Demonstrates building a configurable surface from a Pydantic model and a
dataclass, and checking it for authoring defects before deployment.

Usage:
    python examples/02_schema_sources.py

Requirements:
    pip install agentsurface-sdk
"""
from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from agentsurface import ConfigSurface, fields_from_dataclass


class ResearchAgentConfig(BaseModel):
    model: str = Field(
        default="anthropic/claude",
        json_schema_extra={
            "x_oap_ui_config": {"type": "select", "options": ["anthropic/claude", "openai/gpt"]}
        },
    )
    max_search_results: int = Field(
        default=5,
        json_schema_extra={"x_oap_ui_config": {"type": "slider", "min": 1, "max": 20}},
    )
    rag: dict = Field(default_factory=dict, json_schema_extra={"configType": "oap_rag_config"})


@dataclass
class SummariserConfig:
    summary_style: str = field(default="bullets", metadata={"uiConfig": {"type": "textarea"}})
    max_words: int = 200


def report(title: str, surface: ConfigSurface) -> None:
    result = surface.check()
    print(f"{title}: {result.status.value}")
    for defect in result.defects:
        print(f"  {defect.field_name}: {defect}")


def main() -> None:
    # The slider above has no step, so that field degrades to text
    report("ResearchAgentConfig", ConfigSurface.from_model(ResearchAgentConfig))
    report("SummariserConfig", ConfigSurface(fields_from_dataclass(SummariserConfig)))


if __name__ == "__main__":
    main()
