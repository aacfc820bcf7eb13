#!/usr/bin/env python3
"""Example: Quickstart

Demonstrates describing an agent's configurable fields and merging a user
submission with the ConfigSurface convenience class.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install agentsurface-sdk
"""
from __future__ import annotations

import agentsurface
from agentsurface import ConfigSurface, FieldSchema, ValueType


def build_surface() -> ConfigSurface:
    return ConfigSurface(
        [
            FieldSchema(name="system_prompt", default_value="You are a helpful assistant."),
            FieldSchema(
                name="temperature",
                value_type=ValueType.NUMBER,
                default_value=0.7,
                metadata={
                    "x_oap_ui_config": {
                        "type": "slider",
                        "min": 0,
                        "max": 2,
                        "step": 0.1,
                        "validator": {
                            "predicateSource": "value >= 0 && value <= 2",
                            "message": "Temperature must be between 0 and 2",
                        },
                    }
                },
            ),
            FieldSchema(
                name="mcp_config",
                value_type=ValueType.OBJECT,
                default_value={"url": "", "tools": []},
                metadata={"configType": "oap_mcp_tools_config"},
            ),
        ]
    )


def main() -> None:
    print(f"agentsurface-sdk version: {agentsurface.__version__}")

    # Step 1: Describe the surface the UI should render
    surface = build_surface()
    descriptors = surface.describe()
    for descriptor in descriptors.general():
        print(f"  {descriptor.name}: {descriptor.ui_type.value} (default {descriptor.effective_default!r})")
    if descriptors.mcp_tools is not None:
        print(f"  MCP tools panel bound to: {descriptors.mcp_tools.name}")

    # Step 2: Merge a submission with one bad value
    result = surface.merge({"temperature": 3, "system_prompt": "Answer briefly."})
    print(f"\nMerged config: {result.config.to_dict()}")
    for error in result.rejections:
        print(f"  rejected {error.field_name}: {error}")

    # Step 3: Update the stored config
    updated = surface.merge({"temperature": 1.5}, previous=result.config)
    print(f"Updated temperature: {updated.config['temperature']}")


if __name__ == "__main__":
    main()
