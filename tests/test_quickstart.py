"""Test that the quickstart API works for agentsurface-sdk."""
from __future__ import annotations


def test_quickstart_import() -> None:
    from agentsurface import ConfigSurface, FieldSchema

    surface = ConfigSurface([FieldSchema(name="system_prompt", default_value="")])
    assert surface is not None


def test_quickstart_describe() -> None:
    from agentsurface import ConfigSurface, FieldSchema, UIType, ValueType

    surface = ConfigSurface(
        [
            FieldSchema(
                name="temperature",
                value_type=ValueType.NUMBER,
                default_value=0.7,
                metadata={"x_oap_ui_config": {"type": "slider", "min": 0, "max": 2, "step": 0.1}},
            )
        ]
    )
    (descriptor,) = surface.describe()
    assert descriptor.ui_type is UIType.SLIDER
    assert descriptor.label == "Temperature"


def test_quickstart_merge() -> None:
    from agentsurface import ConfigSurface, FieldSchema, RuntimeConfig

    surface = ConfigSurface([FieldSchema(name="model", default_value="claude")])
    result = surface.merge({"model": "gpt"})
    assert isinstance(result.config, RuntimeConfig)
    assert result.config["model"] == "gpt"


def test_quickstart_functional_pipeline() -> None:
    from agentsurface import FieldSchema, build_descriptors, merge

    descriptors = build_descriptors([FieldSchema(name="top_k", default_value=4)])
    assert merge(descriptors, None, {}).config == {"top_k": 4}


def test_quickstart_version() -> None:
    import agentsurface

    assert agentsurface.__version__ == "0.1.0"


def test_quickstart_repr() -> None:
    from agentsurface import ConfigSurface, FieldSchema

    surface = ConfigSurface([FieldSchema(name="model")])
    assert "ConfigSurface" in repr(surface)
    assert "RuntimeConfig" in repr(surface.merge({}).config)
