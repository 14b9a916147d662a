from __future__ import annotations

import json

import pytest

from venice_ai_tools.adapters.tools import TOOL_CLASSES, build_default_registry
from venice_ai_tools.adapters.tools.chat import DESCRIPTOR as CHAT_DESCRIPTOR
from venice_ai_tools.core.registry import ToolRegistry
from venice_ai_tools.core.schema import ParameterSpec, ParameterType, SchemaError, ToolDescriptor, option_values

EXPECTED_TOOLS = {
    "venice_chat",
    "venice_embeddings",
    "venice_image_generate",
    "venice_image_upscale",
    "venice_list_characters",
    "venice_list_models",
    "venice_text_to_speech",
}


def _descriptor(*parameters: ParameterSpec, tool_id: str = "sample_tool") -> ToolDescriptor:
    return ToolDescriptor(
        tool_id=tool_id,
        node_name="sampleTool",
        display_name="Sample Tool",
        description="Sample",
        default_name="Sample",
        documentation_url="https://example.com",
        parameters=parameters,
    )


def test_default_registry_contains_every_tool():
    registry = build_default_registry()

    assert len(registry) == len(TOOL_CLASSES) == 7
    assert {descriptor.tool_id for descriptor in registry.iter_descriptors()} == EXPECTED_TOOLS


def test_every_descriptor_is_stable_and_valid():
    for descriptor in build_default_registry().iter_descriptors():
        descriptor.validate()
        assert descriptor.credentials[0].name == "veniceAiApi"
        assert descriptor.usable_as_tool is True
        assert descriptor.to_json() == descriptor.to_json()


def test_descriptor_serialises_like_a_node_definition():
    payload = json.loads(CHAT_DESCRIPTOR.to_json())

    assert payload["name"] == "veniceChatTool"
    assert payload["codex"]["categories"] == ["AI"]
    assert payload["credentials"] == [{"name": "veniceAiApi", "required": True}]
    message = payload["properties"][0]
    assert message["name"] == "message"
    assert message["required"] is True
    options = next(item for item in payload["properties"] if item["name"] == "options")
    assert options["type"] == "collection"
    assert {child["name"] for child in options["options"]} >= {"system_prompt", "temperature"}


def test_required_parameters_are_listed():
    assert [parameter.name for parameter in CHAT_DESCRIPTOR.iter_required()] == ["message"]


def test_options_default_must_be_allowed():
    descriptor = _descriptor(
        ParameterSpec(name="scale", display_name="Scale", type=ParameterType.OPTIONS, default=3, options=option_values(("2x", 2), ("4x", 4)))
    )

    with pytest.raises(SchemaError):
        descriptor.validate()


def test_duplicate_parameters_are_rejected():
    descriptor = _descriptor(
        ParameterSpec(name="prompt", display_name="Prompt", type=ParameterType.STRING),
        ParameterSpec(name="prompt", display_name="Prompt again", type=ParameterType.STRING),
    )

    with pytest.raises(SchemaError):
        descriptor.validate()


def test_children_require_collection_type():
    descriptor = _descriptor(
        ParameterSpec(
            name="prompt",
            display_name="Prompt",
            type=ParameterType.STRING,
            children=(ParameterSpec(name="x", display_name="X", type=ParameterType.STRING),),
        )
    )

    with pytest.raises(SchemaError):
        descriptor.validate()


def test_invalid_tool_id_is_rejected():
    with pytest.raises(SchemaError):
        _descriptor(tool_id="not-an-identifier").validate()


def test_registry_require_lists_known_tools():
    registry = build_default_registry()

    with pytest.raises(KeyError) as excinfo:
        registry.require("venice_video")

    assert "venice_chat" in str(excinfo.value)


def test_registry_unregister():
    registry = ToolRegistry()
    registry.register(TOOL_CLASSES[0]())
    tool_id = TOOL_CLASSES[0]().tool_id

    assert tool_id in registry
    registry.unregister(tool_id)
    assert tool_id not in registry
    assert registry.list() == []
