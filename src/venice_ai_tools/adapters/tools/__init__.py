"""
Venice AI tool adapters, one per provider endpoint.

Every adapter exposes ``describe()`` returning its
:class:`~venice_ai_tools.core.schema.ToolDescriptor` and
``execute(items, context)`` returning a single output group with one result per
input item.
"""

from ...core.registry import ToolRegistry
from .chat import VeniceChatTool
from .embeddings import VeniceEmbeddingsTool
from .image_generate import VeniceImageGenerateTool
from .image_upscale import VeniceImageUpscaleTool
from .list_characters import VeniceListCharactersTool
from .list_models import VeniceListModelsTool
from .runner import collect_results, run_tool
from .text_to_speech import VeniceTextToSpeechTool

TOOL_CLASSES = (
    VeniceChatTool,
    VeniceEmbeddingsTool,
    VeniceImageGenerateTool,
    VeniceImageUpscaleTool,
    VeniceListCharactersTool,
    VeniceListModelsTool,
    VeniceTextToSpeechTool,
)


def build_default_registry() -> ToolRegistry:
    """Return a registry holding one instance of every Venice tool."""

    registry = ToolRegistry()
    for tool_class in TOOL_CLASSES:
        registry.register(tool_class())
    return registry


__all__ = [
    "TOOL_CLASSES",
    "VeniceChatTool",
    "VeniceEmbeddingsTool",
    "VeniceImageGenerateTool",
    "VeniceImageUpscaleTool",
    "VeniceListCharactersTool",
    "VeniceListModelsTool",
    "VeniceTextToSpeechTool",
    "build_default_registry",
    "collect_results",
    "run_tool",
]
