"""Model listing tool backed by ``GET /models``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ...core.context import ExecutionContext
from ...core.items import Item, ResultItem
from ...core.schema import ParameterSpec, ParameterType, ToolDescriptor, option_values
from ..api.base import APIResponse, RequestDescriptor
from ..api.venice import VeniceClient
from .runner import run_tool

ALL_TYPES = "all"
MODEL_FIELDS = ("id", "type", "object", "created")

DESCRIPTOR = ToolDescriptor(
    tool_id="venice_list_models",
    node_name="veniceListModelsTool",
    display_name="Venice List Models Tool",
    description="List available Venice AI models by type",
    default_name="Venice List Models",
    documentation_url="https://docs.venice.ai/api-reference/endpoint/models",
    parameters=(
        ParameterSpec(
            name="type",
            display_name="Type Filter",
            type=ParameterType.OPTIONS,
            default=ALL_TYPES,
            description="Filter models by type",
            options=option_values(
                ("All", "all"),
                ("Text/Chat", "text"),
                ("Image", "image"),
                ("Embedding", "embedding"),
                ("TTS (Text-to-Speech)", "tts"),
                ("ASR (Speech-to-Text)", "asr"),
                ("Upscale", "upscale"),
            ),
        ),
    ),
)


def build_query(model_type: Optional[str]) -> Dict[str, str]:
    """``{}`` for the ``all`` filter, ``{"type": model_type}`` otherwise."""

    if not model_type or model_type == ALL_TYPES:
        return {}
    return {"type": model_type}


def format_models(payload: Any) -> List[Dict[str, Any]]:
    records = payload.get("data") if isinstance(payload, Mapping) else None
    if not isinstance(records, list):
        return []
    return [{field: record.get(field) for field in MODEL_FIELDS} for record in records if isinstance(record, Mapping)]


@dataclass(slots=True)
class VeniceListModelsTool:
    client: Optional[VeniceClient] = None

    @property
    def tool_id(self) -> str:
        return DESCRIPTOR.tool_id

    def describe(self) -> ToolDescriptor:
        return DESCRIPTOR

    def build_request(self, params: Mapping[str, Any], item: Item, index: int) -> RequestDescriptor:
        return RequestDescriptor(method="GET", path="/models", params=build_query(params.get("type")))

    def shape_result(self, params: Mapping[str, Any], item: Item, index: int, response: APIResponse) -> ResultItem:
        models = format_models(response.json())
        return ResultItem(
            json={"success": True, "filter": params.get("type"), "count": len(models), "models": models},
            paired_item=index,
        )

    def execute(self, items: Sequence[Item], context: ExecutionContext) -> List[List[ResultItem]]:
        return run_tool(self, items, context)
