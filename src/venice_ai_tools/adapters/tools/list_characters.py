"""Character persona listing tool backed by ``GET /characters``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ...core.context import ExecutionContext
from ...core.items import Item, ResultItem
from ...core.schema import ParameterSpec, ParameterType, ToolDescriptor
from ..api.base import APIResponse, RequestDescriptor
from ..api.venice import VeniceClient
from .runner import run_tool

DEFAULT_LIMIT = 20
CHARACTER_FIELDS = ("id", "name", "description", "slug", "avatar_url")

DESCRIPTOR = ToolDescriptor(
    tool_id="venice_list_characters",
    node_name="veniceListCharactersTool",
    display_name="Venice List Characters Tool",
    description="List available Venice AI character personas for roleplay",
    default_name="Venice List Characters",
    documentation_url="https://docs.venice.ai/api-reference/endpoint/characters",
    parameters=(
        ParameterSpec(
            name="limit",
            display_name="Limit",
            type=ParameterType.NUMBER,
            default=DEFAULT_LIMIT,
            description="Maximum number of characters to return",
            min_value=1,
            max_value=100,
        ),
    ),
)


def format_characters(payload: Any) -> List[Dict[str, Any]]:
    # the endpoint has returned both {"data": [...]} and a bare list
    records = payload.get("data") if isinstance(payload, Mapping) else payload
    if not isinstance(records, list):
        return []
    return [{field: record.get(field) for field in CHARACTER_FIELDS} for record in records if isinstance(record, Mapping)]


@dataclass(slots=True)
class VeniceListCharactersTool:
    client: Optional[VeniceClient] = None

    @property
    def tool_id(self) -> str:
        return DESCRIPTOR.tool_id

    def describe(self) -> ToolDescriptor:
        return DESCRIPTOR

    def build_request(self, params: Mapping[str, Any], item: Item, index: int) -> RequestDescriptor:
        limit = params.get("limit")
        return RequestDescriptor(method="GET", path="/characters", params={"limit": DEFAULT_LIMIT if limit is None else limit})

    def shape_result(self, params: Mapping[str, Any], item: Item, index: int, response: APIResponse) -> ResultItem:
        characters = format_characters(response.json())
        return ResultItem(
            json={"success": True, "count": len(characters), "characters": characters},
            paired_item=index,
        )

    def execute(self, items: Sequence[Item], context: ExecutionContext) -> List[List[ResultItem]]:
        return run_tool(self, items, context)
