"""Text embeddings tool backed by ``POST /embeddings``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from ...core.context import ExecutionContext
from ...core.items import Item, ResultItem
from ...core.schema import ParameterSpec, ParameterType, ToolDescriptor, option_values
from ..api.base import APIResponse, RequestDescriptor, UpstreamError
from ..api.venice import VeniceClient
from .runner import run_tool

DEFAULT_MODEL = "text-embedding-bge-m3"
DEFAULT_ENCODING_FORMAT = "float"

DESCRIPTOR = ToolDescriptor(
    tool_id="venice_embeddings",
    node_name="veniceEmbeddingsTool",
    display_name="Venice Embeddings Tool",
    description="Generate text embeddings for semantic search and RAG using Venice AI",
    default_name="Venice Embeddings",
    documentation_url="https://docs.venice.ai/api-reference/endpoint/embeddings",
    parameters=(
        ParameterSpec(
            name="input",
            display_name="Text",
            type=ParameterType.STRING,
            default="",
            required=True,
            description="The text to generate embeddings for",
            rows=4,
        ),
        ParameterSpec(
            name="model",
            display_name="Model",
            type=ParameterType.OPTIONS,
            default=DEFAULT_MODEL,
            description="The embedding model to use",
            options=option_values(("BGE-M3", "text-embedding-bge-m3"), ("Ada 002", "text-embedding-ada-002")),
        ),
        ParameterSpec(
            name="options",
            display_name="Options",
            type=ParameterType.COLLECTION,
            default={},
            placeholder="Add Option",
            children=(
                ParameterSpec(
                    name="encoding_format",
                    display_name="Encoding Format",
                    type=ParameterType.OPTIONS,
                    default=DEFAULT_ENCODING_FORMAT,
                    description="The format to return embeddings in",
                    options=option_values(("Float", "float"), ("Base64", "base64")),
                ),
            ),
        ),
    ),
)


@dataclass(slots=True)
class VeniceEmbeddingsTool:
    client: Optional[VeniceClient] = None

    @property
    def tool_id(self) -> str:
        return DESCRIPTOR.tool_id

    def describe(self) -> ToolDescriptor:
        return DESCRIPTOR

    def build_request(self, params: Mapping[str, Any], item: Item, index: int) -> RequestDescriptor:
        options = params.get("options") or {}
        body = {
            "model": params["model"],
            "input": params["input"],
            "encoding_format": options.get("encoding_format") or DEFAULT_ENCODING_FORMAT,
        }
        return RequestDescriptor(method="POST", path="/embeddings", json_body=body)

    def shape_result(self, params: Mapping[str, Any], item: Item, index: int, response: APIResponse) -> ResultItem:
        payload = response.json()
        if not isinstance(payload, Mapping):
            raise UpstreamError("Unexpected payload from Venice embeddings endpoint.", status_code=response.status_code)
        return ResultItem(
            json={
                "success": True,
                "model": params["model"],
                "inputLength": len(params["input"]),
                **payload,
            },
            paired_item=index,
        )

    def execute(self, items: Sequence[Item], context: ExecutionContext) -> List[List[ResultItem]]:
        return run_tool(self, items, context)
