"""
Chat completion tool backed by ``POST /chat/completions``.

Sends a single user message (optionally preceded by a system prompt) and
returns the first choice's content together with the token usage counters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ...core.context import ExecutionContext
from ...core.items import Item, ResultItem
from ...core.schema import ParameterSpec, ParameterType, ToolDescriptor, option_values
from ..api.base import APIResponse, RequestDescriptor
from ..api.venice import VeniceClient
from .runner import coalesce, run_tool

DEFAULT_MODEL = "llama-3.3-70b"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000
DEFAULT_WEB_SEARCH = "auto"

DESCRIPTOR = ToolDescriptor(
    tool_id="venice_chat",
    node_name="veniceChatTool",
    display_name="Venice Chat Tool",
    description="Send chat messages to Venice AI LLMs for sub-conversations",
    default_name="Venice Chat",
    documentation_url="https://docs.venice.ai/api-reference/endpoint/chat/completions",
    parameters=(
        ParameterSpec(
            name="message",
            display_name="Message",
            type=ParameterType.STRING,
            default="",
            required=True,
            description="The message to send to the AI",
            rows=4,
        ),
        ParameterSpec(
            name="model",
            display_name="Model",
            type=ParameterType.OPTIONS,
            default=DEFAULT_MODEL,
            description="The model to use for chat completion",
            options=option_values(
                ("Llama 3.3 70B", "llama-3.3-70b"),
                ("Llama 3.1 405B", "llama-3.1-405b"),
                ("DeepSeek R1 Llama 70B", "deepseek-r1-llama-70b"),
                ("DeepSeek R1", "deepseek-r1"),
                ("Qwen 2.5 72B", "qwen-2.5-72b"),
                ("Dolphin 2.9.2 Mixtral", "dolphin-2.9.2-mixtral-8x22b"),
            ),
        ),
        ParameterSpec(
            name="options",
            display_name="Options",
            type=ParameterType.COLLECTION,
            default={},
            placeholder="Add Option",
            children=(
                ParameterSpec(
                    name="system_prompt",
                    display_name="System Prompt",
                    type=ParameterType.STRING,
                    default="",
                    description="System message to set the behavior of the assistant",
                    rows=4,
                ),
                ParameterSpec(
                    name="temperature",
                    display_name="Temperature",
                    type=ParameterType.NUMBER,
                    default=DEFAULT_TEMPERATURE,
                    description="Sampling temperature (0-2)",
                    min_value=0,
                    max_value=2,
                ),
                ParameterSpec(
                    name="max_tokens",
                    display_name="Max Tokens",
                    type=ParameterType.NUMBER,
                    default=DEFAULT_MAX_TOKENS,
                    description="Maximum number of tokens to generate",
                ),
                ParameterSpec(
                    name="character_id",
                    display_name="Character ID",
                    type=ParameterType.STRING,
                    default="",
                    description="Optional Venice character persona ID to use",
                ),
                ParameterSpec(
                    name="enable_web_search",
                    display_name="Enable Web Search",
                    type=ParameterType.OPTIONS,
                    default=DEFAULT_WEB_SEARCH,
                    description="Whether to enable web search for answers",
                    options=option_values(("Auto", "auto"), ("Always", "on"), ("Never", "off")),
                ),
                ParameterSpec(
                    name="include_venice_system_prompt",
                    display_name="Include Venice System Prompt",
                    type=ParameterType.BOOLEAN,
                    default=False,
                    description="Whether to include the Venice default system prompt",
                ),
            ),
        ),
    ),
)


def build_messages(message: str, system_prompt: Optional[str]) -> List[Dict[str, str]]:
    messages: List[Dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": message})
    return messages


def _first_choice_content(payload: Any) -> str:
    if not isinstance(payload, Mapping):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], Mapping):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, Mapping):
        return ""
    return message.get("content") or ""


@dataclass(slots=True)
class VeniceChatTool:
    """Tool adapter for chat completions."""

    client: Optional[VeniceClient] = None

    @property
    def tool_id(self) -> str:
        return DESCRIPTOR.tool_id

    def describe(self) -> ToolDescriptor:
        return DESCRIPTOR

    def build_request(self, params: Mapping[str, Any], item: Item, index: int) -> RequestDescriptor:
        options = params.get("options") or {}
        venice_parameters: Dict[str, Any] = {
            "enable_web_search": coalesce(options.get("enable_web_search"), DEFAULT_WEB_SEARCH),
            "include_venice_system_prompt": coalesce(options.get("include_venice_system_prompt"), False),
        }
        if options.get("character_id"):
            venice_parameters["character_id"] = options["character_id"]

        body = {
            "model": params["model"],
            "messages": build_messages(params["message"], options.get("system_prompt")),
            "temperature": coalesce(options.get("temperature"), DEFAULT_TEMPERATURE),
            "max_tokens": coalesce(options.get("max_tokens"), DEFAULT_MAX_TOKENS),
            "venice_parameters": venice_parameters,
        }
        return RequestDescriptor(method="POST", path="/chat/completions", json_body=body)

    def shape_result(self, params: Mapping[str, Any], item: Item, index: int, response: APIResponse) -> ResultItem:
        payload = response.json()
        usage = payload.get("usage") if isinstance(payload, Mapping) else None
        return ResultItem(
            json={
                "success": True,
                "model": params["model"],
                "input": params["message"],
                "output": _first_choice_content(payload),
                "usage": usage,
            },
            paired_item=index,
        )

    def execute(self, items: Sequence[Item], context: ExecutionContext) -> List[List[ResultItem]]:
        return run_tool(self, items, context)
