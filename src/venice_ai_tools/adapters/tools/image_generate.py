"""
Image generation tool backed by ``POST /image/generate``.

The request body merges the prompt and model with the default dimensions and
sampler settings, overlays every option the caller supplied, and finally drops
keys whose value is exactly ``""`` or ``None``. Numeric zeros (``seed=0``) and
``False`` flags are sent as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from ...core.context import ExecutionContext
from ...core.items import Item, ResultItem
from ...core.schema import ParameterSpec, ParameterType, ToolDescriptor, option_values
from ..api.base import APIResponse, RequestDescriptor, UpstreamError
from ..api.venice import VeniceClient
from .runner import run_tool, strip_empty

DEFAULT_MODEL = "fluently-xl"
DEFAULT_OPTIONS: Mapping[str, Any] = {
    "width": 1024,
    "height": 1024,
    "steps": 20,
    "cfg_scale": 7.5,
}

STYLE_PRESETS = (
    "3D Model",
    "Analog Film",
    "Anime",
    "Cinematic",
    "Comic Book",
    "Digital Art",
    "Fantasy Art",
    "Photographic",
    "Pixel Art",
)

DESCRIPTOR = ToolDescriptor(
    tool_id="venice_image_generate",
    node_name="veniceImageGenerateTool",
    display_name="Venice Image Generate Tool",
    description="Generate images from text prompts using Venice AI",
    default_name="Venice Image Generate",
    documentation_url="https://docs.venice.ai/api-reference/endpoint/image/generate",
    parameters=(
        ParameterSpec(
            name="prompt",
            display_name="Prompt",
            type=ParameterType.STRING,
            default="",
            required=True,
            description="The text prompt to generate an image from",
            rows=4,
        ),
        ParameterSpec(
            name="model",
            display_name="Model",
            type=ParameterType.OPTIONS,
            default=DEFAULT_MODEL,
            description="The model to use for image generation",
            options=option_values(
                ("Fluently XL", "fluently-xl"),
                ("Flux Dev", "flux-dev"),
                ("Flux Dev Uncensored", "flux-dev-uncensored"),
                ("Flux Schnell", "flux-schnell"),
                ("HiDream", "hidream"),
                ("Stable Diffusion 3.5", "stable-diffusion-3.5"),
                ("Lustify", "lustify"),
                ("Pony Realism", "pony-realism"),
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
                    name="width",
                    display_name="Width",
                    type=ParameterType.NUMBER,
                    default=DEFAULT_OPTIONS["width"],
                    description="Width of the generated image in pixels",
                ),
                ParameterSpec(
                    name="height",
                    display_name="Height",
                    type=ParameterType.NUMBER,
                    default=DEFAULT_OPTIONS["height"],
                    description="Height of the generated image in pixels",
                ),
                ParameterSpec(
                    name="steps",
                    display_name="Steps",
                    type=ParameterType.NUMBER,
                    default=DEFAULT_OPTIONS["steps"],
                    description="Number of inference steps",
                ),
                ParameterSpec(
                    name="cfg_scale",
                    display_name="CFG Scale",
                    type=ParameterType.NUMBER,
                    default=DEFAULT_OPTIONS["cfg_scale"],
                    description="Classifier-free guidance scale",
                ),
                ParameterSpec(
                    name="negative_prompt",
                    display_name="Negative Prompt",
                    type=ParameterType.STRING,
                    default="",
                    description="What to avoid in the generated image",
                ),
                ParameterSpec(
                    name="style_preset",
                    display_name="Style Preset",
                    type=ParameterType.OPTIONS,
                    default="",
                    description="Style preset for the generated image",
                    options=option_values(("None", ""), *((preset, preset) for preset in STYLE_PRESETS)),
                ),
                ParameterSpec(
                    name="seed",
                    display_name="Seed",
                    type=ParameterType.NUMBER,
                    default=0,
                    description="Random seed (0 for random)",
                ),
                ParameterSpec(
                    name="hide_watermark",
                    display_name="Hide Watermark",
                    type=ParameterType.BOOLEAN,
                    default=False,
                    description="Whether to hide the Venice watermark",
                ),
            ),
        ),
    ),
)


@dataclass(slots=True)
class VeniceImageGenerateTool:
    client: Optional[VeniceClient] = None

    @property
    def tool_id(self) -> str:
        return DESCRIPTOR.tool_id

    def describe(self) -> ToolDescriptor:
        return DESCRIPTOR

    def build_request(self, params: Mapping[str, Any], item: Item, index: int) -> RequestDescriptor:
        options = params.get("options") or {}
        body = strip_empty(
            {
                "model": params["model"],
                "prompt": params["prompt"],
                **DEFAULT_OPTIONS,
                **options,
            }
        )
        return RequestDescriptor(method="POST", path="/image/generate", json_body=body)

    def shape_result(self, params: Mapping[str, Any], item: Item, index: int, response: APIResponse) -> ResultItem:
        payload = response.json()
        if not isinstance(payload, Mapping):
            raise UpstreamError("Unexpected payload from Venice image generation endpoint.", status_code=response.status_code)
        return ResultItem(
            json={"success": True, "model": params["model"], "prompt": params["prompt"], **payload},
            paired_item=index,
        )

    def execute(self, items: Sequence[Item], context: ExecutionContext) -> List[List[ResultItem]]:
        return run_tool(self, items, context)
