"""
Image upscale tool backed by ``POST /image/upscale``.

The image is read from the item's binary attachment named by
``binary_property`` and posted as a multipart form together with the scale and
optional enhancement fields. The raw response bytes come back as a new
attachment named ``upscaled_<original file name>``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ...core.context import ExecutionContext
from ...core.items import BinaryAttachment, Item, ResultItem
from ...core.schema import ParameterSpec, ParameterType, ToolDescriptor, option_values
from ..api.base import APIResponse, RequestDescriptor
from ..api.venice import VeniceClient
from ..base import BinaryDataMissingError
from .runner import run_tool, stringify

DEFAULT_BINARY_PROPERTY = "data"
DEFAULT_SCALE = 2
DEFAULT_FILE_NAME = "image"
DEFAULT_MIME_TYPE = "image/png"
OUTPUT_PROPERTY = "data"

DESCRIPTOR = ToolDescriptor(
    tool_id="venice_image_upscale",
    node_name="veniceImageUpscaleTool",
    display_name="Venice Image Upscale Tool",
    description="Upscale and enhance images using Venice AI",
    default_name="Venice Image Upscale",
    documentation_url="https://docs.venice.ai/api-reference/endpoint/image/upscale",
    parameters=(
        ParameterSpec(
            name="binary_property",
            display_name="Binary Property",
            type=ParameterType.STRING,
            default=DEFAULT_BINARY_PROPERTY,
            required=True,
            description="Name of the binary property containing the image to upscale",
        ),
        ParameterSpec(
            name="scale",
            display_name="Scale Factor",
            type=ParameterType.OPTIONS,
            default=DEFAULT_SCALE,
            description="How much to upscale the image",
            options=option_values(("2x", 2), ("4x", 4)),
        ),
        ParameterSpec(
            name="options",
            display_name="Options",
            type=ParameterType.COLLECTION,
            default={},
            placeholder="Add Option",
            children=(
                ParameterSpec(
                    name="enhance",
                    display_name="Enhance",
                    type=ParameterType.BOOLEAN,
                    default=False,
                    description="Whether to enhance the upscaled image",
                ),
                ParameterSpec(
                    name="enhance_creativity",
                    display_name="Enhance Creativity",
                    type=ParameterType.NUMBER,
                    default=0.35,
                    description="Creativity level for enhancement (0-1)",
                    min_value=0,
                    max_value=1,
                ),
                ParameterSpec(
                    name="enhance_prompt",
                    display_name="Enhance Prompt",
                    type=ParameterType.STRING,
                    default="",
                    description="Optional prompt for enhancement direction",
                ),
            ),
        ),
    ),
)


def require_attachment(item: Item, property_name: str, index: int) -> BinaryAttachment:
    """Return the attachment or raise :class:`BinaryDataMissingError` naming the item."""

    if not item.binary:
        raise BinaryDataMissingError("No binary data exists on item!", item_index=index)
    attachment = item.get_binary(property_name)
    if attachment is None:
        raise BinaryDataMissingError(f'No binary data property "{property_name}" exists on item!', item_index=index)
    return attachment


@dataclass(slots=True)
class VeniceImageUpscaleTool:
    client: Optional[VeniceClient] = None

    @property
    def tool_id(self) -> str:
        return DESCRIPTOR.tool_id

    def describe(self) -> ToolDescriptor:
        return DESCRIPTOR

    def build_request(self, params: Mapping[str, Any], item: Item, index: int) -> RequestDescriptor:
        attachment = require_attachment(item, params["binary_property"], index)
        options = params.get("options") or {}

        form: Dict[str, str] = {"scale": stringify(params["scale"])}
        if options.get("enhance") is not None:
            form["enhance"] = stringify(options["enhance"])
        if options.get("enhance_creativity") is not None:
            form["enhanceCreativity"] = stringify(options["enhance_creativity"])
        if options.get("enhance_prompt"):
            form["prompt"] = str(options["enhance_prompt"])

        image = (
            attachment.file_name or DEFAULT_FILE_NAME,
            attachment.data,
            attachment.mime_type or DEFAULT_MIME_TYPE,
        )
        return RequestDescriptor(method="POST", path="/image/upscale", form_data=form, files={"image": image}, binary_response=True)

    def shape_result(self, params: Mapping[str, Any], item: Item, index: int, response: APIResponse) -> ResultItem:
        source = require_attachment(item, params["binary_property"], index)
        options = params.get("options") or {}
        upscaled = BinaryAttachment(
            data=response.content or b"",
            file_name=f"upscaled_{source.file_name or DEFAULT_FILE_NAME}",
            mime_type=response.content_type or DEFAULT_MIME_TYPE,
        )
        return ResultItem(
            json={"success": True, "scale": params["scale"], "enhance": bool(options.get("enhance") or False)},
            binary={OUTPUT_PROPERTY: upscaled},
            paired_item=index,
        )

    def execute(self, items: Sequence[Item], context: ExecutionContext) -> List[List[ResultItem]]:
        return run_tool(self, items, context)
