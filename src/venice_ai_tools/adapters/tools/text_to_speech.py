"""
Text-to-speech tool backed by ``POST /audio/speech``.

The request is JSON but the response is raw audio, which is returned as a
binary attachment named ``speech.<format>`` with MIME type ``audio/<format>``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from ...core.context import ExecutionContext
from ...core.items import BinaryAttachment, Item, ResultItem
from ...core.schema import ParameterSpec, ParameterType, ToolDescriptor, option_values
from ..api.base import APIResponse, RequestDescriptor
from ..api.venice import VeniceClient
from .runner import run_tool

SPEECH_MODEL = "tts-kokoro"
DEFAULT_VOICE = "af_sky"
DEFAULT_FORMAT = "mp3"
DEFAULT_SPEED = 1
OUTPUT_PROPERTY = "data"

DESCRIPTOR = ToolDescriptor(
    tool_id="venice_text_to_speech",
    node_name="veniceTextToSpeechTool",
    display_name="Venice Text to Speech Tool",
    description="Convert text to speech audio using Venice AI",
    default_name="Venice Text to Speech",
    documentation_url="https://docs.venice.ai/api-reference/endpoint/audio/speech",
    parameters=(
        ParameterSpec(
            name="text",
            display_name="Text",
            type=ParameterType.STRING,
            default="",
            required=True,
            description="The text to convert to speech (max 4096 characters)",
            rows=4,
        ),
        ParameterSpec(
            name="voice",
            display_name="Voice",
            type=ParameterType.OPTIONS,
            default=DEFAULT_VOICE,
            description="The voice to use for speech synthesis",
            options=option_values(
                ("Sky (Female)", "af_sky"),
                ("Bella (Female)", "af_bella"),
                ("Nova (Female)", "af_nova"),
                ("Nicole (Female)", "af_nicole"),
                ("Sarah (Female)", "af_sarah"),
                ("Adam (Male)", "am_adam"),
                ("Echo (Male)", "am_echo"),
                ("Eric (Male)", "am_eric"),
                ("Michael (Male)", "am_michael"),
                ("Liam (Male)", "am_liam"),
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
                    name="response_format",
                    display_name="Response Format",
                    type=ParameterType.OPTIONS,
                    default=DEFAULT_FORMAT,
                    description="The format of the output audio",
                    options=option_values(
                        ("MP3", "mp3"),
                        ("Opus", "opus"),
                        ("AAC", "aac"),
                        ("FLAC", "flac"),
                        ("WAV", "wav"),
                        ("PCM", "pcm"),
                    ),
                ),
                ParameterSpec(
                    name="speed",
                    display_name="Speed",
                    type=ParameterType.NUMBER,
                    default=DEFAULT_SPEED,
                    description="Speed of the speech (0.25-4.0)",
                    min_value=0.25,
                    max_value=4,
                ),
            ),
        ),
    ),
)


def _response_format(params: Mapping[str, Any]) -> str:
    options = params.get("options") or {}
    return options.get("response_format") or DEFAULT_FORMAT


@dataclass(slots=True)
class VeniceTextToSpeechTool:
    client: Optional[VeniceClient] = None

    @property
    def tool_id(self) -> str:
        return DESCRIPTOR.tool_id

    def describe(self) -> ToolDescriptor:
        return DESCRIPTOR

    def build_request(self, params: Mapping[str, Any], item: Item, index: int) -> RequestDescriptor:
        options = params.get("options") or {}
        body = {
            "model": SPEECH_MODEL,
            "input": params["text"],
            "voice": params["voice"],
            "response_format": _response_format(params),
            # zero is not a valid speed, so it falls back like a missing value
            "speed": options.get("speed") or DEFAULT_SPEED,
        }
        return RequestDescriptor(method="POST", path="/audio/speech", json_body=body, binary_response=True)

    def shape_result(self, params: Mapping[str, Any], item: Item, index: int, response: APIResponse) -> ResultItem:
        audio_format = _response_format(params)
        audio = BinaryAttachment(
            data=response.content,
            file_name=f"speech.{audio_format}",
            mime_type=f"audio/{audio_format}",
        )
        return ResultItem(
            json={
                "success": True,
                "voice": params["voice"],
                "format": audio_format,
                "textLength": len(params["text"]),
            },
            binary={OUTPUT_PROPERTY: audio},
            paired_item=index,
        )

    def execute(self, items: Sequence[Item], context: ExecutionContext) -> List[List[ResultItem]]:
        return run_tool(self, items, context)
